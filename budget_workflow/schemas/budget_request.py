from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

RequestStatus = Literal[
    "draft",
    "submitted",
    "under_review",
    "approved",
    "rejected",
    "revision_requested",
]
PriorityLevel = Literal["critical", "high", "medium", "low"]


class BudgetRequestCreate(BaseModel):
    department_name: str = Field(..., min_length=1)
    department_code: Optional[str] = Field(None, max_length=50)
    contact_person: str = Field(..., min_length=1)
    contact_email: EmailStr
    contact_phone: Optional[str] = Field(None, max_length=20)
    fiscal_year: int = Field(..., ge=2020, le=2050)
    request_title: str = Field(..., min_length=1)
    request_description: str = Field(..., min_length=10)
    total_amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    priority_level: PriorityLevel
    justification: str = Field(..., min_length=20)
    expected_outcomes: str = Field(..., min_length=10)
    timeline_start: Optional[datetime] = None
    timeline_end: Optional[datetime] = None
    status: RequestStatus = "draft"


class BudgetRequestUpdate(BaseModel):
    """Partial update. Omitted fields stay unchanged; explicit null clears nullable ones."""

    department_name: Optional[str] = Field(None, min_length=1)
    department_code: Optional[str] = Field(None, max_length=50)
    contact_person: Optional[str] = Field(None, min_length=1)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=20)
    fiscal_year: Optional[int] = Field(None, ge=2020, le=2050)
    request_title: Optional[str] = Field(None, min_length=1)
    request_description: Optional[str] = Field(None, min_length=10)
    total_amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    priority_level: Optional[PriorityLevel] = None
    justification: Optional[str] = Field(None, min_length=20)
    expected_outcomes: Optional[str] = Field(None, min_length=10)
    timeline_start: Optional[datetime] = None
    timeline_end: Optional[datetime] = None
    status: Optional[RequestStatus] = None
    reviewer_notes: Optional[str] = None

    @field_validator(
        "department_name",
        "contact_person",
        "contact_email",
        "fiscal_year",
        "request_title",
        "request_description",
        "total_amount",
        "priority_level",
        "justification",
        "expected_outcomes",
        "status",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class BudgetRequestQuery(BaseModel):
    department_name: Optional[str] = None
    fiscal_year: Optional[int] = None
    status: Optional[RequestStatus] = None
    priority_level: Optional[PriorityLevel] = None
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)


class BudgetRequestResponse(BaseModel):
    id: int
    department_name: str
    department_code: Optional[str] = None
    contact_person: str
    contact_email: str
    contact_phone: Optional[str] = None
    fiscal_year: int
    request_title: str
    request_description: str
    total_amount: float
    priority_level: str
    justification: str
    expected_outcomes: str
    timeline_start: Optional[str] = None
    timeline_end: Optional[str] = None
    status: str
    submitted_at: Optional[str] = None
    reviewed_at: Optional[str] = None
    reviewer_notes: Optional[str] = None
    created_at: str
    updated_at: str
