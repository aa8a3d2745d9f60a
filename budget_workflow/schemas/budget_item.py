from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

BudgetCategory = Literal[
    "personnel",
    "goods_services",
    "capital_expenditure",
    "operational",
    "maintenance",
    "training",
    "travel",
    "other",
]


class BudgetItemCreate(BaseModel):
    budget_request_id: int
    category: BudgetCategory
    description: str = Field(..., min_length=1)
    unit: Optional[str] = None
    quantity: Optional[int] = Field(None, gt=0)
    unit_cost: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    total_cost: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    justification: Optional[str] = None


class BudgetItemUpdate(BaseModel):
    id: int
    category: Optional[BudgetCategory] = None
    description: Optional[str] = Field(None, min_length=1)
    unit: Optional[str] = None
    quantity: Optional[int] = Field(None, gt=0)
    unit_cost: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    total_cost: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    justification: Optional[str] = None

    @field_validator("category", "description", "unit_cost", "total_cost", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class BudgetItemPatch(BaseModel):
    """Body of PATCH /budget-items/{id}; the id comes from the path."""

    category: Optional[BudgetCategory] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[int] = None
    unit_cost: Optional[Decimal] = None
    total_cost: Optional[Decimal] = None
    justification: Optional[str] = None


class BudgetItemResponse(BaseModel):
    id: int
    budget_request_id: int
    category: str
    description: str
    unit: Optional[str] = None
    quantity: Optional[int] = None
    unit_cost: float
    total_cost: float
    justification: Optional[str] = None
    created_at: str
