from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String,
    Integer,
    Numeric,
    DateTime,
    Text,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from budget_workflow.database import Base

REQUEST_STATUSES = (
    "draft",
    "submitted",
    "under_review",
    "approved",
    "rejected",
    "revision_requested",
)
PRIORITY_LEVELS = ("critical", "high", "medium", "low")


def _in_clause(column: str, values: tuple[str, ...]) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


class BudgetRequest(Base):
    __tablename__ = "budget_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    department_name: Mapped[str] = mapped_column(Text, nullable=False)
    department_code: Mapped[Optional[str]] = mapped_column(String(50))
    contact_person: Mapped[str] = mapped_column(Text, nullable=False)
    contact_email: Mapped[str] = mapped_column(Text, nullable=False)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(20))
    fiscal_year: Mapped[int] = mapped_column(Integer, nullable=False)
    request_title: Mapped[str] = mapped_column(Text, nullable=False)
    request_description: Mapped[str] = mapped_column(Text, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    priority_level: Mapped[str] = mapped_column(String(20), nullable=False)
    justification: Mapped[str] = mapped_column(Text, nullable=False)
    expected_outcomes: Mapped[str] = mapped_column(Text, nullable=False)
    timeline_start: Mapped[Optional[datetime]] = mapped_column(DateTime)
    timeline_end: Mapped[Optional[datetime]] = mapped_column(DateTime)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="draft")
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    reviewer_notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint(
            _in_clause("status", REQUEST_STATUSES), name="chk_budget_request_status"
        ),
        CheckConstraint(
            _in_clause("priority_level", PRIORITY_LEVELS),
            name="chk_budget_request_priority",
        ),
        Index("idx_budget_requests_status", "status"),
        Index("idx_budget_requests_created", "created_at"),
        Index("idx_budget_requests_dept_year", "department_name", "fiscal_year"),
    )
