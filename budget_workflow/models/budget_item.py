from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String,
    Integer,
    Numeric,
    DateTime,
    Text,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from budget_workflow.database import Base
from budget_workflow.models.budget_request import _in_clause

BUDGET_CATEGORIES = (
    "personnel",
    "goods_services",
    "capital_expenditure",
    "operational",
    "maintenance",
    "training",
    "travel",
    "other",
)


class BudgetItem(Base):
    __tablename__ = "budget_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    budget_request_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("budget_requests.id", ondelete="CASCADE"),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(Text)
    quantity: Mapped[Optional[int]] = mapped_column(Integer)
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    justification: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint(
            _in_clause("category", BUDGET_CATEGORIES), name="chk_budget_item_category"
        ),
        CheckConstraint(
            "quantity IS NULL OR quantity > 0", name="chk_budget_item_qty"
        ),
        Index("idx_budget_items_request", "budget_request_id"),
    )
