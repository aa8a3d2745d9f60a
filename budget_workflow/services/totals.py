"""
Total aggregator. Keeps BudgetRequest.total_amount equal to the sum of its
items' total_cost.

Uses the caller's session (no commit). Call after the item mutation and after
the parent row has been locked; the pending item changes are flushed first so
the sum reads the post-mutation item set.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from budget_workflow.models.budget_item import BudgetItem
from budget_workflow.models.budget_request import BudgetRequest

logger = structlog.get_logger()

ZERO = Decimal("0.00")


def sum_costs(costs) -> Decimal:
    """Exact decimal sum; an empty iterable sums to zero."""
    return sum((Decimal(c) for c in costs), ZERO)


async def count_items(session: AsyncSession, request_id: int) -> int:
    result = await session.execute(
        select(func.count(BudgetItem.id)).where(
            BudgetItem.budget_request_id == request_id
        )
    )
    return int(result.scalar() or 0)


async def recalculate_request_total(
    session: AsyncSession, request: BudgetRequest
) -> Decimal:
    """Recompute and store ``request.total_amount``; returns the new total."""
    await session.flush()

    result = await session.execute(
        select(BudgetItem.total_cost).where(
            BudgetItem.budget_request_id == request.id
        )
    )
    total = sum_costs(result.scalars().all())

    previous = request.total_amount
    request.total_amount = total
    request.updated_at = datetime.utcnow()
    await session.flush()

    logger.info(
        "request_total_recalculated",
        request_id=request.id,
        previous=str(previous),
        total=str(total),
    )
    return total
