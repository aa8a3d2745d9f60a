"""
Budget item service: line items of a request.

Every mutation locks the parent request, checks that it is editable, applies
the change and recomputes the parent total in the same transaction.
Create/update signal a locked parent with NotPermitted; delete returns False.
"""

from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from budget_workflow.errors import NotFound
from budget_workflow.models.budget_item import BudgetItem
from budget_workflow.schemas.budget_item import BudgetItemCreate, BudgetItemUpdate
from budget_workflow.services.lifecycle import (
    EDITABLE_STATUSES,
    ensure_editable,
    is_editable,
    lock_request,
)
from budget_workflow.services.totals import recalculate_request_total
from budget_workflow.services.validation import validate_payload

logger = structlog.get_logger()


def derive_total_cost(
    changes: dict[str, Any], current_unit_cost: Decimal, current_quantity: Optional[int]
) -> Optional[Decimal]:
    """
    total_cost implied by an update, or None when it should not be recomputed.

    Recomputed only when unit_cost or quantity changes and total_cost is not
    given explicitly. Missing values fall back to the stored ones; a null
    quantity counts as 1.
    """
    if "total_cost" in changes:
        return None
    if "unit_cost" not in changes and "quantity" not in changes:
        return None

    unit_cost = changes.get("unit_cost", current_unit_cost)
    quantity = changes["quantity"] if "quantity" in changes else current_quantity
    if quantity is None:
        quantity = 1
    return Decimal(unit_cost) * quantity


async def get_item(session: AsyncSession, item_id: int) -> Optional[BudgetItem]:
    result = await session.execute(select(BudgetItem).where(BudgetItem.id == item_id))
    return result.scalar_one_or_none()


async def lock_item(session: AsyncSession, item_id: int) -> Optional[BudgetItem]:
    """Reload an item row for update, discarding any stale identity-map state."""
    result = await session.execute(
        select(BudgetItem)
        .where(BudgetItem.id == item_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_items(session: AsyncSession, request_id: int) -> list[BudgetItem]:
    result = await session.execute(
        select(BudgetItem)
        .where(BudgetItem.budget_request_id == request_id)
        .order_by(BudgetItem.category, BudgetItem.created_at, BudgetItem.id)
    )
    return list(result.scalars().all())


async def create_item(
    session: AsyncSession,
    payload: Union[Mapping[str, Any], BudgetItemCreate],
    editable: frozenset[str] = EDITABLE_STATUSES,
) -> BudgetItem:
    data = validate_payload("create_item", payload)

    request = await lock_request(session, data.budget_request_id)
    if not request:
        raise NotFound("Budget request", data.budget_request_id)
    ensure_editable(request, "add budget items to", editable)

    item = BudgetItem(**data.model_dump())
    session.add(item)
    await session.flush()

    await recalculate_request_total(session, request)

    logger.info(
        "budget_item_created",
        item_id=item.id,
        request_id=request.id,
        total_cost=str(item.total_cost),
    )
    return item


async def update_item(
    session: AsyncSession,
    payload: Union[Mapping[str, Any], BudgetItemUpdate],
    editable: frozenset[str] = EDITABLE_STATUSES,
) -> BudgetItem:
    data = validate_payload("update_item", payload)

    item = await get_item(session, data.id)
    if not item:
        raise NotFound("Budget item", data.id)

    request = await lock_request(session, item.budget_request_id)
    if not request:
        raise NotFound("Budget request", item.budget_request_id)
    ensure_editable(request, "update budget items of", editable)

    # Re-read under the parent lock; the first read may predate a committed edit.
    item = await lock_item(session, data.id)
    if not item:
        raise NotFound("Budget item", data.id)

    changes = data.model_dump(exclude_unset=True)
    changes.pop("id", None)

    derived = derive_total_cost(changes, item.unit_cost, item.quantity)
    if derived is not None:
        # Same bounds as an explicit total_cost.
        checked = validate_payload("update_item", {"id": item.id, "total_cost": derived})
        changes["total_cost"] = checked.total_cost

    for field, val in changes.items():
        setattr(item, field, val)
    await session.flush()

    await recalculate_request_total(session, request)

    logger.info(
        "budget_item_updated",
        item_id=item.id,
        request_id=request.id,
        fields=sorted(changes),
        total_cost=str(item.total_cost),
    )
    return item


async def delete_item(
    session: AsyncSession,
    item_id: int,
    editable: frozenset[str] = EDITABLE_STATUSES,
) -> bool:
    item = await get_item(session, item_id)
    if not item:
        return False

    request = await lock_request(session, item.budget_request_id)
    if not request:
        logger.warning("budget_item_orphaned", item_id=item_id)
        return False

    if not is_editable(request.status, editable):
        logger.info(
            "budget_item_delete_refused",
            item_id=item_id,
            request_id=request.id,
            status=request.status,
        )
        return False

    item = await lock_item(session, item_id)
    if not item:
        logger.info("budget_item_already_deleted", item_id=item_id, request_id=request.id)
        return False

    await session.delete(item)
    await session.flush()

    await recalculate_request_total(session, request)

    logger.info("budget_item_deleted", item_id=item_id, request_id=request.id)
    return True
