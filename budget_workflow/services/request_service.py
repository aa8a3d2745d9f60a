"""
Budget request service: create, read, partial update, delete and submit.

All functions use the caller's session (no commit). get_db() auto-commits.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from budget_workflow.errors import (
    InvalidAmount,
    InvalidTransition,
    MissingFields,
    NotFound,
    NotPermitted,
)
from budget_workflow.models.budget_request import BudgetRequest
from budget_workflow.schemas.budget_request import (
    BudgetRequestCreate,
    BudgetRequestUpdate,
)
from budget_workflow.services.lifecycle import DRAFT, SUBMITTED, lock_request
from budget_workflow.services.totals import count_items
from budget_workflow.services.validation import validate_payload

logger = structlog.get_logger()

# Checked in this order; MissingFields lists them in the same order.
SUBMIT_REQUIRED_FIELDS = (
    "department_name",
    "contact_person",
    "contact_email",
    "request_title",
    "request_description",
    "total_amount",
    "justification",
    "expected_outcomes",
)


async def create_request(
    session: AsyncSession,
    payload: Union[Mapping[str, Any], BudgetRequestCreate],
) -> BudgetRequest:
    data = validate_payload("create_request", payload)

    request = BudgetRequest(**data.model_dump())
    session.add(request)
    await session.flush()

    logger.info(
        "budget_request_created",
        request_id=request.id,
        department=request.department_name,
        fiscal_year=request.fiscal_year,
        status=request.status,
    )
    return request


async def get_request(session: AsyncSession, request_id: int) -> Optional[BudgetRequest]:
    result = await session.execute(
        select(BudgetRequest).where(BudgetRequest.id == request_id)
    )
    return result.scalar_one_or_none()


async def get_request_or_404(session: AsyncSession, request_id: int) -> BudgetRequest:
    request = await get_request(session, request_id)
    if not request:
        raise NotFound("Budget request", request_id)
    return request


async def update_request(
    session: AsyncSession,
    request_id: int,
    payload: Union[Mapping[str, Any], BudgetRequestUpdate],
    editable: Optional[frozenset[str]] = None,
) -> BudgetRequest:
    """
    Apply a partial update. Only fields present in the payload are written.

    Metadata edits are allowed in every status unless an ``editable`` policy
    is passed, in which case requests outside that set raise NotPermitted.
    A direct total_amount write is ignored once the request has items; the
    item-derived total wins.
    """
    data = validate_payload("update_request", payload)

    request = await lock_request(session, request_id)
    if not request:
        raise NotFound("Budget request", request_id)

    if editable is not None and request.status not in editable:
        raise NotPermitted("update", request.status)

    changes = data.model_dump(exclude_unset=True)
    if "total_amount" in changes and await count_items(session, request.id) > 0:
        logger.warning(
            "budget_request_total_write_ignored",
            request_id=request.id,
            requested=str(changes["total_amount"]),
            current=str(request.total_amount),
        )
        changes.pop("total_amount")

    for field, val in changes.items():
        setattr(request, field, val)
    request.updated_at = datetime.utcnow()
    await session.flush()

    logger.info(
        "budget_request_updated",
        request_id=request.id,
        fields=sorted(changes),
    )
    return request


async def delete_request(session: AsyncSession, request_id: int) -> bool:
    """Delete a request; its items and files go with it via ON DELETE CASCADE."""
    request = await get_request(session, request_id)
    if not request:
        return False

    await session.delete(request)
    await session.flush()
    logger.info("budget_request_deleted", request_id=request_id)
    return True


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return len(value.strip()) == 0
    return False


def missing_submit_fields(request: BudgetRequest) -> list[str]:
    return [
        field
        for field in SUBMIT_REQUIRED_FIELDS
        if _is_blank(getattr(request, field))
    ]


def _as_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


async def submit_request(session: AsyncSession, request_id: int) -> BudgetRequest:
    """
    draft -> submitted. Preconditions are checked in order and the first
    failure aborts with nothing written:
      1. request exists            (NotFound)
      2. status is draft           (InvalidTransition, names current status)
      3. required fields present   (MissingFields, names every missing field)
      4. total_amount > 0          (InvalidAmount)
    """
    logger.info("budget_request_submit", request_id=request_id)

    request = await lock_request(session, request_id)
    if not request:
        raise NotFound("Budget request", request_id)

    if request.status != DRAFT:
        raise InvalidTransition(request.id, request.status, SUBMITTED)

    missing = missing_submit_fields(request)
    if missing:
        raise MissingFields(missing)

    total = _as_decimal(request.total_amount)
    if total <= 0:
        raise InvalidAmount(total)

    now = datetime.utcnow()
    request.status = SUBMITTED
    request.submitted_at = now
    request.updated_at = now
    await session.flush()

    logger.info(
        "budget_request_submitted",
        request_id=request.id,
        total_amount=str(request.total_amount),
    )
    return request
