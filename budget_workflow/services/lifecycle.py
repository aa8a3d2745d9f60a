"""
Lifecycle guard: status classes and row-locked parent reads.

Item and file mutations are only allowed while the parent request is in an
editable status. The check runs against the persisted status read with
SELECT ... FOR UPDATE inside the caller's transaction, so a concurrent status
change cannot slip between the check and the write.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from budget_workflow.errors import NotPermitted
from budget_workflow.models.budget_request import BudgetRequest

logger = structlog.get_logger()

DRAFT = "draft"
SUBMITTED = "submitted"

EDITABLE_STATUSES = frozenset({"draft", "revision_requested"})
LOCKED_STATUSES = frozenset({"submitted", "under_review", "approved", "rejected"})


def is_editable(status: str, editable: frozenset[str] = EDITABLE_STATUSES) -> bool:
    return status in editable


def ensure_editable(
    request: BudgetRequest,
    action: str,
    editable: frozenset[str] = EDITABLE_STATUSES,
) -> None:
    """Raise NotPermitted naming the current status when ``request`` is locked."""
    if not is_editable(request.status, editable):
        logger.warning(
            "budget_request_locked",
            request_id=request.id,
            status=request.status,
            action=action,
        )
        raise NotPermitted(action, request.status)


async def lock_request(
    session: AsyncSession, request_id: int
) -> Optional[BudgetRequest]:
    """Load a request row for update. Returns None if it does not exist."""
    result = await session.execute(
        select(BudgetRequest)
        .where(BudgetRequest.id == request_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
