"""Filtered, paginated listing of budget requests, newest first."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from budget_workflow.models.budget_request import BudgetRequest
from budget_workflow.schemas.budget_request import BudgetRequestQuery
from budget_workflow.schemas.common import has_more
from budget_workflow.services.validation import validate_payload

logger = structlog.get_logger()

FILTER_COLUMNS = {
    "department_name": BudgetRequest.department_name,
    "fiscal_year": BudgetRequest.fiscal_year,
    "status": BudgetRequest.status,
    "priority_level": BudgetRequest.priority_level,
}


@dataclass
class RequestPage:
    data: list[BudgetRequest] = field(default_factory=list)
    total: int = 0
    limit: int = 20
    offset: int = 0
    has_more: bool = False


async def list_requests(
    session: AsyncSession,
    query: Union[Mapping[str, Any], BudgetRequestQuery, None] = None,
) -> RequestPage:
    params = validate_payload("list_requests", query or {})

    conditions = [
        column == getattr(params, name)
        for name, column in FILTER_COLUMNS.items()
        if getattr(params, name) is not None
    ]

    count_q = select(func.count(BudgetRequest.id)).where(*conditions)
    total = (await session.execute(count_q)).scalar() or 0

    result = await session.execute(
        select(BudgetRequest)
        .where(*conditions)
        .order_by(BudgetRequest.created_at.desc(), BudgetRequest.id.desc())
        .offset(params.offset)
        .limit(params.limit)
    )
    requests = list(result.scalars().all())

    logger.info(
        "budget_request_list",
        filters={name: getattr(params, name) for name in FILTER_COLUMNS if getattr(params, name) is not None},
        count=len(requests),
        total=total,
    )
    return RequestPage(
        data=requests,
        total=total,
        limit=params.limit,
        offset=params.offset,
        has_more=has_more(params.offset, params.limit, total),
    )
