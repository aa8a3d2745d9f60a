from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from budget_workflow.database import get_db
from budget_workflow.models.budget_request import BudgetRequest
from budget_workflow.routes.budget_items import item_to_response
from budget_workflow.routes.files import file_to_response
from budget_workflow.schemas.budget_item import BudgetItemResponse
from budget_workflow.schemas.budget_request import (
    BudgetRequestCreate,
    BudgetRequestQuery,
    BudgetRequestResponse,
    BudgetRequestUpdate,
    PriorityLevel,
    RequestStatus,
)
from budget_workflow.schemas.common import DeleteResult, PaginatedResponse
from budget_workflow.schemas.file_attachment import FileAttachmentResponse
from budget_workflow.services import file_service, item_service, request_service
from budget_workflow.services.request_query import list_requests

router = APIRouter()


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def request_to_response(r: BudgetRequest) -> BudgetRequestResponse:
    return BudgetRequestResponse(
        id=r.id,
        department_name=r.department_name,
        department_code=r.department_code,
        contact_person=r.contact_person,
        contact_email=r.contact_email,
        contact_phone=r.contact_phone,
        fiscal_year=r.fiscal_year,
        request_title=r.request_title,
        request_description=r.request_description,
        total_amount=float(r.total_amount),
        priority_level=r.priority_level,
        justification=r.justification,
        expected_outcomes=r.expected_outcomes,
        timeline_start=_iso(r.timeline_start),
        timeline_end=_iso(r.timeline_end),
        status=r.status,
        submitted_at=_iso(r.submitted_at),
        reviewed_at=_iso(r.reviewed_at),
        reviewer_notes=r.reviewer_notes,
        created_at=_iso(r.created_at) or "",
        updated_at=_iso(r.updated_at) or "",
    )


# ---------- LIST / GET ----------


@router.get("", response_model=PaginatedResponse[BudgetRequestResponse])
async def list_budget_requests(
    department_name: Optional[str] = Query(None),
    fiscal_year: Optional[int] = Query(None),
    request_status: Optional[RequestStatus] = Query(None, alias="status"),
    priority_level: Optional[PriorityLevel] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    query = BudgetRequestQuery(
        department_name=department_name,
        fiscal_year=fiscal_year,
        status=request_status,
        priority_level=priority_level,
        limit=limit,
        offset=offset,
    )
    page = await list_requests(db, query)
    return PaginatedResponse(
        data=[request_to_response(r) for r in page.data],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        has_more=page.has_more,
    )


@router.get("/{request_id}", response_model=BudgetRequestResponse)
async def get_budget_request(request_id: int, db: AsyncSession = Depends(get_db)):
    request = await request_service.get_request_or_404(db, request_id)
    return request_to_response(request)


@router.get("/{request_id}/items", response_model=list[BudgetItemResponse])
async def list_budget_request_items(request_id: int, db: AsyncSession = Depends(get_db)):
    items = await item_service.list_items(db, request_id)
    return [item_to_response(i) for i in items]


@router.get("/{request_id}/files", response_model=list[FileAttachmentResponse])
async def list_budget_request_files(request_id: int, db: AsyncSession = Depends(get_db)):
    files = await file_service.list_files(db, request_id)
    return [file_to_response(f) for f in files]


# ---------- CREATE / UPDATE / DELETE ----------


@router.post("", response_model=BudgetRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_budget_request(
    body: BudgetRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    request = await request_service.create_request(db, body)
    return request_to_response(request)


@router.patch("/{request_id}", response_model=BudgetRequestResponse)
async def update_budget_request(
    request_id: int,
    body: BudgetRequestUpdate,
    db: AsyncSession = Depends(get_db),
):
    request = await request_service.update_request(db, request_id, body)
    return request_to_response(request)


@router.delete("/{request_id}", response_model=DeleteResult)
async def delete_budget_request(request_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await request_service.delete_request(db, request_id)
    return DeleteResult(deleted=deleted)


# ---------- SUBMIT ----------


@router.post("/{request_id}/submit", response_model=BudgetRequestResponse)
async def submit_budget_request(request_id: int, db: AsyncSession = Depends(get_db)):
    request = await request_service.submit_request(db, request_id)
    return request_to_response(request)
