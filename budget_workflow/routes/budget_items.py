from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from budget_workflow.database import get_db
from budget_workflow.models.budget_item import BudgetItem
from budget_workflow.schemas.budget_item import (
    BudgetItemCreate,
    BudgetItemPatch,
    BudgetItemResponse,
)
from budget_workflow.schemas.common import DeleteResult
from budget_workflow.services import item_service

router = APIRouter()


def item_to_response(i: BudgetItem) -> BudgetItemResponse:
    return BudgetItemResponse(
        id=i.id,
        budget_request_id=i.budget_request_id,
        category=i.category,
        description=i.description,
        unit=i.unit,
        quantity=i.quantity,
        unit_cost=float(i.unit_cost),
        total_cost=float(i.total_cost),
        justification=i.justification,
        created_at=i.created_at.isoformat() if i.created_at else "",
    )


@router.post("", response_model=BudgetItemResponse, status_code=status.HTTP_201_CREATED)
async def create_budget_item(
    body: BudgetItemCreate,
    db: AsyncSession = Depends(get_db),
):
    item = await item_service.create_item(db, body)
    return item_to_response(item)


@router.patch("/{item_id}", response_model=BudgetItemResponse)
async def update_budget_item(
    item_id: int,
    body: BudgetItemPatch,
    db: AsyncSession = Depends(get_db),
):
    payload = {**body.model_dump(exclude_unset=True), "id": item_id}
    item = await item_service.update_item(db, payload)
    return item_to_response(item)


@router.delete("/{item_id}", response_model=DeleteResult)
async def delete_budget_item(item_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await item_service.delete_item(db, item_id)
    return DeleteResult(deleted=deleted)
