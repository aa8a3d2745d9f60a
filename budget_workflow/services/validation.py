"""
Validation layer. Maps an operation name to its payload model and turns
pydantic errors into a ValidationError listing every violated constraint.
"""

from typing import Any, Mapping, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from budget_workflow.errors import ValidationError
from budget_workflow.schemas.budget_item import BudgetItemCreate, BudgetItemUpdate
from budget_workflow.schemas.budget_request import (
    BudgetRequestCreate,
    BudgetRequestQuery,
    BudgetRequestUpdate,
)
from budget_workflow.schemas.file_attachment import FileAttachmentCreate

PAYLOAD_MODELS: dict[str, type[BaseModel]] = {
    "create_request": BudgetRequestCreate,
    "update_request": BudgetRequestUpdate,
    "create_item": BudgetItemCreate,
    "update_item": BudgetItemUpdate,
    "create_file": FileAttachmentCreate,
    "list_requests": BudgetRequestQuery,
}


def violations_from_pydantic(exc: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


def validate_payload(operation: str, payload: Union[Mapping[str, Any], BaseModel]) -> BaseModel:
    """Validate a raw payload for ``operation``; already-typed payloads pass through."""
    try:
        model = PAYLOAD_MODELS[operation]
    except KeyError:
        raise ValueError(f"Unknown operation: {operation}") from None

    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)

    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(violations_from_pydantic(exc)) from exc
