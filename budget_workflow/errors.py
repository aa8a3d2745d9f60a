"""
Failure taxonomy for the budget request rule engine.

Services raise these; the FastAPI app renders them as
{"error": {"code": "...", "message": "...", ...}} with the mapped status code.
Storage-layer exceptions (SQLAlchemy, boto3, OS errors) are not wrapped and
propagate unchanged.
"""

from typing import Any, Optional, Sequence


class BudgetWorkflowError(Exception):
    code = "BUDGET_WORKFLOW_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.details()}


class ValidationError(BudgetWorkflowError):
    """Payload violated one or more field constraints. Never mutates state."""

    code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, violations: Sequence[dict[str, Any]], message: Optional[str] = None):
        self.violations = list(violations)
        if message is None:
            message = "; ".join(
                f"{v['field']}: {v['message']}" if v.get("field") else v["message"]
                for v in self.violations
            )
        super().__init__(message)

    @classmethod
    def single(cls, field: str, message: str, type_: str = "value_error") -> "ValidationError":
        return cls([{"field": field, "message": message, "type": type_}], message=message)

    def details(self) -> dict[str, Any]:
        return {"violations": self.violations}


class NotFound(BudgetWorkflowError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id {entity_id} not found")


class InvalidTransition(BudgetWorkflowError):
    code = "INVALID_TRANSITION"
    status_code = 409

    def __init__(self, request_id: Any, current_status: str, target_status: str):
        self.request_id = request_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Budget request with id {request_id} cannot move to {target_status}. "
            f"Current status: {current_status}"
        )

    def details(self) -> dict[str, Any]:
        return {"current_status": self.current_status}


class MissingFields(BudgetWorkflowError):
    code = "MISSING_FIELDS"
    status_code = 422

    def __init__(self, fields: Sequence[str]):
        self.fields = list(fields)
        super().__init__(
            f"Cannot submit budget request. Missing required fields: {', '.join(self.fields)}"
        )

    def details(self) -> dict[str, Any]:
        return {"fields": self.fields}


class InvalidAmount(BudgetWorkflowError):
    code = "INVALID_AMOUNT"
    status_code = 422

    def __init__(self, amount: Any):
        self.amount = amount
        super().__init__(
            "Cannot submit budget request. Total amount must be greater than 0"
        )


class NotPermitted(BudgetWorkflowError):
    """Status-gated mutation rejected because the parent request is locked."""

    code = "NOT_PERMITTED"
    status_code = 409

    def __init__(self, action: str, current_status: str):
        self.action = action
        self.current_status = current_status
        super().__init__(f"Cannot {action} budget request with status: {current_status}")

    def details(self) -> dict[str, Any]:
        return {"current_status": self.current_status}


class StorageFailure(BudgetWorkflowError):
    code = "STORAGE_FAILURE"
    status_code = 502
