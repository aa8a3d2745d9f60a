"""Central model registry: import all models so Alembic autodiscover works."""

from budget_workflow.database import Base  # noqa: F401

from budget_workflow.models.budget_request import BudgetRequest  # noqa: F401
from budget_workflow.models.budget_item import BudgetItem  # noqa: F401
from budget_workflow.models.file_attachment import FileAttachment  # noqa: F401
