"""Payload builders and direct-insert helpers shared by the test modules."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from budget_workflow.models.budget_item import BudgetItem
from budget_workflow.models.budget_request import BudgetRequest


def request_payload(**overrides) -> dict:
    payload = {
        "department_name": "Department of Public Works",
        "department_code": "DPW",
        "contact_person": "Alex Rivera",
        "contact_email": "alex.rivera@dpw.gov",
        "contact_phone": "555-0100",
        "fiscal_year": 2025,
        "request_title": "Road resurfacing program",
        "request_description": "Resurface the arterial roads in the northern district.",
        "total_amount": "50000.00",
        "priority_level": "high",
        "justification": "Pavement condition index has dropped below the safety threshold.",
        "expected_outcomes": "Twelve kilometres of resurfaced road.",
        "timeline_start": "2025-04-01T00:00:00",
        "timeline_end": "2025-10-31T00:00:00",
    }
    payload.update(overrides)
    return payload


def item_payload(request_id: int, **overrides) -> dict:
    payload = {
        "budget_request_id": request_id,
        "category": "goods_services",
        "description": "Asphalt",
        "unit": "tonne",
        "quantity": 1,
        "unit_cost": "1000.00",
        "total_cost": "1000.00",
        "justification": None,
    }
    payload.update(overrides)
    return payload


def file_payload(request_id: int, **overrides) -> dict:
    payload = {
        "budget_request_id": request_id,
        "filename": "a1b2c3.pdf",
        "original_filename": "cost-breakdown.pdf",
        "file_path": "/tmp/does-not-exist/a1b2c3.pdf",
        "file_size": 2048,
        "mime_type": "application/pdf",
    }
    payload.update(overrides)
    return payload


async def insert_request(session: AsyncSession, **overrides) -> BudgetRequest:
    """Insert a request row directly, bypassing payload validation."""
    values = {
        "department_name": "Department of Health",
        "department_code": None,
        "contact_person": "Sam Lee",
        "contact_email": "sam.lee@health.gov",
        "contact_phone": None,
        "fiscal_year": 2025,
        "request_title": "Clinic equipment",
        "request_description": "Replace diagnostic equipment in rural clinics.",
        "total_amount": Decimal("1000.00"),
        "priority_level": "medium",
        "justification": "Existing equipment is past its service life.",
        "expected_outcomes": "Faster diagnosis in rural clinics.",
        "status": "draft",
    }
    values.update(overrides)
    request = BudgetRequest(**values)
    session.add(request)
    await session.flush()
    return request


async def insert_item(session: AsyncSession, request_id: int, total_cost: str, **overrides) -> BudgetItem:
    values = {
        "budget_request_id": request_id,
        "category": "other",
        "description": "Line item",
        "unit_cost": Decimal(total_cost),
        "total_cost": Decimal(total_cost),
        "created_at": datetime.utcnow(),
    }
    values.update(overrides)
    item = BudgetItem(**values)
    session.add(item)
    await session.flush()
    return item
