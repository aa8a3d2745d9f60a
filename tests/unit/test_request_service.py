"""
Unit tests for budget_workflow/services/request_service.py

Runs against an in-memory SQLite database. Tests: create, partial update,
delete cascade, and the ordered submit preconditions.
"""

from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select, func

from budget_workflow.errors import (
    InvalidAmount,
    InvalidTransition,
    MissingFields,
    NotFound,
    NotPermitted,
    ValidationError,
)
from budget_workflow.models.budget_item import BudgetItem
from budget_workflow.models.budget_request import BudgetRequest
from budget_workflow.models.file_attachment import FileAttachment
from budget_workflow.services import request_service
from budget_workflow.services.lifecycle import EDITABLE_STATUSES
from tests.helpers import insert_item, insert_request, request_payload


# ---------------------------------------------------------------------------
# create / get
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_request_defaults_to_draft(db_session):
    request = await request_service.create_request(db_session, request_payload())

    assert request.id is not None
    assert request.status == "draft"
    assert request.total_amount == Decimal("50000.00")
    assert request.submitted_at is None
    assert request.created_at is not None


@pytest.mark.asyncio
async def test_create_request_invalid_payload_writes_nothing(db_session):
    with pytest.raises(ValidationError):
        await request_service.create_request(db_session, request_payload(fiscal_year=1999))

    count = (await db_session.execute(select(func.count(BudgetRequest.id)))).scalar()
    assert count == 0


@pytest.mark.asyncio
async def test_get_request_or_404(db_session):
    with pytest.raises(NotFound):
        await request_service.get_request_or_404(db_session, 999)
    assert await request_service.get_request(db_session, 999) is None


# ---------------------------------------------------------------------------
# update_request
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_partial_update_leaves_omitted_fields_untouched(db_session):
    request = await request_service.create_request(db_session, request_payload())
    before = {
        "department_name": request.department_name,
        "contact_email": request.contact_email,
        "justification": request.justification,
        "timeline_start": request.timeline_start,
        "total_amount": request.total_amount,
    }
    updated_at = request.updated_at

    updated = await request_service.update_request(
        db_session, request.id, {"request_title": "Revised road program"}
    )

    assert updated.request_title == "Revised road program"
    for field, value in before.items():
        assert getattr(updated, field) == value
    assert updated.updated_at >= updated_at


@pytest.mark.asyncio
async def test_explicit_null_clears_nullable_field(db_session):
    request = await request_service.create_request(db_session, request_payload())

    updated = await request_service.update_request(
        db_session, request.id, {"contact_phone": None, "timeline_end": None}
    )

    assert updated.contact_phone is None
    assert updated.timeline_end is None
    assert updated.department_code == "DPW"


@pytest.mark.asyncio
async def test_update_missing_request(db_session):
    with pytest.raises(NotFound):
        await request_service.update_request(db_session, 42, {"request_title": "x"})


@pytest.mark.asyncio
async def test_metadata_update_allowed_on_locked_request(db_session):
    request = await insert_request(db_session, status="approved")

    updated = await request_service.update_request(
        db_session, request.id, {"reviewer_notes": "Approved with conditions"}
    )

    assert updated.reviewer_notes == "Approved with conditions"
    assert updated.status == "approved"


@pytest.mark.asyncio
async def test_stricter_update_policy_blocks_locked_request(db_session):
    request = await insert_request(db_session, status="approved")

    with pytest.raises(NotPermitted) as exc_info:
        await request_service.update_request(
            db_session, request.id, {"request_title": "Changed"}, editable=EDITABLE_STATUSES
        )
    assert exc_info.value.current_status == "approved"


@pytest.mark.asyncio
async def test_reviewer_status_write(db_session):
    request = await insert_request(db_session, status="submitted")

    updated = await request_service.update_request(
        db_session, request.id, {"status": "revision_requested", "reviewer_notes": "Split the equipment line"}
    )
    assert updated.status == "revision_requested"


@pytest.mark.asyncio
async def test_direct_total_write_applies_without_items(db_session):
    request = await insert_request(db_session)

    updated = await request_service.update_request(db_session, request.id, {"total_amount": "1234.50"})

    assert updated.total_amount == Decimal("1234.50")


@pytest.mark.asyncio
async def test_direct_total_write_ignored_once_items_exist(db_session):
    request = await insert_request(db_session, total_amount=Decimal("300.00"))
    await insert_item(db_session, request.id, "300.00")

    updated = await request_service.update_request(
        db_session, request.id, {"total_amount": "9999.00", "request_title": "Still applied"}
    )

    assert updated.total_amount == Decimal("300.00")
    assert updated.request_title == "Still applied"


# ---------------------------------------------------------------------------
# delete_request
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_delete_request_cascades(db_session):
    request = await insert_request(db_session)
    await insert_item(db_session, request.id, "10.00")
    db_session.add(
        FileAttachment(
            budget_request_id=request.id,
            filename="f.pdf",
            original_filename="f.pdf",
            file_path="/tmp/f.pdf",
            file_size=10,
            mime_type="application/pdf",
        )
    )
    await db_session.flush()

    assert await request_service.delete_request(db_session, request.id) is True

    items = (await db_session.execute(select(func.count(BudgetItem.id)))).scalar()
    files = (await db_session.execute(select(func.count(FileAttachment.id)))).scalar()
    assert items == 0
    assert files == 0


@pytest.mark.asyncio
async def test_delete_missing_request_returns_false(db_session):
    assert await request_service.delete_request(db_session, 77) is False


# ---------------------------------------------------------------------------
# submit_request
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_submit_draft(db_session):
    request = await insert_request(db_session, total_amount=Decimal("25000.00"))

    submitted = await request_service.submit_request(db_session, request.id)

    assert submitted.status == "submitted"
    assert isinstance(submitted.submitted_at, datetime)
    assert submitted.updated_at >= submitted.submitted_at
    assert submitted.total_amount == Decimal("25000.00")
    assert isinstance(submitted.total_amount, Decimal)


@pytest.mark.asyncio
async def test_submit_missing_request(db_session):
    with pytest.raises(NotFound):
        await request_service.submit_request(db_session, 404)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status", ["submitted", "under_review", "approved", "rejected", "revision_requested"]
)
async def test_submit_non_draft_names_status(db_session, status):
    # Incomplete on purpose: the status check comes first.
    request = await insert_request(db_session, status=status, contact_person="  ", total_amount=Decimal("0"))

    with pytest.raises(InvalidTransition) as exc_info:
        await request_service.submit_request(db_session, request.id)

    assert exc_info.value.current_status == status
    assert f"Current status: {status}" in str(exc_info.value)


@pytest.mark.asyncio
async def test_submit_lists_every_missing_field_in_order(db_session):
    request = await insert_request(
        db_session,
        expected_outcomes="",
        contact_person="   ",
        request_title="",
    )

    with pytest.raises(MissingFields) as exc_info:
        await request_service.submit_request(db_session, request.id)

    assert exc_info.value.fields == ["contact_person", "request_title", "expected_outcomes"]
    assert str(exc_info.value).endswith("contact_person, request_title, expected_outcomes")
    assert request.status == "draft"


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["0", "-100"])
async def test_submit_rejects_non_positive_total(db_session, amount):
    request = await insert_request(db_session, total_amount=Decimal(amount))

    with pytest.raises(InvalidAmount):
        await request_service.submit_request(db_session, request.id)

    await db_session.refresh(request)
    assert request.status == "draft"
    assert request.submitted_at is None


@pytest.mark.asyncio
async def test_submit_failure_does_not_flush():
    """A failed precondition writes nothing to the session."""
    request = MagicMock()
    request.id = 5
    request.status = "draft"
    request.total_amount = Decimal("-100")
    for field in request_service.SUBMIT_REQUIRED_FIELDS:
        if field != "total_amount":
            setattr(request, field, "filled in")

    session = AsyncMock()
    session.flush = AsyncMock()
    result = MagicMock()
    result.scalar_one_or_none.return_value = request
    session.execute.return_value = result

    with pytest.raises(InvalidAmount):
        await request_service.submit_request(session, 5)

    session.flush.assert_not_awaited()
    assert request.status == "draft"
