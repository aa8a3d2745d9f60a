"""
Unit tests for budget_workflow/services/request_query.py

Tests: AND-combined filters, newest-first ordering, pagination totals.
"""

import pytest

from budget_workflow.errors import ValidationError
from budget_workflow.services.request_query import list_requests
from tests.helpers import insert_request


async def _seed(session, count: int) -> list[int]:
    ids = []
    for n in range(count):
        request = await insert_request(session, request_title=f"Request {n}")
        ids.append(request.id)
    return ids


@pytest.mark.asyncio
async def test_empty_listing(db_session):
    page = await list_requests(db_session)

    assert page.data == []
    assert page.total == 0
    assert page.has_more is False


@pytest.mark.asyncio
async def test_newest_first(db_session):
    ids = await _seed(db_session, 5)

    page = await list_requests(db_session, {"limit": 10})

    assert [r.id for r in page.data] == list(reversed(ids))


@pytest.mark.asyncio
async def test_pages_cover_every_row_once(db_session):
    ids = await _seed(db_session, 7)
    seen = []
    offset = 0

    while True:
        page = await list_requests(db_session, {"limit": 3, "offset": offset})
        assert page.total == 7
        assert page.has_more == (offset + 3 < 7)
        seen.extend(r.id for r in page.data)
        if not page.has_more:
            break
        offset += 3

    assert sorted(seen) == sorted(ids)
    assert len(seen) == len(set(seen))


@pytest.mark.asyncio
async def test_offset_past_end(db_session):
    await _seed(db_session, 2)

    page = await list_requests(db_session, {"offset": 10})

    assert page.data == []
    assert page.total == 2
    assert page.has_more is False


@pytest.mark.asyncio
async def test_filters_combine_with_and(db_session):
    match = await insert_request(
        db_session, department_name="Parks", fiscal_year=2026, status="submitted", priority_level="high"
    )
    await insert_request(db_session, department_name="Parks", fiscal_year=2026, status="draft", priority_level="high")
    await insert_request(db_session, department_name="Parks", fiscal_year=2025, status="submitted", priority_level="high")
    await insert_request(db_session, department_name="Fire", fiscal_year=2026, status="submitted", priority_level="high")

    page = await list_requests(
        db_session,
        {"department_name": "Parks", "fiscal_year": 2026, "status": "submitted", "priority_level": "high"},
    )

    assert [r.id for r in page.data] == [match.id]
    assert page.total == 1


@pytest.mark.asyncio
async def test_single_filter(db_session):
    await insert_request(db_session, priority_level="critical")
    await insert_request(db_session, priority_level="critical")
    await insert_request(db_session, priority_level="low")

    page = await list_requests(db_session, {"priority_level": "critical"})

    assert page.total == 2
    assert {r.priority_level for r in page.data} == {"critical"}


@pytest.mark.asyncio
async def test_invalid_filter_value(db_session):
    with pytest.raises(ValidationError):
        await list_requests(db_session, {"status": "archived"})
