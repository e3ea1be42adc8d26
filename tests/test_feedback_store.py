"""
FeedbackStore contract, run against both backends (JSON file and Mongo).
"""

import asyncio
import math
import re

import pytest

from feedback_portal.core.config import LimitsConfig
from feedback_portal.core.errors import ConflictError, NotFound, ValidationError
from feedback_portal.feedbacks.models.enums import FeedbackStatus
from feedback_portal.feedbacks.services.feedback_store import FeedbackStore

ID_PATTERN = re.compile(r"^FB-[A-Za-z0-9_-]{8}$")


@pytest.mark.asyncio
async def test_create_assigns_id_status_and_timestamps(store, valid_fields):
    record = await store.create(valid_fields)

    assert ID_PATTERN.match(record.id)
    assert record.status == FeedbackStatus.PENDING
    assert record.created_at.endswith("Z")
    assert record.created_at_display
    assert record.updated_at is None
    assert record.admin_comment is None


@pytest.mark.asyncio
async def test_get_after_create_returns_equal_record(store, valid_fields):
    created = await store.create(valid_fields)
    fetched = await store.get(created.id)
    assert fetched == created


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["category", "subcategory", "text", "urgency"])
async def test_create_requires_fields(store, valid_fields, missing):
    fields = dict(valid_fields)
    fields[missing] = ""
    with pytest.raises(ValidationError):
        await store.create(fields)

    page = await store.list()
    assert page.total == 0


@pytest.mark.asyncio
async def test_optional_fields_trimmed_capped_and_absent_when_empty(repo, clock, valid_fields):
    store = FeedbackStore(repo, clock=clock, limits=LimitsConfig(max_text_len=10))
    fields = dict(
        valid_fields,
        text="   0123456789ABCDEF  ",
        subcategory="  " + "s" * 150,
        suggestions="  fix the doors  ",
        studentName="  Asha  ",
        rollNo="",
        courseNo="   ",
    )
    record = await store.create(fields)
    doc = record.to_document()

    assert record.text == "0123456789"
    assert len(record.subcategory) == 100
    assert doc["suggestions"] == "fix the doors"
    assert doc["studentName"] == "Asha"
    assert "rollNo" not in doc
    assert "courseNo" not in doc
    assert "department" not in doc
    assert "adminComment" not in doc

    stored = await repo.get(record.id)
    assert "rollNo" not in stored
    assert "courseNo" not in stored


@pytest.mark.asyncio
async def test_list_orders_by_created_at_desc(store, valid_fields):
    ids = [(await store.create(valid_fields)).id for _ in range(5)]

    page = await store.list(limit=50, page=1)

    assert [r.id for r in page.items] == list(reversed(ids))
    stamps = [r.created_at for r in page.items]
    assert all(a > b for a, b in zip(stamps, stamps[1:]))


@pytest.mark.asyncio
async def test_list_filters(store, valid_fields):
    await store.create(dict(valid_fields, category="Academic", text="Lab is cold"))
    await store.create(dict(valid_fields, text="Quiet please", suggestions="Add a LAB sign"))
    await store.create(dict(valid_fields, text="Nothing to see"))

    by_category = await store.list(category="Academic")
    assert by_category.total == 1
    assert by_category.items[0].category == "Academic"

    by_search = await store.list(search="lab")
    assert by_search.total == 2

    combined = await store.list(category="General", search="LAB")
    assert combined.total == 1
    assert combined.items[0].suggestions == "Add a LAB sign"


@pytest.mark.asyncio
async def test_search_is_literal_substring(store, valid_fields):
    await store.create(dict(valid_fields, text="price is 5.00 (approx)"))
    await store.create(dict(valid_fields, text="price is 5x00"))

    page = await store.list(search="5.00 (")
    assert page.total == 1


@pytest.mark.asyncio
async def test_list_status_filter_and_blank_filters_ignored(store, valid_fields):
    a = await store.create(valid_fields)
    await store.create(valid_fields)
    await store.update_status(a.id, "resolved")

    resolved = await store.list(status="resolved")
    assert [r.id for r in resolved.items] == [a.id]

    everything = await store.list(status="  ", category="", search=None)
    assert everything.total == 2


@pytest.mark.asyncio
async def test_pagination_is_stable(store, valid_fields):
    for _ in range(7):
        await store.create(valid_fields)

    seen = []
    for page_no in (1, 2, 3):
        page = await store.list(page=page_no, limit=3)
        assert page.total == 7
        assert page.pages == math.ceil(7 / 3)
        seen.extend(r.id for r in page.items)

    assert len(seen) == 7
    assert len(set(seen)) == 7

    beyond = await store.list(page=10, limit=3)
    assert beyond.items == []
    assert beyond.total == 7


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw_page, raw_limit, page, limit",
    [
        (None, None, 1, 50),
        ("0", "0", 1, 50),
        ("-2", "abc", 1, 50),
        ("2", "500", 2, 200),
        ("3.7", "10.9", 3, 10),
    ],
)
async def test_page_and_limit_clamping(store, raw_page, raw_limit, page, limit):
    result = await store.list(page=raw_page, limit=raw_limit)
    assert result.page == page
    assert result.limit == limit
    assert result.pages == 0


@pytest.mark.asyncio
async def test_update_status_sets_updated_at_and_keeps_comment(store, valid_fields):
    record = await store.create(valid_fields)

    first = await store.update_status(record.id, "in-progress", "  looking into it ")
    assert first.status == FeedbackStatus.IN_PROGRESS
    assert first.admin_comment == "looking into it"
    assert first.updated_at is not None
    assert first.updated_at_display

    second = await store.update_status(record.id, "pending")
    assert second.admin_comment == "looking into it"
    assert second.updated_at > first.updated_at
    assert second.created_at == record.created_at


@pytest.mark.asyncio
async def test_update_status_is_idempotent(store, valid_fields):
    record = await store.create(valid_fields)

    one = await store.update_status(record.id, "resolved")
    two = await store.update_status(record.id, "resolved")

    assert one.status == two.status == FeedbackStatus.RESOLVED
    assert (await store.get(record.id)).status == FeedbackStatus.RESOLVED


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", [None, "", "done", "RESOLVED"])
async def test_update_status_rejects_unknown_status(store, valid_fields, bad):
    record = await store.create(valid_fields)
    with pytest.raises(ValidationError):
        await store.update_status(record.id, bad)


@pytest.mark.asyncio
async def test_update_status_unknown_id(store):
    with pytest.raises(NotFound):
        await store.update_status("FB-missing0", "resolved")


@pytest.mark.asyncio
async def test_resolve_forces_resolved(store, valid_fields):
    record = await store.create(valid_fields)
    resolved = await store.resolve(record.id)
    assert resolved.status == FeedbackStatus.RESOLVED
    assert resolved.updated_at is not None


@pytest.mark.asyncio
async def test_delete(store, valid_fields):
    record = await store.create(valid_fields)

    await store.delete(record.id)

    with pytest.raises(NotFound):
        await store.get(record.id)
    with pytest.raises(NotFound):
        await store.delete(record.id)


@pytest.mark.asyncio
async def test_delete_unknown_id_is_not_found(store):
    with pytest.raises(NotFound):
        await store.delete("FB-nothere")


@pytest.mark.asyncio
async def test_colliding_id_is_conflict(repo, clock, valid_fields):
    store = FeedbackStore(repo, clock=clock, id_factory=lambda: "FB-samesame")
    await store.create(valid_fields)
    with pytest.raises(ConflictError):
        await store.create(valid_fields)
    assert (await store.list()).total == 1


@pytest.mark.asyncio
async def test_concurrent_creates_keep_every_record(store, valid_fields):
    n = 30
    created = await asyncio.gather(
        *(store.create(dict(valid_fields, text=f"note {i}")) for i in range(n))
    )

    page = await store.list(limit=200)
    assert page.total == n
    assert {r.id for r in page.items} == {r.id for r in created}


def _stored(fid, created_at, **extra):
    doc = {
        "id": fid,
        "category": "General",
        "subcategory": "Noise",
        "text": "stored earlier",
        "urgency": "low",
        "status": "pending",
        "createdAt": created_at,
    }
    doc.update(extra)
    return doc


@pytest.mark.asyncio
async def test_numeric_values_in_stored_records_are_read_as_strings(store, repo):
    await repo.insert(_stored("FB-legacy01", "2026-10-19T08:00:01.000Z", urgency=3, category=7))
    await repo.insert(_stored("FB-current1", "2026-10-19T08:00:02.000Z"))

    page = await store.list()

    assert [r.id for r in page.items] == ["FB-current1", "FB-legacy01"]
    legacy = await store.get("FB-legacy01")
    assert legacy.urgency == "3"
    assert legacy.category == "7"


@pytest.mark.asyncio
async def test_unknown_stored_keys_are_kept(store, repo):
    await repo.insert(_stored("FB-legacy02", "2026-10-19T08:00:01.000Z", hostel="B-block"))

    record = await store.get("FB-legacy02")

    assert record.to_document()["hostel"] == "B-block"


@pytest.mark.asyncio
async def test_unreadable_stored_record_is_skipped(store, repo):
    broken = _stored("FB-broken01", "2026-10-19T08:00:01.000Z", status="archived")
    del broken["text"]
    await repo.insert(broken)
    await repo.insert(_stored("FB-current1", "2026-10-19T08:00:02.000Z"))

    page = await store.list()

    assert [r.id for r in page.items] == ["FB-current1"]
    with pytest.raises(NotFound):
        await store.get("FB-broken01")


@pytest.mark.asyncio
async def test_numeric_admin_comment_is_stored_as_text(store, valid_fields):
    created = await store.create(valid_fields)

    updated = await store.update_status(created.id, "resolved", 42)

    assert updated.admin_comment == "42"
