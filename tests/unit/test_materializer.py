"""Tests for view materialization: joins, skips, concurrency and write policy."""

from __future__ import annotations

import asyncio
import logging

import pytest

from hrviews.cache import ReferenceData
from hrviews.errors import MaterializationFailure
from hrviews.materializer import BatchResult, ViewMaterializer, WritePolicy
from hrviews.models import City, Division, DocType, Position
from hrviews.store import Entry

CITY_VIEW = DocType.EMPLOYEE_WITH_CITY_VIEW.value
POSITION_VIEW = DocType.EMPLOYEE_WITH_POSITION_VIEW.value


def _reference():
    return ReferenceData.of(
        cities=[City("c1", "Almaty")],
        divisions=[Division("d1", "IT", "c1")],
        positions=[Position("p1", "Developer")],
    )


def _employee(id="e1", first="Ann", city="c1", division="d1", position="p1"):
    return {
        "type": "employee",
        "id": id,
        "firstName": first,
        "lastName": "Lee",
        "divisionId": division,
        "cityId": city,
        "positionId": position,
    }


def _views(store, doc_type):
    return asyncio.run(store.query(doc_type, {})).items


def _run(store, policy=WritePolicy.ABORT, reference=None):
    materializer = ViewMaterializer(store, reference or _reference(), policy)
    return asyncio.run(materializer.materialize())


def test_employee_with_all_references_gets_both_views(store):
    store.add_raw("employee", _employee())
    report = _run(store)

    city_rows = [i.data for i in _views(store, CITY_VIEW)]
    position_rows = [i.data for i in _views(store, POSITION_VIEW)]
    assert city_rows == [{"type": CITY_VIEW, "id": "e1", "firstName": "Ann", "city": "Almaty"}]
    assert position_rows == [
        {
            "type": POSITION_VIEW,
            "id": "e1",
            "firstName": "Ann",
            "position": "Developer",
            "division": "IT",
        }
    ]
    assert report.employees_total == 1
    assert report.written(DocType.EMPLOYEE_WITH_CITY_VIEW) == 1
    assert report.written(DocType.EMPLOYEE_WITH_POSITION_VIEW) == 1
    assert report.batch.ok


def test_unknown_city_skips_only_city_view(store, caplog):
    store.add_raw("employee", _employee(id="e2", city="unknown"))
    with caplog.at_level(logging.WARNING, logger="hrviews"):
        report = _run(store)

    assert _views(store, CITY_VIEW) == []
    assert len(_views(store, POSITION_VIEW)) == 1
    assert report.missing_city == ["e2"]
    assert "City unknown not found for employee e2" in caplog.text


@pytest.mark.parametrize(
    "overrides",
    [{"position": "p-missing"}, {"division": "d-missing"}, {"position": "x", "division": "y"}],
)
def test_any_missing_position_reference_skips_position_view(store, overrides):
    store.add_raw("employee", _employee(id="e3", **overrides))
    report = _run(store)

    assert _views(store, POSITION_VIEW) == []
    assert len(_views(store, CITY_VIEW)) == 1
    assert report.missing_position == ["e3"]


def test_employee_with_nothing_resolving_gets_no_views(store):
    store.add_raw("employee", _employee(city="x", division="y", position="z"))
    report = _run(store)
    assert _views(store, CITY_VIEW) == []
    assert _views(store, POSITION_VIEW) == []
    assert report.batch.outcomes == []


def test_malformed_employee_excluded_from_both_joins(store):
    bad = _employee(id="bad")
    del bad["firstName"]
    store.add_raw("employee", bad)
    store.add_raw("employee", "garbage")
    store.add_raw("employee", _employee(id="ok"))
    report = _run(store)

    assert report.employees_total == 3
    assert report.employees_invalid == 2
    assert [i.data["id"] for i in _views(store, CITY_VIEW)] == ["ok"]
    assert [i.data["id"] for i in _views(store, POSITION_VIEW)] == ["ok"]


def test_view_id_equals_employee_id(store):
    for n in range(5):
        store.add_raw("employee", _employee(id=f"e{n}", first=f"Name {n}"))
    _run(store)
    ids = sorted(i.data["id"] for i in _views(store, CITY_VIEW))
    assert ids == [f"e{n}" for n in range(5)]


def test_no_employees_writes_nothing(store):
    report = _run(store)
    assert report.employees_total == 0
    assert report.batch.outcomes == []


def test_empty_reference_data_skips_everything(store):
    store.add_raw("employee", _employee())
    report = _run(store, reference=ReferenceData())
    assert report.missing_city == ["e1"]
    assert report.missing_position == ["e1"]
    assert store.count(CITY_VIEW) == 0


def test_repeated_materialization_duplicates_rows(store):
    store.add_raw("employee", _employee())
    _run(store)
    _run(store)
    assert store.count(CITY_VIEW) == 2
    assert store.count(POSITION_VIEW) == 2


def test_employee_query_failure(faulty_store):
    store = faulty_store(fail_query={"employee"})
    with pytest.raises(MaterializationFailure) as exc_info:
        _run(store)
    assert exc_info.value.batch is None
    assert "employee" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_abort_policy_raises_but_keeps_sibling_writes(faulty_store):
    store = faulty_store(fail_post={POSITION_VIEW})
    store.add_raw("employee", _employee(id="e3"))

    with pytest.raises(MaterializationFailure) as exc_info:
        _run(store, WritePolicy.ABORT)

    batch = exc_info.value.batch
    assert isinstance(batch, BatchResult)
    assert [o.doc_type for o in batch.failed] == [DocType.EMPLOYEE_WITH_POSITION_VIEW]
    assert [o.employee_id for o in batch.succeeded] == ["e3"]
    # No rollback: the city row written alongside the failed write stays.
    assert store.count(CITY_VIEW) == 1
    assert store.count(POSITION_VIEW) == 0


def test_all_writes_attempted_even_when_one_fails(faulty_store):
    store = faulty_store(fail_post={CITY_VIEW})
    for n in range(3):
        store.add_raw("employee", _employee(id=f"e{n}"))

    with pytest.raises(MaterializationFailure):
        _run(store)

    assert store.post_attempts.count(CITY_VIEW) == 3
    assert store.post_attempts.count(POSITION_VIEW) == 3
    assert store.count(POSITION_VIEW) == 3


def test_commit_policy_returns_report_with_failures(faulty_store, caplog):
    store = faulty_store(fail_post={CITY_VIEW})
    store.add_raw("employee", _employee())

    with caplog.at_level(logging.ERROR, logger="hrviews"):
        report = _run(store, WritePolicy.COMMIT)

    assert not report.batch.ok
    assert len(report.batch.failed) == 1
    assert report.written(DocType.EMPLOYEE_WITH_POSITION_VIEW) == 1
    assert report.written(DocType.EMPLOYEE_WITH_CITY_VIEW) == 0
    assert "failed" in caplog.text


def test_writes_are_issued_concurrently(store):
    """All posts start before any completes."""
    started: list[str] = []
    release = asyncio.Event()

    class GatedStore(type(store)):
        async def post(self, entry: Entry) -> None:
            started.append(entry.record.data["id"])
            await release.wait()
            await super().post(entry)

    gated = GatedStore()
    for n in range(3):
        gated.add_raw("employee", _employee(id=f"e{n}"))

    async def scenario():
        task = asyncio.create_task(
            ViewMaterializer(gated, _reference()).materialize()
        )
        for _ in range(10):
            await asyncio.sleep(0)
        in_flight = len(started)
        release.set()
        report = await task
        return in_flight, report

    in_flight, report = asyncio.run(scenario())
    assert in_flight == 6
    assert len(report.batch.succeeded) == 6


def test_policy_accepts_string():
    materializer = ViewMaterializer(None, ReferenceData(), "commit")  # type: ignore[arg-type]
    assert materializer._policy is WritePolicy.COMMIT
