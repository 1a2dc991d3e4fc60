"""Materialization of denormalized employee views.

Every valid employee is joined against the reference cache twice,
independently:

  - city join      → ``employeeWithCity_view``     (needs cityId)
  - position join  → ``employeeWithPosition_view`` (needs positionId and divisionId)

A join with any unresolved reference is skipped with a warning; partial rows
are never written. All resulting writes are issued concurrently and every
one is awaited to completion, then the batch outcome is judged against the
configured ``WritePolicy``. Successful writes are never rolled back.

Views are appended, not upserted: running materialization again over the
same data stores a second copy of every row.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from hrviews.cache import ReferenceData
from hrviews.errors import MaterializationFailure
from hrviews.models import (
    DocType,
    Employee,
    EmployeeWithCityView,
    EmployeeWithPositionView,
)
from hrviews.store import DocumentStore, Entry
from hrviews.validation import Invalid, validate

logger = logging.getLogger(__name__)

ViewRow = Union[EmployeeWithCityView, EmployeeWithPositionView]


class WritePolicy(str, Enum):
    """What to do when some view writes in a batch fail."""

    ABORT = "abort"  # raise MaterializationFailure, keep what was written
    COMMIT = "commit"  # keep what was written, report failures, do not raise


@dataclass(frozen=True)
class WriteOutcome:
    doc_type: DocType
    employee_id: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Per-write outcomes for one materialization fan-out."""

    outcomes: list[WriteOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[WriteOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[WriteOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class MaterializationReport:
    employees_total: int = 0
    employees_invalid: int = 0
    missing_city: list[str] = field(default_factory=list)
    missing_position: list[str] = field(default_factory=list)
    batch: BatchResult = field(default_factory=BatchResult)

    def written(self, doc_type: DocType) -> int:
        """Number of successfully written rows of *doc_type*."""
        return sum(1 for o in self.batch.succeeded if o.doc_type is doc_type)


class ViewMaterializer:
    """Joins employees against a ``ReferenceData`` cache and writes view rows."""

    def __init__(
        self,
        store: DocumentStore,
        reference: ReferenceData,
        policy: WritePolicy = WritePolicy.ABORT,
    ) -> None:
        self._store = store
        self._reference = reference
        self._policy = WritePolicy(policy)

    async def materialize(self) -> MaterializationReport:
        """Build and write both views for every employee in the store.

        Returns:
            A report of skipped employees and per-write outcomes.

        Raises:
            MaterializationFailure: If the employee query fails, or, under
                ``WritePolicy.ABORT``, if any view write fails. Rows written
                by sibling writes remain in the store.
        """
        try:
            result = await self._store.query(DocType.EMPLOYEE.value, {})
        except Exception as exc:
            raise MaterializationFailure(f"could not query employee documents: {exc}") from exc

        report = MaterializationReport()
        rows: list[ViewRow] = []
        for item in result.items or []:
            report.employees_total += 1
            checked = validate(DocType.EMPLOYEE, item.data)
            if isinstance(checked, Invalid):
                report.employees_invalid += 1
                logger.debug("Skipping malformed employee document: %s", checked.reason)
                continue
            employee = checked.value

            city_row = self._join_city(employee)
            if city_row is None:
                report.missing_city.append(employee.id)
            else:
                rows.append(city_row)

            position_row = self._join_position(employee)
            if position_row is None:
                report.missing_position.append(employee.id)
            else:
                rows.append(position_row)

        report.batch = await self._write_all(rows)
        self._apply_policy(report.batch)
        logger.info(
            "Materialized %d city rows and %d position rows from %d employees",
            report.written(DocType.EMPLOYEE_WITH_CITY_VIEW),
            report.written(DocType.EMPLOYEE_WITH_POSITION_VIEW),
            report.employees_total,
        )
        return report

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def _join_city(self, employee: Employee) -> EmployeeWithCityView | None:
        city = self._reference.city(employee.city_id)
        if city is None:
            logger.warning(
                "City %s not found for employee %s", employee.city_id, employee.id
            )
            return None
        return EmployeeWithCityView(
            id=employee.id, first_name=employee.first_name, city=city.name
        )

    def _join_position(self, employee: Employee) -> EmployeeWithPositionView | None:
        position = self._reference.position(employee.position_id)
        division = self._reference.division(employee.division_id)
        if position is None or division is None:
            logger.warning(
                "Position %s or division %s not found for employee %s",
                employee.position_id,
                employee.division_id,
                employee.id,
            )
            return None
        return EmployeeWithPositionView(
            id=employee.id,
            first_name=employee.first_name,
            position=position.name,
            division=division.name,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _write_all(self, rows: list[ViewRow]) -> BatchResult:
        results = await asyncio.gather(
            *(self._store.post(Entry.of(row.to_document())) for row in rows),
            return_exceptions=True,
        )
        batch = BatchResult()
        for row, outcome in zip(rows, results):
            if isinstance(outcome, Exception):
                batch.outcomes.append(WriteOutcome(row.DOC_TYPE, row.id, outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                batch.outcomes.append(WriteOutcome(row.DOC_TYPE, row.id))
        return batch

    def _apply_policy(self, batch: BatchResult) -> None:
        failed = batch.failed
        if not failed:
            return
        for outcome in failed:
            logger.error(
                "Write of %s for employee %s failed: %s",
                outcome.doc_type.value,
                outcome.employee_id,
                outcome.error,
            )
        if self._policy is WritePolicy.ABORT:
            first = failed[0].error
            raise MaterializationFailure(
                f"{len(failed)} of {len(batch.outcomes)} view writes failed: {first}",
                batch=batch,
            ) from first
