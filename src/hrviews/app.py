"""Application façade: load reference data, materialize views, serve reads.

Lifecycle is one-way: ``UNINITIALIZED`` → ``READY`` through a single
``initialize()`` call. A failed initialization leaves the app uninitialized,
but any view rows written before the failure stay in the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hrviews.cache import ReferenceData, load_reference_data
from hrviews.errors import (
    AlreadyInitializedError,
    InitializationFailure,
    MaterializationFailure,
    NotInitializedError,
    ReferenceLoadFailure,
)
from hrviews.materializer import MaterializationReport, ViewMaterializer, WritePolicy
from hrviews.models import NORMALIZED_TYPES
from hrviews.reader import EmployeeCityRow, EmployeePositionRow, ViewReader
from hrviews.store import DocumentStore

logger = logging.getLogger(__name__)

UPDATABLE_ENTITIES: frozenset[str] = frozenset(t.value for t in NORMALIZED_TYPES)


class AppState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass
class UpdateRequest:
    """A write-back of one normalized entity.

    Attributes:
        entity: One of ``employee``, ``city``, ``position``, ``division``.
        data: The entity payload in wire form.
    """

    entity: str
    data: dict[str, Any] = field(default_factory=dict)


class HRApp:
    """Entry point for callers of the materialized employee views."""

    def __init__(
        self, store: DocumentStore, policy: WritePolicy = WritePolicy.ABORT
    ) -> None:
        self._store = store
        self._policy = WritePolicy(policy)
        self._reader = ViewReader(store)
        self._state = AppState.UNINITIALIZED
        self.reference: ReferenceData | None = None
        self.report: MaterializationReport | None = None

    @property
    def state(self) -> AppState:
        return self._state

    async def initialize(self) -> MaterializationReport:
        """Load the reference cache, then materialize both views.

        Raises:
            AlreadyInitializedError: If the app is already ready.
            InitializationFailure: If either phase fails; chained to the
                ``ReferenceLoadFailure`` or ``MaterializationFailure``.
        """
        if self._state is AppState.READY:
            raise AlreadyInitializedError(
                "Application is already initialized; re-running materialization "
                "would append duplicate view rows"
            )
        try:
            reference = await load_reference_data(self._store)
            report = await ViewMaterializer(self._store, reference, self._policy).materialize()
        except (ReferenceLoadFailure, MaterializationFailure) as exc:
            raise InitializationFailure(f"Initialization failed: {exc}") from exc

        self.reference = reference
        self.report = report
        self._state = AppState.READY
        return report

    async def employee_with_city_list(self) -> list[EmployeeCityRow]:
        self._require_ready()
        return await self._reader.employees_with_city()

    async def employee_with_position_list(self) -> list[EmployeePositionRow]:
        self._require_ready()
        return await self._reader.employees_with_position()

    async def update(self, request: UpdateRequest) -> None:
        """Accept a normalized-entity update. No write-back path exists yet.

        Raises:
            ValueError: If ``request.entity`` is not an updatable entity.
        """
        if request.entity not in UPDATABLE_ENTITIES:
            raise ValueError(
                f"Unknown entity {request.entity!r}; expected one of "
                f"{', '.join(sorted(UPDATABLE_ENTITIES))}"
            )
        logger.debug("Ignoring update for %s", request.entity)

    def _require_ready(self) -> None:
        if self._state is not AppState.READY:
            raise NotInitializedError("Call initialize() before reading views")


async def create_app(
    store: DocumentStore, policy: WritePolicy = WritePolicy.ABORT
) -> HRApp:
    """Build an ``HRApp`` over *store* and initialize it."""
    app = HRApp(store, policy)
    await app.initialize()
    return app
