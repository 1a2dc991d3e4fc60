"""Exception hierarchy for hrviews.

Validation failures and unresolved references are not exceptions: they are
handled where they occur (logged and skipped). Everything here is fatal to
the operation that raised it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hrviews.materializer import BatchResult


class HRViewsError(Exception):
    """Base class for all hrviews errors."""


class StoreFailure(HRViewsError):
    """A document store call failed during one of the core phases."""

    phase = "store access"

    def __init__(self, message: str) -> None:
        super().__init__(f"{self.phase} failed: {message}")


class ReferenceLoadFailure(StoreFailure):
    """Loading cities, divisions or positions from the store failed."""

    phase = "reference data load"


class MaterializationFailure(StoreFailure):
    """Querying employees or writing view documents failed.

    Attributes:
        batch: Per-write outcomes when the failure came from the write
            fan-out; None when the employee query itself failed. Successful
            writes in the batch remain persisted.
    """

    phase = "view materialization"

    def __init__(self, message: str, batch: BatchResult | None = None) -> None:
        super().__init__(message)
        self.batch = batch


class ViewReadFailure(StoreFailure):
    """Querying a materialized view failed."""

    phase = "view read"


class InitializationFailure(HRViewsError):
    """Application initialization failed in either the load or build phase."""


class NotInitializedError(HRViewsError):
    """A read was attempted before initialize() completed."""


class AlreadyInitializedError(HRViewsError):
    """initialize() was called on an application that is already ready."""
