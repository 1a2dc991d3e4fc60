"""Read accessors for the materialized employee views.

Stored view documents are not trusted: each one is checked against its view
schema, and an entry missing any projected field, or holding a non-string or
empty value there, is dropped from the result rather than raising.
"""

from __future__ import annotations

import logging

from hrviews.errors import ViewReadFailure
from hrviews.models import DocType, EmployeeCityRow, EmployeePositionRow, ViewProjection
from hrviews.store import DocumentStore, Record
from hrviews.validation import Invalid, validate

__all__ = ["EmployeeCityRow", "EmployeePositionRow", "ViewReader"]

logger = logging.getLogger(__name__)


class ViewReader:
    """Serves the two employee views from the store."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def employees_with_city(self) -> list[EmployeeCityRow]:
        """Return ``(first_name, city)`` rows in store order.

        Raises:
            ViewReadFailure: If the store query fails.
        """
        return await self._rows(DocType.EMPLOYEE_WITH_CITY_VIEW)

    async def employees_with_position(self) -> list[EmployeePositionRow]:
        """Return ``(first_name, position, division)`` rows in store order.

        Raises:
            ViewReadFailure: If the store query fails.
        """
        return await self._rows(DocType.EMPLOYEE_WITH_POSITION_VIEW)

    async def _rows(self, doc_type: DocType) -> list:
        rows: list[ViewProjection] = []
        for item in await self._fetch(doc_type):
            checked = validate(doc_type, item.data)
            if isinstance(checked, Invalid):
                logger.debug("Dropping malformed %s entry: %s", doc_type.value, checked.reason)
                continue
            rows.append(checked.value)
        return rows

    async def _fetch(self, doc_type: DocType) -> list[Record]:
        try:
            result = await self._store.query(doc_type.value, {})
        except Exception as exc:
            raise ViewReadFailure(f"could not query '{doc_type.value}' documents: {exc}") from exc
        items = result.items or []
        logger.debug("Fetched %d %s documents", len(items), doc_type.value)
        return items
