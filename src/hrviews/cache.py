"""Reference-data cache: cities, divisions and positions keyed by id.

The cache is built once by ``load_reference_data()`` and is read-only
afterwards. It is an explicit context object handed to the materializer;
nothing here is module-level state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, TypeVar

from hrviews.errors import ReferenceLoadFailure
from hrviews.models import City, Division, DocType, Position, ReferenceEntity
from hrviews.store import DocumentStore
from hrviews.validation import Invalid, Valid, validate

logger = logging.getLogger(__name__)

E = TypeVar("E", City, Division, Position)


class RefKind(str, Enum):
    CITY = DocType.CITY.value
    DIVISION = DocType.DIVISION.value
    POSITION = DocType.POSITION.value


def _frozen(entries: dict[str, E] | None = None) -> Mapping[str, E]:
    return MappingProxyType(dict(entries or {}))


@dataclass(frozen=True)
class ReferenceData:
    """Immutable id → entity mappings for the three reference kinds."""

    cities: Mapping[str, City] = field(default_factory=_frozen)
    divisions: Mapping[str, Division] = field(default_factory=_frozen)
    positions: Mapping[str, Position] = field(default_factory=_frozen)

    @classmethod
    def of(
        cls,
        cities: Iterable[City] = (),
        divisions: Iterable[Division] = (),
        positions: Iterable[Position] = (),
    ) -> ReferenceData:
        """Build from entity lists; a later duplicate id replaces an earlier one."""
        return cls(
            cities=_frozen({c.id: c for c in cities}),
            divisions=_frozen({d.id: d for d in divisions}),
            positions=_frozen({p.id: p for p in positions}),
        )

    def lookup(self, kind: RefKind | str, entity_id: str) -> ReferenceEntity | None:
        """Return the cached entity of *kind* with *entity_id*, or None.

        Raises:
            ValueError: If *kind* is not a reference kind.
        """
        kind = RefKind(kind)
        if kind is RefKind.CITY:
            return self.cities.get(entity_id)
        if kind is RefKind.DIVISION:
            return self.divisions.get(entity_id)
        return self.positions.get(entity_id)

    def city(self, entity_id: str) -> City | None:
        return self.cities.get(entity_id)

    def division(self, entity_id: str) -> Division | None:
        return self.divisions.get(entity_id)

    def position(self, entity_id: str) -> Position | None:
        return self.positions.get(entity_id)

    def sizes(self) -> dict[str, int]:
        return {
            RefKind.CITY.value: len(self.cities),
            RefKind.DIVISION.value: len(self.divisions),
            RefKind.POSITION.value: len(self.positions),
        }


async def _load_kind(store: DocumentStore, kind: RefKind) -> dict[str, ReferenceEntity]:
    try:
        result = await store.query(kind.value, {})
    except Exception as exc:
        raise ReferenceLoadFailure(f"could not query '{kind.value}' documents: {exc}") from exc

    items = result.items or []
    if not items:
        logger.warning("No %s documents found in store", kind.value)

    entries: dict[str, ReferenceEntity] = {}
    for item in items:
        checked = validate(DocType(kind.value), item.data)
        if isinstance(checked, Valid):
            entries[checked.value.id] = checked.value
        elif isinstance(checked, Invalid):
            logger.debug("Skipping malformed %s document: %s", kind.value, checked.reason)
    return entries


async def load_reference_data(store: DocumentStore) -> ReferenceData:
    """Query cities, divisions and positions and build the cache.

    Documents failing validation are skipped. A kind with no documents logs
    a warning and loads as empty.

    Raises:
        ReferenceLoadFailure: If any of the three store queries fails. No
            partially built cache is returned.
    """
    cities = await _load_kind(store, RefKind.CITY)
    divisions = await _load_kind(store, RefKind.DIVISION)
    positions = await _load_kind(store, RefKind.POSITION)

    reference = ReferenceData(
        cities=_frozen(cities),
        divisions=_frozen(divisions),
        positions=_frozen(positions),
    )
    logger.info("Reference data loaded: %s", reference.sizes())
    return reference
