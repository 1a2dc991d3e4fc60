"""Sample and file-based seed data for the normalized entities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from hrviews.models import DocType
from hrviews.store import DocumentStore, Entry

logger = logging.getLogger(__name__)

# YAML section name → document type, in load order.
SECTIONS: dict[str, DocType] = {
    "cities": DocType.CITY,
    "divisions": DocType.DIVISION,
    "positions": DocType.POSITION,
    "employees": DocType.EMPLOYEE,
}

_ALMATY = "3ba648aa-4498-43da-b29f-b83f37a25429"
_DIRECTORATE = "3e80754a-3681-4e5c-8d6d-b84d09a7a3c4"
_DEVELOPER = "cc811dfb-7f73-4c18-969f-c8408fd92263"

SAMPLE_DATA: dict[str, list[dict[str, Any]]] = {
    "cities": [
        {"id": _ALMATY, "name": "Алматы"},
        {"id": "32d82d73-3eac-4e5a-9921-fcd2e1447c76", "name": "Астана"},
    ],
    "divisions": [
        {
            "id": "97cf9556-2882-4c4a-b7b5-37cf53347447",
            "name": "Департамент информационных технологий",
            "cityId": _ALMATY,
        },
        {"id": _DIRECTORATE, "name": "Дирекция", "cityId": _ALMATY},
    ],
    "positions": [
        # Shares its id with a division; ids are only unique per type.
        {"id": _DIRECTORATE, "name": "Руководитель службы поддержки"},
        {"id": _DEVELOPER, "name": "Разработчик"},
    ],
    "employees": [
        {
            "id": "65f5c1d4-fb87-4da2-b0bd-a22343605396",
            "firstName": "Name 1",
            "lastName": "Name 2",
            "divisionId": _DIRECTORATE,
            "cityId": _ALMATY,
            "positionId": _DEVELOPER,
        },
        {
            "id": "59e23b74-8645-46d6-9751-5fe594dd89e6",
            "firstName": "Name 1",
            "lastName": "Name 2",
            "divisionId": _DIRECTORATE,
            "cityId": _ALMATY,
            "positionId": _DEVELOPER,
        },
    ],
}


class SeedError(ValueError):
    """Raised when a seed file is not shaped like SAMPLE_DATA."""


def _check_storable(entity: dict[str, Any], where: str, path: Path) -> None:
    try:
        json.dumps(entity, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SeedError(
            f"Entry {where} in '{path}' holds a value that cannot be stored as JSON: {exc}. "
            "Quote dates and other special scalars."
        ) from exc


def load_seed_file(path: Path) -> dict[str, list[dict[str, Any]]]:
    """Read a YAML seed file with ``cities``/``divisions``/``positions``/``employees`` lists.

    Missing sections load as empty lists. Entity contents are not validated
    here; malformed entries are skipped later by the cache and materializer.
    Every value must still be storable as JSON, so that a file is rejected
    whole before any of it is written.

    Raises:
        SeedError: If the file is not a mapping, has unknown sections, a
            section is not a list of mappings, or an entry holds a value
            JSON cannot represent (e.g. an unquoted YAML date).
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise SeedError(f"Seed file '{path}' must contain a mapping at the top level.")

    unknown = sorted(set(raw) - set(SECTIONS))
    if unknown:
        raise SeedError(
            f"Seed file '{path}' has unknown sections: {', '.join(unknown)}. "
            f"Expected: {', '.join(SECTIONS)}"
        )

    data: dict[str, list[dict[str, Any]]] = {}
    for section in SECTIONS:
        entries = raw.get(section) or []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise SeedError(f"Section '{section}' in '{path}' must be a list of mappings.")
        for index, entity in enumerate(entries):
            _check_storable(entity, f"{section}[{index}]", path)
        data[section] = entries
    return data


async def seed_store(store: DocumentStore, data: dict[str, list[dict[str, Any]]]) -> int:
    """Post every entity in *data* with its ``type`` tag. Returns the count posted."""
    posted = 0
    for section, doc_type in SECTIONS.items():
        for entity in data.get(section, []):
            await store.post(Entry.of({**entity, "type": doc_type.value}))
            posted += 1
    logger.info("Seeded %d documents", posted)
    return posted
