"""Domain models for normalized HR entities and their materialized views."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union


class DocType(str, Enum):
    """Wire ``type`` tags for every document kind held in the store."""

    EMPLOYEE = "employee"
    CITY = "city"
    DIVISION = "division"
    POSITION = "position"
    EMPLOYEE_WITH_CITY_VIEW = "employeeWithCity_view"
    EMPLOYEE_WITH_POSITION_VIEW = "employeeWithPosition_view"


NORMALIZED_TYPES: tuple[DocType, ...] = (
    DocType.EMPLOYEE,
    DocType.CITY,
    DocType.DIVISION,
    DocType.POSITION,
)
VIEW_TYPES: tuple[DocType, ...] = (
    DocType.EMPLOYEE_WITH_CITY_VIEW,
    DocType.EMPLOYEE_WITH_POSITION_VIEW,
)


@dataclass(frozen=True)
class City:
    id: str
    name: str


@dataclass(frozen=True)
class Division:
    id: str
    name: str
    city_id: str


@dataclass(frozen=True)
class Position:
    id: str
    name: str


@dataclass(frozen=True)
class Employee:
    id: str
    first_name: str
    division_id: str
    city_id: str
    position_id: str
    last_name: str | None = None


@dataclass(frozen=True)
class EmployeeWithCityView:
    DOC_TYPE: ClassVar[DocType] = DocType.EMPLOYEE_WITH_CITY_VIEW

    id: str
    first_name: str
    city: str

    def to_document(self) -> dict[str, Any]:
        return {
            "type": self.DOC_TYPE.value,
            "id": self.id,
            "firstName": self.first_name,
            "city": self.city,
        }


@dataclass(frozen=True)
class EmployeeWithPositionView:
    DOC_TYPE: ClassVar[DocType] = DocType.EMPLOYEE_WITH_POSITION_VIEW

    id: str
    first_name: str
    position: str
    division: str

    def to_document(self) -> dict[str, Any]:
        return {
            "type": self.DOC_TYPE.value,
            "id": self.id,
            "firstName": self.first_name,
            "position": self.position,
            "division": self.division,
        }


@dataclass(frozen=True)
class EmployeeCityRow:
    """A stored ``employeeWithCity_view`` entry as served to readers."""

    first_name: str
    city: str

    def to_dict(self) -> dict[str, str]:
        return {"firstName": self.first_name, "city": self.city}


@dataclass(frozen=True)
class EmployeePositionRow:
    """A stored ``employeeWithPosition_view`` entry as served to readers."""

    first_name: str
    position: str
    division: str

    def to_dict(self) -> dict[str, str]:
        return {
            "firstName": self.first_name,
            "position": self.position,
            "division": self.division,
        }


Document = Union[
    Employee, City, Division, Position, EmployeeWithCityView, EmployeeWithPositionView
]
ReferenceEntity = Union[City, Division, Position]
ViewProjection = Union[EmployeeCityRow, EmployeePositionRow]
