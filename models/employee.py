"""
models/employee.py
------------------
Domain model for employees, their names and positions.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class Position(Enum):
    """Job categories. Stored in the database as the uppercase member name."""
    PRESIDENT = "PRESIDENT"
    MANAGER = "MANAGER"
    ANALYST = "ANALYST"
    CLERK = "CLERK"
    SALESMAN = "SALESMAN"
    DEVELOPER = "DEVELOPER"

    @classmethod
    def parse(cls, raw: str) -> "Position":
        """
        Parse a stored position name, ignoring case.

        Raises:
            ValueError: If `raw` is not a known position name.
        """
        try:
            return cls[raw.upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Unknown position: {raw!r}") from None

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FullName:
    first_name: str
    last_name: str
    middle_name: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class Employee:
    """
    Represents a single employee row.

    Attributes:
        id: Primary key, assigned by the caller and never changed.
        full_name: First, last and middle name.
        position: Job category.
        hired: Hire date (no time component).
        salary: Exact decimal salary.
        manager_id: Id of the managing employee, or None for the top of the tree.
        department_id: Id of the department the employee belongs to.
    """
    id: int
    full_name: FullName
    position: Position
    hired: date
    salary: Decimal
    manager_id: Optional[int] = None
    department_id: Optional[int] = None

    def __str__(self) -> str:
        return f"#{self.id} {self.full_name} ({self.position}) | {self.salary} | dept {self.department_id}"
