"""
models/department.py
--------------------
Domain model for departments. Employees reference them by id only.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Department:
    id: int
    name: Optional[str] = None
    location: Optional[str] = None
