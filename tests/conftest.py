from __future__ import annotations

import sqlite3
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from db.init_db import create_tables
from models.department import Department
from models.employee import Employee, FullName, Position
from repositories.employee_repo import EmployeeRepository

sqlite3.register_adapter(Decimal, str)
sqlite3.register_adapter(date, date.isoformat)
sqlite3.register_converter("NUMERIC", lambda raw: Decimal(raw.decode()))
sqlite3.register_converter("DATE", lambda raw: date.fromisoformat(raw.decode()))


class SqliteCursor:
    """psycopg2-shaped cursor over sqlite3: %s placeholders, context manager, dict rows."""

    def __init__(self, conn: sqlite3.Connection, dict_rows: bool):
        self._cur = conn.cursor()
        self._dict_rows = dict_rows

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self._cur.close()

    @property
    def rowcount(self) -> int:
        return self._cur.rowcount

    def execute(self, sql, params=()):
        self._cur.execute(sql.replace("%s", "?"), tuple(params))

    def _convert(self, row):
        if row is None or not self._dict_rows:
            return row
        return {col[0]: value for col, value in zip(self._cur.description, row)}

    def fetchone(self):
        return self._convert(self._cur.fetchone())

    def fetchall(self):
        return [self._convert(r) for r in self._cur.fetchall()]


class SqliteConnection:
    def __init__(self, path: Path):
        self._conn = sqlite3.connect(str(path), detect_types=sqlite3.PARSE_DECLTYPES)

    def cursor(self, cursor_factory=None):
        return SqliteCursor(self._conn, dict_rows=cursor_factory is not None)

    def commit(self):
        self._conn.commit()

    def rollback(self):
        self._conn.rollback()

    def close(self):
        self._conn.close()

    def raw(self) -> sqlite3.Connection:
        return self._conn


class SqliteConnectionSource:
    """Connection provider opening a fresh SQLite connection per call."""

    def __init__(self, path: Path):
        self.path = path
        self.acquired = 0
        self.released = 0

    def get_connection(self):
        self.acquired += 1
        return SqliteConnection(self.path)

    def release_connection(self, conn) -> None:
        self.released += 1
        conn.close()

    def execute(self, sql: str, params=()) -> None:
        """Write directly to the store, bypassing the repository."""
        conn = sqlite3.connect(str(self.path))
        try:
            conn.execute(sql, params)
            conn.commit()
        finally:
            conn.close()

    def count(self) -> int:
        conn = sqlite3.connect(str(self.path))
        try:
            return conn.execute("SELECT COUNT(1) FROM employee").fetchone()[0]
        finally:
            conn.close()


@pytest.fixture()
def source(tmp_path: Path) -> SqliteConnectionSource:
    src = SqliteConnectionSource(tmp_path / "employees.sqlite")
    create_tables(src)
    src.execute("INSERT INTO department VALUES (10, 'ACCOUNTING', 'NEW YORK')")
    src.execute("INSERT INTO department VALUES (20, 'RESEARCH', 'DALLAS')")
    src.acquired = src.released = 0
    return src


@pytest.fixture()
def repo(source) -> EmployeeRepository:
    return EmployeeRepository(source)


@pytest.fixture()
def accounting() -> Department:
    return Department(10, "ACCOUNTING", "NEW YORK")


@pytest.fixture()
def research() -> Department:
    return Department(20, "RESEARCH", "DALLAS")


def make_employee(
    emp_id: int,
    first: str = "John",
    last: str = "Doe",
    position: Position = Position.DEVELOPER,
    salary: str = "5000.00",
    manager_id: int | None = None,
    department_id: int | None = 10,
    hired: date = date(2020, 1, 15),
) -> Employee:
    return Employee(
        id=emp_id,
        full_name=FullName(first, last, ""),
        position=position,
        hired=hired,
        salary=Decimal(salary),
        manager_id=manager_id,
        department_id=department_id,
    )
