"""
repositories/employee_repo.py
-----------------------------
Data access layer for employees.
All SQL queries related to the `employee` table live here.

Each statement keeps its own column order: the positional INSERT follows
the physical table layout, the UPDATE puts the id last, and the SELECTs
list `manager` and `department` after `salary`. Rows are always read by
column name, so `SELECT *` and the explicit lists map the same way.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from psycopg2 import extras

from db.connection import PooledConnectionSource
from models.department import Department
from models.employee import Employee, FullName, Position
from repositories.exceptions import DataAccessError
from utils.logger import get_logger

logger = get_logger(__name__)

_SELECT_COLUMNS = "id, firstname, lastname, middlename, position, hiredate, salary, manager, department"

SQL_SELECT_BY_ID = f"SELECT {_SELECT_COLUMNS} FROM employee WHERE id = %s"
SQL_SELECT_ALL = f"SELECT {_SELECT_COLUMNS} FROM employee"
SQL_SELECT_BY_MANAGER = f"SELECT {_SELECT_COLUMNS} FROM employee WHERE manager = %s"
SQL_SELECT_BY_DEPARTMENT = "SELECT * FROM employee WHERE department = %s"
SQL_DELETE = "DELETE FROM employee WHERE id = %s"
SQL_INSERT = "INSERT INTO employee VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)"
SQL_UPDATE = (
    "UPDATE employee SET "
    "firstname = %s, lastname = %s, middlename = %s, "
    "position = %s, manager = %s, hiredate = %s, "
    "salary = %s, department = %s "
    "WHERE id = %s"
)
SQL_UPSERT = """
    INSERT INTO employee (id, firstname, lastname, middlename, position, manager, hiredate, salary, department)
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
    ON CONFLICT (id) DO UPDATE SET
        firstname = EXCLUDED.firstname, lastname = EXCLUDED.lastname,
        middlename = EXCLUDED.middlename, position = EXCLUDED.position,
        manager = EXCLUDED.manager, hiredate = EXCLUDED.hiredate,
        salary = EXCLUDED.salary, department = EXCLUDED.department
"""


class EmployeeRepository:
    """Repository for CRUD operations on the employee table."""

    def __init__(self, connection_source=None):
        """
        Args:
            connection_source: Object exposing ``get_connection()`` and
                ``release_connection(conn)``. Defaults to the shared pool.
        """
        self.connection_source = connection_source or PooledConnectionSource()

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        """
        Fetch a single employee by ID.

        Returns:
            An Employee object or None if not found.

        Raises:
            DataAccessError: If the query or the row mapping fails.
        """
        rows = self._fetch("get_by_id", SQL_SELECT_BY_ID, (employee_id,))
        return rows[0] if rows else None

    def get_all(self) -> list[Employee]:
        """Fetch every employee, in whatever order the store returns them."""
        return self._fetch("get_all", SQL_SELECT_ALL, ())

    def get_by_manager(self, manager: Employee) -> list[Employee]:
        """Fetch the direct reports of `manager`."""
        return self._fetch("get_by_manager", SQL_SELECT_BY_MANAGER, (manager.id,))

    def get_by_department(self, department: Department) -> list[Employee]:
        """Fetch all employees of `department`."""
        try:
            department_id = int(department.id)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed at get_by_department: bad department id {department.id!r}")
            raise DataAccessError("get_by_department", str(e)) from e
        return self._fetch("get_by_department", SQL_SELECT_BY_DEPARTMENT, (department_id,))

    # ── WRITE ─────────────────────────────────────────────

    def save(self, employee: Employee) -> Employee:
        """
        Insert the employee if its id is unknown, otherwise update every column.

        The existence check and the write run on separate connections, so two
        concurrent saves of a new id may both insert; the loser gets a
        DataAccessError from the primary key. Use `upsert` when that matters.

        Returns:
            The same Employee that was passed in (not re-read).
        """
        if self.get_by_id(employee.id) is not None:
            self._update(employee)
        else:
            self._insert(employee)
        return employee

    def upsert(self, employee: Employee) -> Employee:
        """
        Insert or update the employee in a single ON CONFLICT statement.

        Returns:
            The same Employee that was passed in.
        """
        self._execute("upsert", SQL_UPSERT, self._insert_params(employee))
        logger.info(f"Upserted employee #{employee.id}")
        return employee

    def delete(self, employee: Employee) -> None:
        """Delete the employee's row. Deleting an unknown id is a no-op."""
        deleted = self._execute("delete", SQL_DELETE, (employee.id,))
        if deleted:
            logger.info(f"Deleted employee #{employee.id}")

    def _insert(self, employee: Employee) -> None:
        self._execute("insert", SQL_INSERT, self._insert_params(employee))
        logger.info(f"Inserted employee #{employee.id}")

    def _update(self, employee: Employee) -> None:
        name = employee.full_name
        params = (
            name.first_name, name.last_name, name.middle_name,
            employee.position.name, employee.manager_id, employee.hired,
            employee.salary, employee.department_id, employee.id,
        )
        self._execute("update", SQL_UPDATE, params)
        logger.info(f"Updated employee #{employee.id}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _insert_params(employee: Employee) -> tuple:
        """Parameters in physical column order, as the positional INSERT expects."""
        name = employee.full_name
        return (
            employee.id, name.first_name, name.last_name, name.middle_name,
            employee.position.name, employee.manager_id, employee.hired,
            employee.salary, employee.department_id,
        )

    def _acquire(self, operation: str):
        try:
            return self.connection_source.get_connection()
        except Exception as e:
            logger.error(f"Failed to acquire a connection for {operation}: {e}")
            raise DataAccessError(operation, str(e)) from e

    def _fetch(self, operation: str, sql: str, params: tuple) -> list[Employee]:
        """Run a SELECT and map every returned row."""
        conn = self._acquire(operation)
        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(sql, params)
                return [self._row_to_employee(r) for r in cur.fetchall()]
        except DataAccessError:
            raise
        except Exception as e:
            logger.error(f"Failed at {operation}: {e}")
            raise DataAccessError(operation, str(e)) from e
        finally:
            self.connection_source.release_connection(conn)

    def _execute(self, operation: str, sql: str, params: tuple) -> int:
        """Run a write statement in its own transaction and return the affected row count."""
        conn = self._acquire(operation)
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                affected = cur.rowcount
            conn.commit()
            return affected
        except Exception as e:
            logger.error(f"Failed at {operation}: {e}")
            try:
                conn.rollback()
            except Exception as rollback_error:
                logger.warning(f"Rollback after failed {operation} also failed: {rollback_error}")
            raise DataAccessError(operation, str(e)) from e
        finally:
            self.connection_source.release_connection(conn)

    @staticmethod
    def _row_to_employee(row: dict) -> Employee:
        """Convert a database row (keyed by column name) to an Employee domain object."""
        try:
            return Employee(
                id=int(row["id"]),
                full_name=FullName(
                    first_name=row["firstname"],
                    last_name=row["lastname"],
                    middle_name=row["middlename"],
                ),
                position=Position.parse(row["position"]),
                hired=_to_date(row["hiredate"]),
                salary=_to_decimal(row["salary"]),
                manager_id=_to_int(row["manager"]),
                department_id=_to_int(row["department"]),
            )
        except Exception as e:
            logger.error(f"Failed to map employee row: {e}")
            raise DataAccessError("map_row", str(e)) from e


def _to_int(value) -> Optional[int]:
    return None if value is None else int(value)


def _to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise TypeError(f"hiredate is not a date: {value!r}")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        raise TypeError("salary is NULL")
    # str() first so floats keep their printed digits
    return Decimal(str(value))
