"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import PooledConnectionSource
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Departments: only the id is referenced by employees
CREATE TABLE IF NOT EXISTS department (
    id              BIGINT PRIMARY KEY,
    name            VARCHAR(20),
    location        VARCHAR(20)
);

-- Employees: physical column order matches the positional INSERT
CREATE TABLE IF NOT EXISTS employee (
    id              BIGINT PRIMARY KEY,
    firstname       VARCHAR(10),
    lastname        VARCHAR(10),
    middlename      VARCHAR(10),
    position        VARCHAR(40),
    manager         BIGINT REFERENCES employee(id),
    hiredate        DATE,
    salary          NUMERIC(12,2),
    department      BIGINT REFERENCES department(id)
);

-- Indexes for the list-by-manager and list-by-department lookups
CREATE INDEX IF NOT EXISTS idx_employee_manager ON employee(manager);
CREATE INDEX IF NOT EXISTS idx_employee_department ON employee(department);
"""


def _statements(script: str) -> list[str]:
    """Split the schema script into single statements, dropping comment lines."""
    lines = [ln for ln in script.splitlines() if not ln.strip().startswith("--")]
    return [stmt.strip() for stmt in "\n".join(lines).split(";") if stmt.strip()]


def create_tables(connection_source=None) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).

    Args:
        connection_source: Connection provider; defaults to the pool.
    """
    source = connection_source or PooledConnectionSource()
    conn = source.get_connection()
    try:
        with conn.cursor() as cur:
            for statement in _statements(SCHEMA_SQL):
                cur.execute(statement)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        source.release_connection(conn)


if __name__ == "__main__":
    from db.connection import close_pool, init_pool
    init_pool()
    try:
        create_tables()
    finally:
        close_pool()
    print("Database schema created successfully.")
