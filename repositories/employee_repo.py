"""
repositories/employee_repo.py
-----------------------------
Data access layer for employees.
All SQL queries related to the `employee` table live here.
"""

from typing import Optional

from db.connection import Database
from models.employee import Employee
from repositories.common import like_pattern, row_exists
from utils.errors import ConflictError, EmployeeNotFoundError, InvalidArgumentError, StatementError
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "code, name, email"


class EmployeeRepository:
    """Repository for operations on the employee table."""

    def __init__(self, db: Database):
        self.db = db

    # ── CREATE ────────────────────────────────────────────

    def create(self, code: str, name: str, email: Optional[str] = None) -> Employee:
        """
        Insert a new employee.

        Raises:
            ConflictError: An employee with this code already exists.
        """
        email = email.strip() if email else None
        sql = "INSERT INTO employee (code, name, email) VALUES (%s, %s, %s) RETURNING code;"
        try:
            self.db.execute(sql, (code, name, email))
        except StatementError as e:
            if e.is_unique_violation:
                raise ConflictError(f"Employee '{code}' already exists") from e
            logger.error(f"Failed to create employee {code}: {e}")
            raise
        logger.info(f"Created employee {code}")
        return Employee(code=code, name=name, email=email)

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> list[Employee]:
        """Get all employees in insertion order."""
        sql = f"SELECT {_COLUMNS} FROM employee ORDER BY created_at, code;"
        return [self._row_to_employee(r) for r in self.db.execute(sql).rows]

    def get_by_code(self, code: str) -> Employee:
        """
        Fetch a single employee by code.

        Raises:
            EmployeeNotFoundError: No employee has this code.
        """
        sql = f"SELECT {_COLUMNS} FROM employee WHERE code = %s;"
        row = self.db.execute(sql, (code,)).first()
        if row is None:
            raise EmployeeNotFoundError()
        return self._row_to_employee(row)

    def exists(self, code: str) -> bool:
        return row_exists(self.db, "employee", code)

    def search_by_email(self, email: str) -> list[Employee]:
        """
        Exact, case-insensitive email match after trimming whitespace.

        Raises:
            InvalidArgumentError: The email is blank.
            EmployeeNotFoundError: No employee has this email.
        """
        email = (email or "").strip()
        if not email:
            raise InvalidArgumentError("Query parameter 'email' must not be blank.")
        sql = f"SELECT {_COLUMNS} FROM employee WHERE LOWER(email) = LOWER(%s) ORDER BY created_at, code;"
        rows = self.db.execute(sql, (email,)).rows
        if not rows:
            raise EmployeeNotFoundError()
        return [self._row_to_employee(r) for r in rows]

    def search_by_name(self, name_part: str) -> list[Employee]:
        """
        Case-insensitive substring match on the employee name.

        Raises:
            EmployeeNotFoundError: Nothing matched.
        """
        sql = (
            f"SELECT {_COLUMNS} FROM employee "
            "WHERE LOWER(name) LIKE LOWER(%s) ESCAPE '\\' ORDER BY created_at, code;"
        )
        rows = self.db.execute(sql, (like_pattern(name_part.strip()),)).rows
        if not rows:
            raise EmployeeNotFoundError("No employees found matching the search criteria.")
        return [self._row_to_employee(r) for r in rows]

    def search(self, email: Optional[str] = None, name: Optional[str] = None) -> list[Employee]:
        """
        Search by email (takes precedence) or by partial name.

        Raises:
            InvalidArgumentError: Neither email nor name was given.
        """
        if email and email.strip():
            return self.search_by_email(email)
        if name and name.strip():
            return self.search_by_name(name)
        raise InvalidArgumentError("Query parameter 'email' or 'name' is required.")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_employee(row: dict) -> Employee:
        return Employee(code=row["code"], name=row["name"], email=row.get("email"))
