"""
repositories/barrier_repo.py
----------------------------
Data access layer for information barriers and barrier membership.
All SQL queries related to the `barrier` and `barrier_members` tables live here.
"""

from datetime import date
from typing import Optional

from db.connection import Database
from models.barrier import Barrier, BarrierMember, BarrierStatus
from repositories.common import like_pattern, not_found_for_constraint, row_exists
from utils.errors import (
    BarrierNotFoundError,
    ConflictError,
    DealNotFoundError,
    EmployeeNotFoundError,
    InvalidArgumentError,
    StatementError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

_MEMBER_COLUMNS = "id, barrier_code, member_code, on_date, off_date, status, deal_code, role"


class BarrierRepository:
    """Repository for CRUD operations on barriers and their members."""

    def __init__(self, db: Database):
        self.db = db

    # ── CREATE ────────────────────────────────────────────

    def create(self, code: str, name: str, approver_code: Optional[str] = None) -> Barrier:
        """
        Insert a new barrier.

        Raises:
            EmployeeNotFoundError: The approver code is unknown.
            ConflictError: A barrier with this code already exists.
        """
        sql = "INSERT INTO barrier (code, name, approver_code) VALUES (%s, %s, %s) RETURNING code;"
        try:
            with self.db.transaction() as tx:
                if approver_code is not None and not row_exists(tx, "employee", approver_code, lock="SHARE"):
                    raise EmployeeNotFoundError("Approver not found")
                tx.execute(sql, (code, name, approver_code))
        except StatementError as e:
            if e.is_unique_violation:
                raise ConflictError(f"Barrier '{code}' already exists") from e
            if e.is_foreign_key_violation:
                raise EmployeeNotFoundError("Approver not found") from e
            logger.error(f"Failed to create barrier {code}: {e}")
            raise
        logger.info(f"Created barrier {code}")
        return Barrier(code=code, name=name, approver_code=approver_code)

    def add_member(
        self,
        code: str,
        member_code: str,
        on_date: date,
        off_date: Optional[date],
        status: str,
        deal_code: Optional[str] = None,
        role: Optional[str] = None,
    ) -> BarrierMember:
        """
        Put an employee behind a barrier for a date range.

        Args:
            code: Barrier code.
            member_code: Employee code.
            on_date: First day of the membership.
            off_date: Last day, or None for open-ended.
            status: Membership status, e.g. 'active'.
            deal_code: Deal that caused the membership, if any.
            role: Optional role inside the barrier.

        Raises:
            InvalidArgumentError: on_date is missing or later than off_date.
            BarrierNotFoundError: The barrier does not exist.
            EmployeeNotFoundError: The member code is unknown.
            DealNotFoundError: deal_code was given and is unknown.
        """
        if on_date is None:
            raise InvalidArgumentError("Field 'on_date' is required.")
        if off_date is not None and on_date > off_date:
            raise InvalidArgumentError("Field 'off_date' must not be earlier than 'on_date'.")

        sql = """
            INSERT INTO barrier_members
                (barrier_code, member_code, on_date, off_date, status, deal_code, role)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id;
        """
        try:
            with self.db.transaction() as tx:
                if not row_exists(tx, "barrier", code, lock="SHARE"):
                    raise BarrierNotFoundError()
                if not row_exists(tx, "employee", member_code, lock="SHARE"):
                    raise EmployeeNotFoundError()
                if deal_code is not None and not row_exists(tx, "deal", deal_code, lock="SHARE"):
                    raise DealNotFoundError()
                result = tx.execute(sql, (code, member_code, on_date, off_date, status, deal_code, role))
        except StatementError as e:
            if e.is_foreign_key_violation:
                raise not_found_for_constraint(e.constraint, BarrierNotFoundError()) from e
            logger.error(f"Failed to add member {member_code} to barrier {code}: {e}")
            raise
        member = BarrierMember(
            id=result.inserted_id,
            barrier_code=code,
            member_code=member_code,
            on_date=on_date,
            off_date=off_date,
            status=status,
            deal_code=deal_code,
            role=role,
        )
        logger.info(f"Added member {member_code} to barrier {code} #{member.id}")
        return member

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> list[Barrier]:
        """Get all barriers in insertion order."""
        sql = "SELECT code, name, approver_code FROM barrier ORDER BY created_at, code;"
        return [self._row_to_barrier(r) for r in self.db.execute(sql).rows]

    def search_by_name(self, name_part: str) -> list[Barrier]:
        """
        Case-insensitive substring match on the barrier name,
        e.g. 'perm' matches 'Permanent Barrier'.

        Raises:
            InvalidArgumentError: The search text is blank.
            BarrierNotFoundError: Nothing matched.
        """
        name_part = (name_part or "").strip()
        if not name_part:
            raise InvalidArgumentError("Query parameter 'name' is required.")
        sql = (
            "SELECT code, name, approver_code FROM barrier "
            "WHERE LOWER(name) LIKE LOWER(%s) ESCAPE '\\' ORDER BY created_at, code;"
        )
        rows = self.db.execute(sql, (like_pattern(name_part),)).rows
        if not rows:
            raise BarrierNotFoundError("No barriers found matching the search criteria.")
        return [self._row_to_barrier(r) for r in rows]

    def get_by_code(self, code: str) -> tuple[Barrier, list[BarrierMember]]:
        """
        Fetch a barrier together with its members.

        Raises:
            BarrierNotFoundError: No barrier has this code.
        """
        with self.db.transaction() as tx:
            row = tx.execute(
                "SELECT code, name, approver_code FROM barrier WHERE code = %s;", (code,)
            ).first()
            if row is None:
                raise BarrierNotFoundError()
            members = tx.execute(
                f"SELECT {_MEMBER_COLUMNS} FROM barrier_members WHERE barrier_code = %s ORDER BY id;",
                (code,),
            ).rows
        return self._row_to_barrier(row), [self._row_to_member(m) for m in members]

    def list_members(self) -> list[tuple[str, BarrierMember]]:
        """
        Get every barrier membership.

        Returns:
            (barrier_name, member) pairs ordered by barrier then insertion.
        """
        sql = """
            SELECT b.name AS barrier_name, bm.id, bm.barrier_code, bm.member_code,
                   bm.on_date, bm.off_date, bm.status, bm.deal_code, bm.role
            FROM barrier_members bm
            JOIN barrier b ON b.code = bm.barrier_code
            ORDER BY bm.barrier_code, bm.id;
        """
        return [(r["barrier_name"], self._row_to_member(r)) for r in self.db.execute(sql).rows]

    def get_status_for_employee(self, member_code: str) -> list[BarrierStatus]:
        """
        List every barrier membership of an employee.

        An employee with no memberships yields an empty list; only an
        unknown employee is an error.

        Raises:
            EmployeeNotFoundError: No employee has this code.
        """
        sql = """
            SELECT b.code AS barrier_code,
                   b.name AS barrier_name,
                   bm.on_date,
                   bm.off_date,
                   bm.status,
                   bm.deal_code
            FROM barrier_members bm
            JOIN barrier b ON bm.barrier_code = b.code
            WHERE bm.member_code = %s
            ORDER BY bm.on_date, bm.id;
        """
        with self.db.transaction() as tx:
            if not row_exists(tx, "employee", member_code):
                raise EmployeeNotFoundError()
            rows = tx.execute(sql, (member_code,)).rows
        return [self._row_to_status(r) for r in rows]

    # ── DELETE ────────────────────────────────────────────

    def delete(self, code: str) -> int:
        """
        Delete a barrier and all its members in one transaction.

        Deleting an unknown code is a no-op.

        Returns:
            Number of barrier rows deleted (0 or 1).
        """
        try:
            with self.db.transaction() as tx:
                tx.execute("SELECT code FROM barrier WHERE code = %s FOR UPDATE;", (code,))
                members = tx.execute(
                    "DELETE FROM barrier_members WHERE barrier_code = %s;", (code,)
                ).row_count
                deleted = tx.execute("DELETE FROM barrier WHERE code = %s;", (code,)).row_count
        except StatementError as e:
            logger.error(f"Failed to delete barrier {code}: {e}")
            raise
        if deleted:
            logger.info(f"Deleted barrier {code} with {members} member(s)")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_barrier(row: dict) -> Barrier:
        return Barrier(code=row["code"], name=row["name"], approver_code=row.get("approver_code"))

    @staticmethod
    def _row_to_member(row: dict) -> BarrierMember:
        return BarrierMember(
            id=row.get("id"),
            barrier_code=row["barrier_code"],
            member_code=row["member_code"],
            on_date=row["on_date"],
            off_date=row.get("off_date"),
            status=row["status"],
            deal_code=row.get("deal_code"),
            role=row.get("role"),
        )

    @staticmethod
    def _row_to_status(row: dict) -> BarrierStatus:
        return BarrierStatus(
            barrier_code=row["barrier_code"],
            barrier_name=row["barrier_name"],
            on_date=row["on_date"],
            off_date=row.get("off_date"),
            status=row["status"],
            deal_code=row.get("deal_code"),
        )
