"""
repositories/deal_repo.py
-------------------------
Data access layer for deals and deal membership.
All SQL queries related to the `deal` and `deal_members` tables live here.
"""

from typing import Optional

from db.connection import Database
from models.deal import Deal, DealMember
from repositories.common import not_found_for_constraint, row_exists
from utils.errors import (
    ConflictError,
    DealNotFoundError,
    EmployeeNotFoundError,
    MembershipNotFoundError,
    StatementError,
)
from utils.logger import get_logger

logger = get_logger(__name__)


class DealRepository:
    """Repository for CRUD operations on deals and their members."""

    def __init__(self, db: Database):
        self.db = db

    # ── CREATE ────────────────────────────────────────────

    def create(self, code: str, name: str, approver_code: Optional[str] = None) -> Deal:
        """
        Insert a new deal.

        Raises:
            EmployeeNotFoundError: The approver code is unknown.
            ConflictError: A deal with this code already exists.
        """
        sql = "INSERT INTO deal (code, name, approver_code) VALUES (%s, %s, %s) RETURNING code;"
        try:
            with self.db.transaction() as tx:
                if approver_code is not None and not row_exists(tx, "employee", approver_code, lock="SHARE"):
                    raise EmployeeNotFoundError("Approver not found")
                tx.execute(sql, (code, name, approver_code))
        except StatementError as e:
            if e.is_unique_violation:
                raise ConflictError(f"Deal '{code}' already exists") from e
            if e.is_foreign_key_violation:
                raise EmployeeNotFoundError("Approver not found") from e
            logger.error(f"Failed to create deal {code}: {e}")
            raise
        logger.info(f"Created deal {code}")
        return Deal(code=code, name=name, approver_code=approver_code)

    def add_member(self, code: str, member_code: str, role: str) -> DealMember:
        """
        Add an employee to a deal with the given role.

        The deal row is share-locked so a concurrent delete either waits
        for this insert or makes it fail; two concurrent adds both succeed.

        Raises:
            DealNotFoundError: The deal does not exist.
            EmployeeNotFoundError: The member code is unknown.
        """
        sql = """
            INSERT INTO deal_members (deal_code, member_code, role)
            VALUES (%s, %s, %s)
            RETURNING id;
        """
        try:
            with self.db.transaction() as tx:
                if not row_exists(tx, "deal", code, lock="SHARE"):
                    raise DealNotFoundError()
                if not row_exists(tx, "employee", member_code, lock="SHARE"):
                    raise EmployeeNotFoundError()
                result = tx.execute(sql, (code, member_code, role))
        except StatementError as e:
            if e.is_foreign_key_violation:
                raise not_found_for_constraint(e.constraint, DealNotFoundError()) from e
            logger.error(f"Failed to add member {member_code} to deal {code}: {e}")
            raise
        member = DealMember(deal_code=code, member_code=member_code, role=role, id=result.inserted_id)
        logger.info(f"Added {member} #{member.id}")
        return member

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> list[Deal]:
        """Get all deals in insertion order."""
        sql = "SELECT code, name, approver_code FROM deal ORDER BY created_at, code;"
        return [self._row_to_deal(r) for r in self.db.execute(sql).rows]

    def get_by_code(self, code: str) -> tuple[Deal, list[DealMember]]:
        """
        Fetch a deal together with its members.

        Returns:
            (deal, members); members is empty for a deal without members.

        Raises:
            DealNotFoundError: No deal has this code.
        """
        with self.db.transaction() as tx:
            row = tx.execute(
                "SELECT code, name, approver_code FROM deal WHERE code = %s;", (code,)
            ).first()
            if row is None:
                raise DealNotFoundError()
            members = tx.execute(
                "SELECT id, deal_code, member_code, role FROM deal_members "
                "WHERE deal_code = %s ORDER BY id;",
                (code,),
            ).rows
        return self._row_to_deal(row), [self._row_to_member(m) for m in members]

    def get_membership(self, code: str, member_code: str) -> list[DealMember]:
        """
        Get the roles an employee holds on a deal.

        Raises:
            DealNotFoundError: The deal does not exist.
            MembershipNotFoundError: The employee is not a member of the deal.
        """
        with self.db.transaction() as tx:
            if not row_exists(tx, "deal", code):
                raise DealNotFoundError()
            rows = tx.execute(
                "SELECT id, deal_code, member_code, role FROM deal_members "
                "WHERE deal_code = %s AND member_code = %s ORDER BY id;",
                (code, member_code),
            ).rows
        if not rows:
            raise MembershipNotFoundError()
        return [self._row_to_member(r) for r in rows]

    # ── DELETE ────────────────────────────────────────────

    def delete(self, code: str) -> int:
        """
        Delete a deal and all its members in one transaction.

        Deleting an unknown code is a no-op.

        Returns:
            Number of deal rows deleted (0 or 1).
        """
        try:
            with self.db.transaction() as tx:
                tx.execute("SELECT code FROM deal WHERE code = %s FOR UPDATE;", (code,))
                members = tx.execute("DELETE FROM deal_members WHERE deal_code = %s;", (code,)).row_count
                deleted = tx.execute("DELETE FROM deal WHERE code = %s;", (code,)).row_count
        except StatementError as e:
            logger.error(f"Failed to delete deal {code}: {e}")
            raise
        if deleted:
            logger.info(f"Deleted deal {code} with {members} member(s)")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_deal(row: dict) -> Deal:
        return Deal(code=row["code"], name=row["name"], approver_code=row.get("approver_code"))

    @staticmethod
    def _row_to_member(row: dict) -> DealMember:
        return DealMember(
            id=row.get("id"),
            deal_code=row["deal_code"],
            member_code=row["member_code"],
            role=row["role"],
        )
