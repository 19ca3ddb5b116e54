"""
models/barrier.py
-----------------
Domain models for information barriers, their members, and the
per-employee barrier status view.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Barrier:
    """
    An information-access restriction grouping employees.

    Attributes:
        code: Natural primary key.
        name: Barrier name (searched case-insensitively).
        approver_code: Code of the approving employee, if any.
    """
    code: str
    name: str
    approver_code: Optional[str] = None


@dataclass
class BarrierMember:
    """
    An employee's membership in a barrier.

    Attributes:
        barrier_code: The barrier the employee sits behind.
        member_code: The employee.
        on_date: First day of the membership.
        off_date: Last day of the membership (open-ended if None).
        status: Free-form status, e.g. 'active'.
        deal_code: Deal that caused the membership, if any.
        role: Optional role of the employee inside the barrier.
        id: Database primary key (None for new records).
    """
    barrier_code: str
    member_code: str
    on_date: date
    status: str
    off_date: Optional[date] = None
    deal_code: Optional[str] = None
    role: Optional[str] = None
    id: Optional[int] = None

    def is_open_ended(self) -> bool:
        """Returns True if the membership has no end date."""
        return self.off_date is None


@dataclass
class BarrierStatus:
    """One barrier membership of an employee, joined with the barrier name."""
    barrier_code: str
    barrier_name: str
    on_date: date
    status: str
    off_date: Optional[date] = None
    deal_code: Optional[str] = None
