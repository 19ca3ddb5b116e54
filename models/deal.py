"""
models/deal.py
--------------
Domain models for deals and their members.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Deal:
    """
    A named business engagement.

    Attributes:
        code: Natural primary key.
        name: Deal name.
        approver_code: Code of the approving employee, if any.
    """
    code: str
    name: str
    approver_code: Optional[str] = None


@dataclass
class DealMember:
    """An employee's role on a deal."""
    deal_code: str
    member_code: str
    role: str
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.member_code} @ {self.deal_code} ({self.role})"
