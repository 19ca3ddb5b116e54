"""
models/employee.py
------------------
Domain model for employees.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Employee:
    """
    An employee, identified by a business code.

    Attributes:
        code: Natural primary key (case-sensitive, immutable).
        name: Display name.
        email: Contact email; matched case-insensitively.
    """
    code: str
    name: str
    email: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.code} | {self.name} | {self.email or '-'}"
