"""
repositories/common.py
----------------------
Small SQL helpers shared by the entity repositories.

`executor` below is anything with an ``execute(statement, parameters)``
method: the `Database` itself or an open `Transaction`.
"""

from typing import Optional

from utils.errors import (
    BarrierNotFoundError,
    DealNotFoundError,
    EmployeeNotFoundError,
    NotFoundError,
)

_TABLES = ("employee", "deal", "barrier")
_LOCK_MODES = ("SHARE", "UPDATE")


def like_pattern(text: str) -> str:
    """Build a substring LIKE pattern, escaping the user's own wildcards."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def row_exists(executor, table: str, code: str, lock: Optional[str] = None) -> bool:
    """
    Check whether a row with the given code exists.

    Args:
        executor: Database or Transaction.
        table: One of 'employee', 'deal', 'barrier'.
        code: Natural key to look up (exact, case-sensitive).
        lock: 'SHARE' or 'UPDATE' to lock the row until the transaction ends.
    """
    if table not in _TABLES:
        raise ValueError(f"Unknown table: {table}")
    sql = f"SELECT 1 FROM {table} WHERE code = %s"
    if lock is not None:
        if lock not in _LOCK_MODES:
            raise ValueError(f"Unknown lock mode: {lock}")
        sql += f" FOR {lock}"
    return executor.execute(sql + ";", (code,)).row_count > 0


def not_found_for_constraint(constraint: Optional[str], default: NotFoundError) -> NotFoundError:
    """Pick the NotFound error matching a violated foreign-key constraint."""
    name = constraint or ""
    if "member_code" in name or "approver_code" in name:
        return EmployeeNotFoundError()
    if "deal_code" in name:
        return DealNotFoundError()
    if "barrier_code" in name:
        return BarrierNotFoundError()
    return default
