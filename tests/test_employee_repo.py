"""Tests for EmployeeRepository against a scripted database."""

import pytest

from models.employee import Employee
from repositories.employee_repo import EmployeeRepository
from tests.conftest import FakeDatabase, inserted, rows
from utils.errors import ConflictError, EmployeeNotFoundError, InvalidArgumentError, StatementError

JOHN = {"code": "E1", "name": "John Smith", "email": "john@x.com"}
JANE = {"code": "E2", "name": "Jane Johnson", "email": "jane@x.com"}


def test_list_all_orders_by_insertion():
    db = FakeDatabase(rows(JOHN, JANE))

    employees = EmployeeRepository(db).list_all()

    assert employees == [Employee("E1", "John Smith", "john@x.com"), Employee("E2", "Jane Johnson", "jane@x.com")]
    assert "ORDER BY created_at, code" in db.sql(0)


def test_get_by_code():
    db = FakeDatabase(rows(JOHN))

    assert EmployeeRepository(db).get_by_code("E1") == Employee("E1", "John Smith", "john@x.com")
    assert db.statements[0][1] == ("E1",)


def test_get_by_code_unknown_raises_not_found():
    with pytest.raises(EmployeeNotFoundError):
        EmployeeRepository(FakeDatabase(rows())).get_by_code("nope")


def test_search_by_email_trims_and_matches_case_insensitively():
    db = FakeDatabase(rows(JOHN))

    result = EmployeeRepository(db).search_by_email("  JOHN@X.com ")

    assert result == [Employee("E1", "John Smith", "john@x.com")]
    assert "LOWER(email) = LOWER(%s)" in db.sql(0)
    assert db.statements[0][1] == ("JOHN@X.com",)


def test_search_by_email_no_match():
    with pytest.raises(EmployeeNotFoundError):
        EmployeeRepository(FakeDatabase(rows())).search_by_email("ghost@x.com")


def test_search_by_name_uses_escaped_substring_pattern():
    db = FakeDatabase(rows(JOHN, JANE))

    result = EmployeeRepository(db).search_by_name("john_")

    assert [e.code for e in result] == ["E1", "E2"]
    assert "LOWER(name) LIKE LOWER(%s)" in db.sql(0)
    assert db.statements[0][1] == ("%john\\_%",)


def test_search_by_name_no_match():
    with pytest.raises(EmployeeNotFoundError):
        EmployeeRepository(FakeDatabase(rows())).search_by_name("zed")


def test_search_requires_email_or_name():
    db = FakeDatabase()

    with pytest.raises(InvalidArgumentError) as excinfo:
        EmployeeRepository(db).search(email="  ", name=None)

    assert "'email' or 'name'" in excinfo.value.message
    assert db.statements == []


def test_search_prefers_email_over_name():
    db = FakeDatabase(rows(JOHN))

    EmployeeRepository(db).search(email="john@x.com", name="Jane")

    assert "LOWER(email)" in db.sql(0)


def test_search_falls_back_to_name():
    db = FakeDatabase(rows(JANE))

    EmployeeRepository(db).search(name="jane")

    assert "LIKE" in db.sql(0)


def test_create_returns_employee():
    db = FakeDatabase(inserted("E3"))

    employee = EmployeeRepository(db).create("E3", "Bob", " bob@x.com ")

    assert employee == Employee("E3", "Bob", "bob@x.com")
    assert db.statements[0][1] == ("E3", "Bob", "bob@x.com")


def test_create_duplicate_code_is_conflict():
    db = FakeDatabase(StatementError("duplicate key", pgcode="23505"))

    with pytest.raises(ConflictError):
        EmployeeRepository(db).create("E1", "John", None)


def test_create_other_statement_error_propagates():
    db = FakeDatabase(StatementError("value too long", pgcode="22001"))

    with pytest.raises(StatementError):
        EmployeeRepository(db).create("E1", "x" * 500, None)


def test_exists():
    repo = EmployeeRepository(FakeDatabase(rows({"?column?": 1}), rows()))

    assert repo.exists("E1") is True
    assert repo.exists("E9") is False
