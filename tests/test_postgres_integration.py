"""
End-to-end tests against a real PostgreSQL database.

Run with TEST_DATABASE_URL pointing at a disposable database; all tables
are truncated before each test.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from fastapi.testclient import TestClient

from main import create_app
from repositories.barrier_repo import BarrierRepository
from repositories.deal_repo import DealRepository
from repositories.employee_repo import EmployeeRepository
from utils.errors import ConflictError, DealNotFoundError, EmployeeNotFoundError


@pytest.fixture
def employees(pg_database):
    repo = EmployeeRepository(pg_database)
    repo.create("E1", "John Smith", "john@x.com")
    repo.create("E2", "Jane Johnson", "jane@x.com")
    repo.create("E3", "Bob Stone", "bob@x.com")
    return repo


def test_deal_round_trip(pg_database, employees):
    deals = DealRepository(pg_database)

    deals.create("D1", "Merger", "E1")
    deal, members = deals.get_by_code("D1")

    assert (deal.code, deal.name, deal.approver_code) == ("D1", "Merger", "E1")
    assert members == []


def test_duplicate_deal_is_conflict(pg_database, employees):
    deals = DealRepository(pg_database)
    deals.create("D1", "Merger")

    with pytest.raises(ConflictError):
        deals.create("D1", "Other")


def test_codes_are_case_sensitive(pg_database, employees):
    with pytest.raises(EmployeeNotFoundError):
        employees.get_by_code("e1")


def test_email_search_is_case_insensitive_and_trimmed(pg_database, employees):
    [found] = employees.search(email="  JOHN@X.com ")

    assert found.code == "E1"


def test_name_search_is_partial(pg_database, employees):
    assert [e.code for e in employees.search(name="JOHN")] == ["E1", "E2"]


def test_add_member_to_missing_deal_inserts_nothing(pg_database, employees):
    with pytest.raises(DealNotFoundError):
        DealRepository(pg_database).add_member("D404", "E1", "lead")

    assert pg_database.execute("SELECT COUNT(*) AS n FROM deal_members;").rows[0]["n"] == 0


def test_delete_barrier_removes_memberships(pg_database, employees):
    barriers = BarrierRepository(pg_database)
    barriers.create("B1", "Perm")
    barriers.add_member("B1", "E1", date(2024, 1, 1), date(2024, 6, 1), "active")

    assert barriers.delete("B1") == 1
    assert barriers.get_status_for_employee("E1") == []
    assert barriers.delete("B1") == 0


def test_deleting_deal_detaches_barrier_memberships(pg_database, employees):
    deals = DealRepository(pg_database)
    barriers = BarrierRepository(pg_database)
    deals.create("D1", "Merger")
    barriers.create("B1", "Perm")
    barriers.add_member("B1", "E1", date(2024, 1, 1), None, "active", deal_code="D1")

    deals.delete("D1")

    [status] = barriers.get_status_for_employee("E1")
    assert status.deal_code is None


def test_concurrent_add_member_keeps_both_rows(pg_database, employees):
    deals = DealRepository(pg_database)
    deals.create("D1", "Merger")

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [pool.submit(deals.add_member, "D1", code, "lead") for code in ("E1", "E2")]
        for future in futures:
            future.result()

    _, members = deals.get_by_code("D1")
    assert sorted(m.member_code for m in members) == ["E1", "E2"]


def test_delete_racing_add_member_leaves_no_orphans(pg_database, employees):
    deals = DealRepository(pg_database)

    for round_no in range(10):
        code = f"D{round_no}"
        deals.create(code, "Race")
        with ThreadPoolExecutor(max_workers=2) as pool:
            added = pool.submit(deals.add_member, code, "E1", "lead")
            deleted = pool.submit(deals.delete, code)
            assert deleted.result() == 1
            try:
                added.result()
            except DealNotFoundError:
                pass

    orphans = pg_database.execute(
        "SELECT COUNT(*) AS n FROM deal_members dm "
        "LEFT JOIN deal d ON d.code = dm.deal_code WHERE d.code IS NULL;"
    ).rows[0]["n"]
    assert orphans == 0


def test_barrier_http_example(pg_database, employees):
    app = create_app(database=pg_database, init_schema=False)
    client = TestClient(app)

    assert client.post("/barrier", json={"code": "B1", "name": "Perm"}).status_code == 201
    assert client.get("/barrier/B1").json() == {
        "barrier": {"code": "B1", "name": "Perm", "approver_code": None},
        "members": [],
    }
    response = client.post(
        "/barrier/B1/member",
        json={"member_code": "E1", "on_date": "2024-01-01", "off_date": "2024-06-01", "status": "active"},
    )
    assert response.status_code == 201
    assert client.get("/barrier/status/E1").json() == [{
        "barrier_code": "B1",
        "barrier_name": "Perm",
        "on_date": "2024-01-01",
        "off_date": "2024-06-01",
        "status": "active",
        "deal_code": None,
    }]
    assert client.get("/barrier/status/E404").status_code == 404
