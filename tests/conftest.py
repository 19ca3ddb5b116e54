"""Shared fixtures: a scripted stand-in for `Database` and an app with mocked repositories."""

import os
from contextlib import contextmanager
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from db.connection import Database, QueryResult
from handlers.dependencies import get_barrier_repo, get_deal_repo, get_employee_repo
from main import create_app
from repositories.barrier_repo import BarrierRepository
from repositories.deal_repo import DealRepository
from repositories.employee_repo import EmployeeRepository


def rows(*items: dict) -> QueryResult:
    """Result of a SELECT returning the given rows."""
    return QueryResult(rows=list(items), row_count=len(items))


def affected(count: int) -> QueryResult:
    """Result of DML without RETURNING."""
    return QueryResult(rows=[], row_count=count)


def inserted(new_id) -> QueryResult:
    """Result of an INSERT ... RETURNING id."""
    return QueryResult(rows=[{"id": new_id}], row_count=1, inserted_id=new_id)


class FakeDatabase:
    """
    Replays queued results in order and records every statement.

    Queue an exception instance to make the matching call raise it.
    """

    def __init__(self, *results):
        self.results = list(results)
        self.statements: list[tuple[str, tuple]] = []
        self.commits = 0
        self.rollbacks = 0

    def execute(self, statement, parameters=()):
        self.statements.append((" ".join(statement.split()), tuple(parameters)))
        if not self.results:
            return QueryResult()
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    @contextmanager
    def transaction(self):
        try:
            yield self
        except BaseException:
            self.rollbacks += 1
            raise
        self.commits += 1

    def sql(self, index: int) -> str:
        return self.statements[index][0]


@pytest.fixture
def repos():
    """Mocked repositories keyed by entity name."""
    return {
        "employee": MagicMock(spec=EmployeeRepository),
        "deal": MagicMock(spec=DealRepository),
        "barrier": MagicMock(spec=BarrierRepository),
    }


@pytest.fixture
def client(repos):
    """TestClient whose routes use the mocked repositories; no database is opened."""
    app = create_app(database=Database("postgresql://unused"), init_schema=False)
    app.dependency_overrides[get_employee_repo] = lambda: repos["employee"]
    app.dependency_overrides[get_deal_repo] = lambda: repos["deal"]
    app.dependency_overrides[get_barrier_repo] = lambda: repos["barrier"]
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def pg_database():
    """
    A real PostgreSQL database with a fresh schema.
    Skipped unless TEST_DATABASE_URL points at a disposable database.
    """
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL not set")
    from db.init_db import create_tables

    database = Database(url, min_conn=1, max_conn=8)
    database.open()
    create_tables(database)
    database.execute("TRUNCATE barrier_members, deal_members, barrier, deal, employee RESTART IDENTITY;")
    try:
        yield database
    finally:
        database.close()
