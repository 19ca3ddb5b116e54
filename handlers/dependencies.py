"""
handlers/dependencies.py
------------------------
FastAPI dependencies that hand each request its repositories.
The `Database` lives on `app.state`, put there by the application factory.
"""

from fastapi import Depends, Request

from db.connection import Database
from repositories.barrier_repo import BarrierRepository
from repositories.deal_repo import DealRepository
from repositories.employee_repo import EmployeeRepository


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_employee_repo(db: Database = Depends(get_database)) -> EmployeeRepository:
    return EmployeeRepository(db)


def get_deal_repo(db: Database = Depends(get_database)) -> DealRepository:
    return DealRepository(db)


def get_barrier_repo(db: Database = Depends(get_database)) -> BarrierRepository:
    return BarrierRepository(db)
