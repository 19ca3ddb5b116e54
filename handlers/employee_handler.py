"""
handlers/employee_handler.py
----------------------------
HTTP routes for employees.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from handlers.dependencies import get_employee_repo
from repositories.employee_repo import EmployeeRepository
from schemas.employee import EmployeeCreate, EmployeeInfo

router = APIRouter()


@router.get("", response_model=List[EmployeeInfo])
def list_employees(repo: EmployeeRepository = Depends(get_employee_repo)):
    """Get all employees."""
    return repo.list_all()


@router.post("", response_model=EmployeeInfo, status_code=status.HTTP_201_CREATED)
def create_employee(body: EmployeeCreate, repo: EmployeeRepository = Depends(get_employee_repo)):
    return repo.create(body.code, body.name, body.email)


@router.get("/search", response_model=List[EmployeeInfo])
def search_employees(
    email: Optional[str] = Query(None, description="Full email, matched case-insensitively"),
    name: Optional[str] = Query(None, description="Partial name, matched case-insensitively"),
    repo: EmployeeRepository = Depends(get_employee_repo),
):
    """
    Search employees by exact email or partial name.
    Email takes precedence when both are given.
    """
    return repo.search(email=email, name=name)


@router.get("/{code}", response_model=EmployeeInfo)
def get_employee(code: str, repo: EmployeeRepository = Depends(get_employee_repo)):
    return repo.get_by_code(code)
