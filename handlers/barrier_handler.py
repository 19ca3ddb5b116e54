"""
handlers/barrier_handler.py
---------------------------
HTTP routes for information barriers and barrier membership.

Static paths (/search, /member, /status/...) are declared before
/{code} so they are not captured as barrier codes.
"""

from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from handlers.dependencies import get_barrier_repo
from repositories.barrier_repo import BarrierRepository
from schemas.barrier import (
    BarrierCreate,
    BarrierDetail,
    BarrierInfo,
    BarrierMemberCreate,
    BarrierMemberInfo,
    BarrierMembershipInfo,
    BarrierStatusInfo,
)
from schemas.common import DeleteResult
from utils.errors import InvalidArgumentError

router = APIRouter()


@router.get("", response_model=List[BarrierInfo])
def list_barriers(repo: BarrierRepository = Depends(get_barrier_repo)):
    """Get all barriers."""
    return repo.list_all()


@router.post("", response_model=BarrierInfo, status_code=status.HTTP_201_CREATED)
def create_barrier(body: BarrierCreate, repo: BarrierRepository = Depends(get_barrier_repo)):
    return repo.create(body.code, body.name, body.approver_code)


@router.get("/search", response_model=List[BarrierInfo])
def search_barriers(
    name: Optional[str] = Query(None, description="Partial barrier name, e.g. 'perm'"),
    repo: BarrierRepository = Depends(get_barrier_repo),
):
    """Search barriers using a partial, case-insensitive name match."""
    if not name or not name.strip():
        raise InvalidArgumentError("Query parameter 'name' is required.")
    return repo.search_by_name(name)


@router.get("/member", response_model=List[BarrierMembershipInfo])
def list_barrier_memberships(repo: BarrierRepository = Depends(get_barrier_repo)):
    """Get every barrier membership with its barrier name."""
    return [{**asdict(member), "barrier_name": name} for name, member in repo.list_members()]


@router.get("/status/{member_code}", response_model=List[BarrierStatusInfo])
def get_barrier_status(member_code: str, repo: BarrierRepository = Depends(get_barrier_repo)):
    """Get all barriers for the given employee code."""
    return repo.get_status_for_employee(member_code)


@router.get("/{code}", response_model=BarrierDetail)
def get_barrier(code: str, repo: BarrierRepository = Depends(get_barrier_repo)):
    """Get a barrier by code, with its members."""
    barrier, members = repo.get_by_code(code)
    return {"barrier": barrier, "members": members}


@router.delete("/{code}", response_model=DeleteResult)
def delete_barrier(code: str, repo: BarrierRepository = Depends(get_barrier_repo)):
    """Delete a barrier and its members. Unknown codes delete nothing."""
    return {"deleted": repo.delete(code)}


@router.post("/{code}/member", response_model=BarrierMemberInfo, status_code=status.HTTP_201_CREATED)
def add_barrier_member(code: str, body: BarrierMemberCreate, repo: BarrierRepository = Depends(get_barrier_repo)):
    """Add an employee to a barrier with membership details."""
    return repo.add_member(
        code,
        body.member_code,
        on_date=body.on_date,
        off_date=body.off_date,
        status=body.status,
        deal_code=body.deal_code,
        role=body.role,
    )
