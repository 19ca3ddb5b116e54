"""
handlers/deal_handler.py
------------------------
HTTP routes for deals and deal membership.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from handlers.dependencies import get_deal_repo
from repositories.deal_repo import DealRepository
from schemas.common import DeleteResult
from schemas.deal import DealCreate, DealDetail, DealInfo, DealMemberCreate, DealMemberInfo

router = APIRouter()


@router.get("", response_model=List[DealInfo])
def list_deals(repo: DealRepository = Depends(get_deal_repo)):
    """Get all deals."""
    return repo.list_all()


@router.post("", response_model=DealInfo, status_code=status.HTTP_201_CREATED)
def create_deal(body: DealCreate, repo: DealRepository = Depends(get_deal_repo)):
    return repo.create(body.code, body.name, body.approver_code)


@router.get("/{code}", response_model=DealDetail)
def get_deal(code: str, repo: DealRepository = Depends(get_deal_repo)):
    """Get a deal by code, with its members."""
    deal, members = repo.get_by_code(code)
    return {"deal": deal, "members": members}


@router.delete("/{code}", response_model=DeleteResult)
def delete_deal(code: str, repo: DealRepository = Depends(get_deal_repo)):
    """Delete a deal and its members. Unknown codes delete nothing."""
    return {"deleted": repo.delete(code)}


@router.post("/{code}/member", response_model=DealMemberInfo, status_code=status.HTTP_201_CREATED)
def add_deal_member(code: str, body: DealMemberCreate, repo: DealRepository = Depends(get_deal_repo)):
    return repo.add_member(code, body.member_code, body.role)


@router.get("/{code}/member/{member_code}", response_model=List[DealMemberInfo])
def get_deal_membership(code: str, member_code: str, repo: DealRepository = Depends(get_deal_repo)):
    """Get the roles an employee holds on a deal."""
    return repo.get_membership(code, member_code)
