from pydantic import BaseModel
from typing import List, Optional

from schemas.employee import RequiredStr


class DealBase(BaseModel):
    code: RequiredStr
    name: RequiredStr
    approver_code: Optional[str] = None


class DealCreate(DealBase):
    pass


class DealInfo(DealBase):
    code: str
    name: str

    class Config:
        from_attributes = True


class DealMemberCreate(BaseModel):
    member_code: RequiredStr
    role: RequiredStr


class DealMemberInfo(BaseModel):
    id: Optional[int] = None
    deal_code: str
    member_code: str
    role: str

    class Config:
        from_attributes = True


class DealDetail(BaseModel):
    deal: DealInfo
    members: List[DealMemberInfo]
