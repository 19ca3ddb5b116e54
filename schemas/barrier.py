from pydantic import BaseModel
from typing import List, Optional
from datetime import date

from schemas.employee import RequiredStr


class BarrierBase(BaseModel):
    code: RequiredStr
    name: RequiredStr
    approver_code: Optional[str] = None


class BarrierCreate(BarrierBase):
    pass


class BarrierInfo(BarrierBase):
    code: str
    name: str

    class Config:
        from_attributes = True


class BarrierMemberCreate(BaseModel):
    """
    member_code, on_date, status: required
    off_date: optional, open-ended membership when absent
    deal_code: optional, must name an existing deal
    role: optional
    """
    member_code: RequiredStr
    on_date: date
    off_date: Optional[date] = None
    status: RequiredStr
    deal_code: Optional[str] = None
    role: Optional[str] = None


class BarrierMemberInfo(BaseModel):
    id: Optional[int] = None
    barrier_code: str
    member_code: str
    on_date: date
    off_date: Optional[date] = None
    status: str
    deal_code: Optional[str] = None
    role: Optional[str] = None

    class Config:
        from_attributes = True


class BarrierMembershipInfo(BarrierMemberInfo):
    barrier_name: str


class BarrierDetail(BaseModel):
    barrier: BarrierInfo
    members: List[BarrierMemberInfo]


class BarrierStatusInfo(BaseModel):
    barrier_code: str
    barrier_name: str
    on_date: date
    off_date: Optional[date] = None
    status: str
    deal_code: Optional[str] = None

    class Config:
        from_attributes = True
