from pydantic import BaseModel, constr
from typing import Optional

RequiredStr = constr(strip_whitespace=True, min_length=1)


class EmployeeBase(BaseModel):
    """
    code: unique, required, case-sensitive
    name: required
    email: optional, matched case-insensitively
    """
    code: RequiredStr
    name: RequiredStr
    email: Optional[str] = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeInfo(EmployeeBase):
    code: str
    name: str

    class Config:
        from_attributes = True
