"""
models/ - Domain Models
=======================
Plain dataclasses returned by the repositories.
"""

from models.barrier import Barrier, BarrierMember, BarrierStatus
from models.deal import Deal, DealMember
from models.employee import Employee

__all__ = ["Barrier", "BarrierMember", "BarrierStatus", "Deal", "DealMember", "Employee"]
