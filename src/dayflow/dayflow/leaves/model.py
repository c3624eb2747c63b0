from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import LeaveBucket, LeaveStatus, LeaveType

# The one leave-type to balance-bucket table. Approval and balance checks
# both resolve buckets through bucket_for().
LEAVE_TYPE_BUCKETS: dict[LeaveType, LeaveBucket] = {
    LeaveType.ANNUAL: LeaveBucket.ANNUAL,
    LeaveType.SICK: LeaveBucket.SICK,
    LeaveType.PERSONAL: LeaveBucket.PERSONAL,
}


def bucket_for(leave_type: LeaveType) -> LeaveBucket:
    return LEAVE_TYPE_BUCKETS.get(leave_type, LeaveBucket.CASUAL)


def types_for_bucket(bucket: LeaveBucket) -> list[LeaveType]:
    return [t for t in LeaveType if bucket_for(t) == bucket]


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    is_half_day: bool
    duration: Decimal
    reason: str
    status: LeaveStatus
    applied_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @property
    def bucket(self) -> LeaveBucket:
        return bucket_for(self.leave_type)

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "employee_id": self.employee_id,
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "is_half_day": self.is_half_day,
            "duration": str(self.duration),
            "reason": self.reason,
            "status": self.status.value,
            "applied_at": self.applied_at.isoformat(),
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "rejected_by": self.rejected_by,
            "rejected_at": self.rejected_at.isoformat() if self.rejected_at else None,
            "rejection_reason": self.rejection_reason,
        }


@dataclass(frozen=True)
class BalanceCheck:
    available_balance: Decimal
    used_days: Decimal
    remaining_balance: Decimal
    sufficient: bool

    def to_dict(self) -> dict:
        return {
            "available_balance": str(self.available_balance),
            "used_days": str(self.used_days),
            "remaining_balance": str(self.remaining_balance),
            "sufficient": self.sufficient,
        }


@dataclass(frozen=True)
class LeaveTypeSummary:
    leave_type: LeaveType
    total_days: Decimal
    approved_days: Decimal
    pending_days: Decimal
    rejected_days: Decimal

    def to_dict(self) -> dict:
        return {
            "leave_type": self.leave_type.value,
            "total_days": str(self.total_days),
            "approved_days": str(self.approved_days),
            "pending_days": str(self.pending_days),
            "rejected_days": str(self.rejected_days),
        }
