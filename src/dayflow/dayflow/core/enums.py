from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"
    ON_LEAVE = "on-leave"


class CheckMethod(str, Enum):
    WEB = "web"
    MOBILE = "mobile"
    BIOMETRIC = "biometric"
    MANUAL = "manual"


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    EMERGENCY = "emergency"
    UNPAID = "unpaid"
    OTHER = "other"


class LeaveBucket(str, Enum):
    """Balance buckets embedded in the employee profile."""

    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    CASUAL = "casual"


class LeaveStatus(str, Enum):
    """Leave request lifecycle. Every status except PENDING is terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"
