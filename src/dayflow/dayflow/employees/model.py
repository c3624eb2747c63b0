from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_LEAVE_BALANCES
from ..core.enums import LeaveBucket


@dataclass(frozen=True)
class CompensationProfile:
    """Compensation fields read from the employee entity.

    Note: Pure data object; this core never writes it.
    """

    employee_id: int
    basic_salary: Decimal
    currency: str
    company_name: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class EmployeeProfile:
    employee_id: int
    employee_code: Optional[str]
    compensation: CompensationProfile
    leave_balance: dict[LeaveBucket, Decimal] = field(default_factory=dict)
    is_active: bool = True

    def balance_for(self, bucket: LeaveBucket) -> Decimal:
        """Stored days, or the opening balance when the bucket has no row yet."""
        if bucket in self.leave_balance:
            return self.leave_balance[bucket]
        return Decimal(DEFAULT_LEAVE_BALANCES.get(bucket.value, "0"))
