from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...attendance.model import AttendanceSummary
from ...employees.model import CompensationProfile
from ..model import PayPeriod, PayrollBreakdown
from ..policy import PayrollPolicy


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    Implementations must be pure: identical inputs give identical outputs and
    nothing is read from or written to storage.
    """

    @abstractmethod
    def compute(
        self,
        profile: CompensationProfile,
        summary: AttendanceSummary,
        period: PayPeriod,
        policy: Optional[PayrollPolicy] = None,
    ) -> PayrollBreakdown:
        raise NotImplementedError
