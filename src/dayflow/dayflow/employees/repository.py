from __future__ import annotations

from typing import Optional, Protocol

from .model import EmployeeProfile


class EmployeeRepository(Protocol):
    """Read access to the employee-profile collaborator.

    Note: services depend on this interface, never on a concrete database.
    The leave balance is mutated only through the leave repository's
    approval transaction.
    """

    def get_by_id(self, employee_id: int) -> Optional[EmployeeProfile]:
        raise NotImplementedError
