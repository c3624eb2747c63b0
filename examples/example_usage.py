"""Example: drive the service layer directly, without Flask.

Controllers stay thin; every rule lives in the services wired by the container.
"""

import importlib
from datetime import date

from dayflow.container import build_container
from dayflow.payroll.model import PayPeriod
from dayflow.settings import get_settings_module


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    code = container.sequence_issuer.issue("DayFlow", "John", "Doe", 2025)
    print("issued", code)

    for record in container.attendance_service.history(1, limit=5):
        print(record.to_dict())

    period = PayPeriod(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))
    print(container.payroll_service.preview(1, period).to_dict())


if __name__ == "__main__":
    main()
