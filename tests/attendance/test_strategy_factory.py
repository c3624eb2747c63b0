from datetime import date, datetime, time

from dayflow.attendance.factory import AttendanceStrategyFactory
from dayflow.attendance.strategies.late_strategy import LateStrategy
from dayflow.attendance.strategies.normal_strategy import NormalStrategy
from dayflow.core.enums import AttendanceStatus


def test_factory_checkin_on_time_at_cutoff():
    today = date(2025, 1, 6)
    now = datetime(2025, 1, 6, 9, 15, 0)

    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=now, today=today, workday_start=time(9, 0), grace_minutes=15)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_late_seconds_after_grace():
    today = date(2025, 1, 6)
    now = datetime(2025, 1, 6, 9, 15, 45)

    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=now, today=today, workday_start=time(9, 0), grace_minutes=15)

    assert isinstance(strategy, LateStrategy)


def test_late_strategy_notes_minutes_past_start():
    decision = LateStrategy().decide_checkin(
        now=datetime(2025, 1, 6, 9, 40), today=date(2025, 1, 6), workday_start=time(9, 0), grace_minutes=15
    )

    assert decision.status == AttendanceStatus.LATE
    assert decision.note == "Late by 40 minutes"
