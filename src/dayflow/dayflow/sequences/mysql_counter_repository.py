from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .repository import CounterRepository


class MySQLCounterRepository(CounterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def next_value(self, key: str) -> int:
        # LAST_INSERT_ID(expr) is connection-scoped, so the read below sees
        # exactly the value this statement wrote.
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute(
                """
                INSERT INTO sequence_counters(counter_key, seq)
                VALUES(%s, LAST_INSERT_ID(1))
                ON DUPLICATE KEY UPDATE seq = LAST_INSERT_ID(seq + 1)
                """,
                (key.upper(),),
            )
            cur.execute("SELECT LAST_INSERT_ID()")
            (value,) = cur.fetchone()
            return int(value)
