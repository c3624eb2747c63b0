from __future__ import annotations

import logging
import re

from ..core.constants import CODE_LENGTH, CODE_PAD_CHAR, SEQUENCE_DIGITS, SEQUENCE_MAX
from ..core.exceptions import StateError, ValidationError
from .repository import CounterRepository

logger = logging.getLogger(__name__)

_NON_ALPHA = re.compile(r"[^A-Za-z]")


def normalize_code(value: str) -> str:
    """First two ASCII letters, uppercased, right-padded with X."""
    letters = _NON_ALPHA.sub("", value or "").upper()
    return (letters[:CODE_LENGTH]).ljust(CODE_LENGTH, CODE_PAD_CHAR)


def counter_key(company: str, join_year: int) -> str:
    return f"{normalize_code(company)}_{int(join_year)}"


class SequenceIssuer:
    """Issues employee codes like ``DAJODO20250001``.

    Uniqueness per (company code, year) relies entirely on the repository's
    atomic increment; this class never reads a counter separately.
    """

    def __init__(self, counters: CounterRepository):
        self._counters = counters

    def issue(self, company: str, first_name: str, last_name: str, join_year: int) -> str:
        year = int(join_year)
        if year < 1900 or year > 9999:
            raise ValidationError("join year must be a four digit year")

        company_code = normalize_code(company)
        key = f"{company_code}_{year}"
        seq = self._counters.next_value(key)
        if seq > SEQUENCE_MAX:
            logger.error("sequence exhausted", extra={"counter_key": key, "seq": seq})
            raise StateError(f"Employee sequence for {key} is exhausted")

        code = (
            f"{company_code}{normalize_code(first_name)}{normalize_code(last_name)}"
            f"{year}{seq:0{SEQUENCE_DIGITS}d}"
        )
        logger.info("employee code issued", extra={"counter_key": key, "employee_code": code})
        return code
