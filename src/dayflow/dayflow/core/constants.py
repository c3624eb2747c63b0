"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_WORKDAY_START = time(9, 0)
DEFAULT_LATE_GRACE_MINUTES = 15
STANDARD_WORKDAY_HOURS = 8
DEFAULT_HISTORY_LIMIT = 30

HALF_DAY_DURATION = "0.5"

SEQUENCE_DIGITS = 4
SEQUENCE_MAX = 9999
CODE_LENGTH = 2
CODE_PAD_CHAR = "X"

# Opening balance for a bucket that has no stored row yet.
DEFAULT_LEAVE_BALANCES = {
    "annual": "12",
    "sick": "10",
    "personal": "5",
    "casual": "7",
}
