"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200

MIN_PROGRESS = 0
MAX_PROGRESS = 100

MAX_RECOMMENDATIONS = 6

TEST_QUESTION_COUNT = 40
TEST_MAX_SCORE = 40.0

ANNUAL_LEAVE_DAYS = 12
