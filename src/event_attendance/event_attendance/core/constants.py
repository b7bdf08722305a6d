"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_HISTORY_LIMIT = 200

ATTENDANCE_CODE_LENGTH = 6
# No 0/O or 1/I: codes are read off a screen and typed by hand.
ATTENDANCE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
