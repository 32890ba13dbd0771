"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CAMPUS_TIMEZONE = "UTC"
DEFAULT_STATE_REFRESH_SECONDS = 30
DASHBOARD_SECTION_LIMIT = 6
MIN_PASSWORD_LENGTH = 6

# MySQL ER_DUP_ENTRY
MYSQL_DUPLICATE_KEY_ERRNO = 1062

DUPLICATE_ENROLLMENT_MESSAGE = "You are already enrolled in this lecture!"
DUPLICATE_ATTENDANCE_MESSAGE = "You have already marked attendance for this lecture!"
