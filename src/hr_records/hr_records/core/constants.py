"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_TOKEN_MAX_AGE_DAYS = 7
MIN_PASSWORD_LENGTH = 6
TOKEN_SALT = "hr-records-auth"
