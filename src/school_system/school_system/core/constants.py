"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_TOKEN_TTL_DAYS = 1
RESET_TOKEN_TTL_HOURS = 1
RESET_TOKEN_BYTES = 20
MIN_PASSWORD_LENGTH = 6
JWT_ALGORITHM = "HS256"
UNASSIGNED_TEACHER = "Not assigned"
OCCUPIED = "occupied"
