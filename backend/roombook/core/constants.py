# backend/roombook/core/constants.py
"""
Application-wide constants for the room booking service.
"""

BRAND_NAME = "Roombook"
SERVICE_NAME = "roombook-api"
API_VERSION = "1.0.0"
API_PREFIX = "/api/v1"

# API keys: 32 random bytes rendered as 64 lowercase hex characters
API_KEY_SECRET_BYTES = 32
API_KEY_SECRET_LENGTH = API_KEY_SECRET_BYTES * 2
DEFAULT_API_KEY_PREFIX_LENGTH = 8

# Session tokens are opaque url-safe strings minted server side
SESSION_TOKEN_BYTES = 32
DEFAULT_SESSION_COOKIE_NAME = "auth_token"
DEFAULT_SESSION_MAX_AGE_SECONDS = 7 * 24 * 60 * 60

# Reason strings surfaced in error payloads under the "error" key
ERROR_AUTH_REQUIRED = "Authentication required"
ERROR_NOT_FOUND = "not found"
ERROR_NOT_AUTHORIZED = "not authorized"
ERROR_ALREADY_BOOKED = "already booked"
ERROR_UNAVAILABLE = "service unavailable"
ERROR_INVALID_FILTER = "invalid filter"
ERROR_INVALID_INPUT = "invalid input"

# Rooms created on a fresh database when seeding is enabled
DEFAULT_ROOMS = (
    {
        "name": "Green Phone Room",
        "description": "Small green phone booth for private calls",
        "capacity": 1,
    },
    {
        "name": "Lovelace",
        "description": "Conference room named after Ada Lovelace",
        "capacity": 4,
    },
)

# Postgres error codes that mean "another writer got there first"
PG_SERIALIZATION_FAILURE = "40001"
PG_DEADLOCK_DETECTED = "40P01"
PG_EXCLUSION_VIOLATION = "23P01"

BOOKING_OVERLAP_CONSTRAINT = "bookings_no_overlap_per_room"
