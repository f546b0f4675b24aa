"""Version 1 routers."""

from . import api_keys, auth, bookings, health, rooms, users

__all__ = ["api_keys", "auth", "bookings", "health", "rooms", "users"]
