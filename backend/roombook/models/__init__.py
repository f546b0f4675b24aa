"""ORM models; importing this package registers every table on ``Base``."""

from .api_key import ApiKey
from .booking import Booking
from .room import Room
from .user import User

__all__ = ["ApiKey", "Booking", "Room", "User"]
