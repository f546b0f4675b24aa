"""Room DTOs."""

from typing import Optional

from pydantic import ConfigDict

from ._strict_base import StrictModel


class RoomResponse(StrictModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    capacity: int
