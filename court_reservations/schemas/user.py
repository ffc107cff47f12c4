"""User schemas."""
from pydantic import ConfigDict
from typing import Optional

from court_reservations.schemas.base import CamelModel


class UserPublic(CamelModel):
    """User fields exposed alongside a reservation."""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)
