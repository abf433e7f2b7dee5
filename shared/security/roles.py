from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    RESTAURANT = "RESTAURANT"
    RIDER = "RIDER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Actor:
    """The authenticated party behind a request or socket."""
    id: str
    role: Role
