from enum import Enum
from dataclasses import dataclass


class UserRole(Enum):
    ADMIN = "ADMIN"
    OWNER = "OWNER"
    AGENT = "AGENT"
    CUSTOMER = "CUSTOMER"


@dataclass
class Actor:
    user_id: str
    role: UserRole
    email: str = ""
