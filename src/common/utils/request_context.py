from typing import Optional

from common.models.users import Actor, UserRole


def get_actor(event: dict) -> Actor:
    """Caller identity passed down by the JWT authorizer.

    Raises KeyError when the authorizer context is missing.
    """
    authorizer = event["requestContext"]["authorizer"]
    user_id = authorizer["user_id"]
    if not user_id:
        raise KeyError("user_id")

    role_raw = authorizer.get("role") or ""
    try:
        role = UserRole(role_raw.upper())
    except ValueError:
        role = UserRole.CUSTOMER
    return Actor(user_id=user_id, role=role, email=authorizer.get("email", ""))


def get_path_parameter(event: dict, name: str) -> Optional[str]:
    return (event.get("pathParameters") or {}).get(name)
