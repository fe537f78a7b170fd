# services/ownership.py
import enum
from typing import Any, Optional


class Decision(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


def as_user_id(value: Any) -> Optional[int]:
    """Coerce a user id from a payload or token claim; None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def authorize(resource_owner_id: Any, caller_id: Any) -> Decision:
    """
    Flat single-level rule: ALLOW iff the recorded owner is the caller.
    No roles, no admin override, no ownership inherited from a parent row.
    """
    owner = as_user_id(resource_owner_id)
    caller = as_user_id(caller_id)
    if owner is None or caller is None:
        return Decision.DENY
    return Decision.ALLOW if owner == caller else Decision.DENY
