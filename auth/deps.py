from typing import Optional

from auth.token import decode_token
from services.ownership import as_user_id


def caller_id_from_token(token: str) -> Optional[int]:
    payload = decode_token(token)
    if not payload:
        return None
    return as_user_id(payload.get("sub"))


def caller_id_from_request(req) -> Optional[int]:
    auth = req.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return caller_id_from_token(auth[7:])
