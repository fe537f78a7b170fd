import os
import logging
from typing import Optional

import jwt
from jwt.exceptions import PyJWTError as JWTError

SECRET_KEY = os.getenv("JWT_SECRET_KEY", "fallback-secret-key")
ALGORITHM = "HS256"

logger = logging.getLogger(__name__)


def decode_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        logger.debug(f"Token successfully decoded for sub={payload.get('sub', '[no sub]')}")
        return payload
    except JWTError as e:
        logger.warning(f"Failed to decode JWT: {e}")
        return None
