"""Bearer tokens for EcoLog users.

A token only carries the user id (`sub`). Guests and signed-in users get the
same kind of token; the user record itself lives in storage.
"""

import os
import jwt
from datetime import datetime, timedelta
from typing import Optional, Dict
from dotenv import load_dotenv

load_dotenv()

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))


def create_access_token(user_id: str, expires_in: Optional[timedelta] = None) -> str:
    """Sign a token for an EcoLog user id (e.g. `guest:<uuid>`).

    The token expires after JWT_EXPIRATION_HOURS unless `expires_in` is given.
    """
    now = datetime.utcnow()
    payload = {
        "sub": user_id,
        "exp": now + (expires_in or timedelta(hours=JWT_EXPIRATION_HOURS)),
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict]:
    """Verified claims of a bearer token, or None when it is expired or forged."""
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def get_user_id_from_token(token: str) -> Optional[str]:
    payload = decode_access_token(token)
    if payload:
        return payload.get("sub")
    return None
