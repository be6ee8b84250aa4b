# storefront/utils/security.py
from datetime import datetime, timedelta, timezone

import jwt

from storefront.utils.settings import ACCESS_TOKEN_EXPIRES_SECONDS, JWT_ALGORITHM, JWT_SECRET


def create_access_token(user_id: int, role: str) -> str:
    exp = datetime.now(timezone.utc) + timedelta(seconds=ACCESS_TOKEN_EXPIRES_SECONDS)
    payload = {"sub": str(user_id), "role": role, "exp": exp, "type": "access"}
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
