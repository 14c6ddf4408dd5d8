from __future__ import annotations
from typing import Any, NewType, Optional
from itsdangerous import URLSafeTimedSerializer, BadData
from passlib.hash import argon2

from .config import TOKEN_SECRET, TOKEN_MAX_AGE

# Only produced by token verification; every owner-scoped task operation takes one.
AuthenticatedUserId = NewType("AuthenticatedUserId", str)

serializer = URLSafeTimedSerializer(TOKEN_SECRET, salt="access-token")


def hash_password(raw: str) -> str:
    return argon2.hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    try:
        return argon2.verify(raw, hashed)
    except (ValueError, TypeError):
        return False


def encode_token(payload: dict[str, Any]) -> str:
    return serializer.dumps(payload)


def decode_token(token: str, max_age: int = TOKEN_MAX_AGE) -> Optional[dict[str, Any]]:
    # BadData covers bad signatures, expiry and undecodable payloads
    try:
        data = serializer.loads(token, max_age=max_age)
    except BadData:
        return None
    return data if isinstance(data, dict) else None
