from __future__ import annotations
from fastapi import Request
from typing import Generator
from sqlalchemy.orm import Session

from .auth import verify
from .db import SessionLocal
from .security import AuthenticatedUserId


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    token = header.replace("Bearer ", "", 1).strip()
    return token or None


async def get_current_user(request: Request) -> AuthenticatedUserId:
    # raises Unauthenticated / InvalidToken, turned into responses by main
    return verify(bearer_token(request))
