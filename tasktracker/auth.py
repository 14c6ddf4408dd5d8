"""Registration, login and bearer-token verification."""

from __future__ import annotations
import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import (
    Conflict,
    InvalidCredentials,
    InvalidToken,
    StoreFailure,
    Unauthenticated,
    ValidationError,
)
from .models import User
from .schemas import LoginOut
from .security import (
    AuthenticatedUserId,
    decode_token,
    encode_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Email and password are required"


def register(db: Session, email: Optional[str], password: Optional[str]) -> User:
    if not email or not password:
        raise ValidationError(MISSING_CREDENTIALS)

    if db.scalar(select(User).where(User.email == email)):
        raise Conflict()

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        db.rollback()
        raise Conflict()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("register failed email=%s", email)
        raise StoreFailure()
    db.refresh(user)
    logger.info("registered user id=%s", user.id)
    return user


def login(db: Session, email: Optional[str], password: Optional[str]) -> LoginOut:
    if not email or not password:
        raise ValidationError(MISSING_CREDENTIALS)

    user = db.scalar(select(User).where(User.email == email))
    # same failure for unknown email and wrong password
    if not user or not verify_password(password, user.password_hash):
        logger.info("login rejected")
        raise InvalidCredentials()

    token = encode_token({"user_id": user.id})
    logger.info("login ok user id=%s", user.id)
    return LoginOut(token=token, email=user.email)


def verify(token: Optional[str]) -> AuthenticatedUserId:
    if not token:
        raise Unauthenticated()
    data = decode_token(token)
    if not data:
        raise InvalidToken()
    user_id = data.get("user_id")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidToken()
    return AuthenticatedUserId(user_id)
