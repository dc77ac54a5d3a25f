from __future__ import annotations

import logging
from typing import Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import create_access_token, get_password_hash, verify_password
from app.models.users import User
from app.utils.time import utc_now

logger = logging.getLogger(__name__)


def _normalise_email(email: str) -> str:
    return email.strip().lower()


def issue_token(user: User) -> str:
    return create_access_token({"sub": user.id, "email": user.email})


def register(db: Session, email: str, username: str, password: str) -> Tuple[User, str]:
    email = _normalise_email(email)
    if db.query(User).filter(User.email == email).first() is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email address already in use")

    user = User(
        email=email,
        username=username.strip(),
        password_hash=get_password_hash(password),
        created_at=utc_now(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user, issue_token(user)


def authenticate(db: Session, email: str, password: str) -> Tuple[User, str]:
    user = db.query(User).filter(User.email == _normalise_email(email)).first()
    if user is None or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    return user, issue_token(user)
