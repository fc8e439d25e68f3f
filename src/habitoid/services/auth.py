"""Account registration and credential checks."""

from __future__ import annotations

from typing import Callable, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import Session, select

from ..models.user import User

SessionFactory = Callable[[], Session]

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def create_user(
    *,
    username: str,
    password: str,
    email: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    session_factory: SessionFactory,
) -> User:
    """Create a new user with a hashed password."""

    username = username.strip()
    if not username:
        raise ValueError("Username is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    email = (email or "").strip() or None

    password_hash = _hasher.hash(password)
    with session_factory() as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            raise ValueError("Username already exists")
        if email and session.exec(select(User).where(User.email == email)).first():
            raise ValueError("Email already registered")
        user = User(
            username=username,
            password_hash=password_hash,
            email=email,
            first_name=first_name,
            last_name=last_name,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def authenticate(
    *,
    username: str,
    password: str,
    session_factory: SessionFactory,
) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    username = username.strip()
    if not username:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            return None
        if not verify_password(user.password_hash, password):
            return None

        if _hasher.check_needs_rehash(user.password_hash):
            user.password_hash = _hasher.hash(password)
            session.add(user)
            session.commit()
            session.refresh(user)
        session.expunge(user)
        return user


def change_password(
    *, user_id: int, current: str, new: str, session_factory: SessionFactory
) -> User:
    if len(new or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError("User not found")
        if not verify_password(user.password_hash, current):
            raise ValueError("Current password is incorrect")
        user.password_hash = _hasher.hash(new)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


__all__ = [
    "authenticate",
    "change_password",
    "create_user",
    "hash_password",
    "verify_password",
]
