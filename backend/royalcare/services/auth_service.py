# Overview: Credential store and login; bcrypt password hashing and user creation.

"""
Authentication Service

The users table is the credential store: verify_credentials() is the single
check the rest of the system relies on. Passwords are only ever stored as
bcrypt hashes.

Login returns an Identity. The service issues no session or token; clients
send their role/department/user id as claims on later requests (see
claims_service).
"""

from __future__ import annotations

from dataclasses import dataclass

import bcrypt
from flask import current_app

from ..errors import Unauthenticated, ValidationError
from ..extensions import db
from ..models import User, ROLES, ROLE_USER
from ..time_utils import utcnow


@dataclass(frozen=True)
class Identity:
    id: int
    username: str
    role: str
    department: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(id=user.id, username=user.username, role=user.role, department=user.department)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "department": self.department,
        }


def hash_password(password: str) -> str:
    """Hash password using bcrypt with cost factor 12."""
    if not password:
        raise ValidationError("Password is required")
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() is timing-safe. A malformed stored hash never verifies.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def verify_credentials(username: str, password: str) -> User | None:
    """Return the active user matching username/password, else None."""
    user = db.session.query(User).filter_by(username=username).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def authenticate(username, password) -> Identity:
    """
    Verify credentials and return the caller's Identity.

    Raises Unauthenticated for wrong credentials and for malformed input
    (missing or non-string username/password).
    """
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise Unauthenticated("Wrong credentials")

    user = verify_credentials(username, password)
    if not user:
        current_app.logger.warning("Failed login for username=%r", username)
        raise Unauthenticated("Wrong credentials")

    user.last_login_at = utcnow()
    db.session.commit()
    return Identity.from_user(user)


def create_user(
    username: str,
    password: str,
    role: str = ROLE_USER,
    department: str | None = None,
) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Raises ValidationError for a missing username, unknown role or a
    username that is already taken.
    """
    if not username:
        raise ValidationError("Username is required")
    role = (role or ROLE_USER).lower()
    if role not in ROLES:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(ROLES)}")

    if db.session.query(User).filter_by(username=username).first():
        raise ValidationError(f"Username {username!r} already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        department=department or None,
    )
    db.session.add(user)
    db.session.commit()
    return user
