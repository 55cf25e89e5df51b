"""Account storage with two read shapes.

`AccountView` is what default reads return and what may leave the
process. Privileged reads hand back the `User` row itself (credential and
pending-code columns included) for the flows that need them.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from postauth.models.user import User
from postauth.services.errors import AlreadyExists, ConcurrentUpdate
from postauth.utils import clock


@dataclass(frozen=True)
class AccountView:
    id: uuid.UUID
    email: str
    verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "AccountView":
        return cls(
            id=user.id,
            email=user.email,
            verified=user.is_email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


def normalize_email(email: str) -> str:
    return email.lower().strip()


def find_by_email(db: Session, email: str) -> AccountView | None:
    user = get_privileged_by_email(db, email)
    return AccountView.from_user(user) if user else None


def get_privileged_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == normalize_email(email))).scalars().first()


def get_privileged(db: Session, account_id: uuid.UUID) -> User | None:
    return db.get(User, account_id)


def create_account(db: Session, email: str, password_hash: str) -> AccountView:
    now = clock.utcnow()
    user = User(
        email=normalize_email(email),
        password_hash=password_hash,
        is_email_verified=False,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a signup for the same address
        db.rollback()
        raise AlreadyExists()
    db.refresh(user)
    return AccountView.from_user(user)


def save(db: Session, user: User) -> None:
    """Commit pending changes to `user`; a concurrent writer wins and we raise."""
    user.updated_at = clock.utcnow()
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        raise ConcurrentUpdate()
