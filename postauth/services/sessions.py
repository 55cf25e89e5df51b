from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from fastapi import Response
from jose import JWTError, jwt

from postauth.services.errors import InvalidSession
from postauth.utils import clock
from postauth.utils.constants import SESSION_COOKIE_NAME, SESSION_TTL

ALGORITHM = "HS256"
BEARER = "Bearer"


@dataclass(frozen=True)
class SessionClaims:
    account_id: uuid.UUID
    email: str
    verified: bool


def issue_session_token(claims: SessionClaims, secret: str, now: datetime | None = None) -> str:
    issued_at = now or clock.utcnow()
    payload = {
        "accountId": str(claims.account_id),
        "email": claims.email,
        "verified": claims.verified,
        "iat": issued_at,
        "exp": issued_at + SESSION_TTL,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_session_token(token: str, secret: str) -> SessionClaims:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        raise InvalidSession()

    try:
        return SessionClaims(
            account_id=uuid.UUID(payload["accountId"]),
            email=payload["email"],
            verified=bool(payload["verified"]),
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidSession()


def bearer_value(raw: str) -> str:
    # cookie carries "Bearer<jwt>", the header "Bearer <jwt>"
    raw = raw.strip()
    if raw.startswith(BEARER):
        raw = raw[len(BEARER):].strip()
    return raw


def set_session_cookie(resp: Response, token: str, secure: bool = False):
    resp.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=f"{BEARER}{token}",
        httponly=True,
        secure=secure,
        samesite="lax",
        max_age=int(SESSION_TTL.total_seconds()),
        path="/",
    )


def clear_session_cookie(resp: Response):
    resp.delete_cookie(SESSION_COOKIE_NAME, path="/")
