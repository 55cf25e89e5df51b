"""One-time numeric codes for email verification and password reset.

Only an HMAC of the code and its issue time live on the account row. The
plaintext is returned once by `issue_code` so it can be mailed out.
"""
from __future__ import annotations

import enum
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime

from postauth.models.user import User
from postauth.services.errors import CodeExpired, CodeMismatch, NoPendingCode
from postauth.utils import clock
from postauth.utils.constants import CODE_TTL, CODE_UPPER_BOUND


class CodeKind(str, enum.Enum):
    VERIFICATION = "verification"
    RESET = "reset"


# (hash column, issued-at column) per kind
_FIELDS = {
    CodeKind.VERIFICATION: ("verification_code_hash", "verification_code_issued_at"),
    CodeKind.RESET: ("reset_code_hash", "reset_code_issued_at"),
}


@dataclass(frozen=True)
class PendingCode:
    code_hash: str
    issued_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now - clock.as_utc(self.issued_at) > CODE_TTL


def generate_code() -> str:
    # not zero padded: 42 is sent as "42"
    return str(secrets.randbelow(CODE_UPPER_BOUND))


def keyed_hash(code: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), code.encode("utf-8"), hashlib.sha256).hexdigest()


def pending_code(user: User, kind: CodeKind) -> PendingCode | None:
    hash_attr, issued_attr = _FIELDS[kind]
    code_hash = getattr(user, hash_attr)
    issued_at = getattr(user, issued_attr)
    if code_hash is None or issued_at is None:
        return None
    return PendingCode(code_hash=code_hash, issued_at=issued_at)


def clear_code(user: User, kind: CodeKind) -> None:
    hash_attr, issued_attr = _FIELDS[kind]
    setattr(user, hash_attr, None)
    setattr(user, issued_attr, None)


def issue_code(user: User, kind: CodeKind, secret: str, now: datetime | None = None) -> str:
    """Store a fresh code of `kind` on `user`, replacing any pending one.

    Nothing is committed here; the caller decides whether the mutation
    survives (e.g. only once the mail went out).
    """
    code = generate_code()
    hash_attr, issued_attr = _FIELDS[kind]
    setattr(user, hash_attr, keyed_hash(code, secret))
    setattr(user, issued_attr, now or clock.utcnow())
    return code


def verify_code(
    user: User,
    kind: CodeKind,
    provided: str,
    secret: str,
    now: datetime | None = None,
) -> None:
    """Check `provided` against the pending code and clear it on success.

    Raises NoPendingCode, CodeExpired or CodeMismatch, checked in that order.
    """
    pending = pending_code(user, kind)
    if pending is None:
        raise NoPendingCode()

    if pending.is_expired(now or clock.utcnow()):
        raise CodeExpired()

    if not hmac.compare_digest(keyed_hash(str(provided), secret), pending.code_hash):
        raise CodeMismatch()

    clear_code(user, kind)
