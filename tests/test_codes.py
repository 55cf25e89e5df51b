import hashlib
import hmac
from datetime import datetime, timedelta, timezone

import pytest

from postauth.models.user import User
from postauth.services import codes
from postauth.services.codes import CodeKind, issue_code, keyed_hash, pending_code, verify_code
from postauth.services.errors import CodeExpired, CodeMismatch, NoPendingCode

SECRET = "code-secret"
T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _user() -> User:
    return User(email="a@b.com", password_hash="x")


def test_generate_code_is_not_zero_padded(monkeypatch):
    monkeypatch.setattr(codes.secrets, "randbelow", lambda n: 42)
    assert codes.generate_code() == "42"


def test_generate_code_stays_in_range():
    for _ in range(200):
        value = int(codes.generate_code())
        assert 0 <= value <= 999_999


def test_keyed_hash_is_hmac_sha256():
    expected = hmac.new(b"code-secret", b"123456", hashlib.sha256).hexdigest()
    assert keyed_hash("123456", SECRET) == expected
    assert keyed_hash("123456", "other-secret") != expected


def test_issue_stores_hash_and_time_only():
    user = _user()
    code = issue_code(user, CodeKind.VERIFICATION, SECRET, now=T0)

    assert user.verification_code_hash == keyed_hash(code, SECRET)
    assert user.verification_code_hash != code
    assert user.verification_code_issued_at == T0
    assert pending_code(user, CodeKind.RESET) is None


def test_pending_code_needs_both_fields():
    user = _user()
    user.reset_code_hash = "abc"
    assert pending_code(user, CodeKind.RESET) is None


def test_verify_clears_both_fields():
    user = _user()
    code = issue_code(user, CodeKind.RESET, SECRET, now=T0)

    verify_code(user, CodeKind.RESET, code, SECRET, now=T0 + timedelta(minutes=1))

    assert user.reset_code_hash is None
    assert user.reset_code_issued_at is None


def test_second_verification_has_no_pending_code():
    user = _user()
    code = issue_code(user, CodeKind.VERIFICATION, SECRET, now=T0)
    verify_code(user, CodeKind.VERIFICATION, code, SECRET, now=T0)

    with pytest.raises(NoPendingCode):
        verify_code(user, CodeKind.VERIFICATION, code, SECRET, now=T0)


def test_never_issued():
    with pytest.raises(NoPendingCode):
        verify_code(_user(), CodeKind.RESET, "1", SECRET, now=T0)


def test_code_valid_for_exactly_five_minutes():
    user = _user()
    code = issue_code(user, CodeKind.VERIFICATION, SECRET, now=T0)
    verify_code(user, CodeKind.VERIFICATION, code, SECRET, now=T0 + timedelta(seconds=300))
    assert pending_code(user, CodeKind.VERIFICATION) is None


def test_correct_code_expires_after_five_minutes():
    user = _user()
    code = issue_code(user, CodeKind.RESET, SECRET, now=T0)

    with pytest.raises(CodeExpired):
        verify_code(user, CodeKind.RESET, code, SECRET, now=T0 + timedelta(seconds=301))

    # still pending, nothing cleared on failure
    assert pending_code(user, CodeKind.RESET) is not None


def test_mismatch_keeps_code_pending():
    user = _user()
    code = issue_code(user, CodeKind.VERIFICATION, SECRET, now=T0)
    wrong = str((int(code) + 1) % 1_000_000)

    with pytest.raises(CodeMismatch):
        verify_code(user, CodeKind.VERIFICATION, wrong, SECRET, now=T0)
    assert pending_code(user, CodeKind.VERIFICATION) is not None


def test_new_code_replaces_previous(monkeypatch):
    user = _user()
    values = iter([111111, 222222])
    monkeypatch.setattr(codes.secrets, "randbelow", lambda n: next(values))

    first = issue_code(user, CodeKind.RESET, SECRET, now=T0)
    second = issue_code(user, CodeKind.RESET, SECRET, now=T0)

    with pytest.raises(CodeMismatch):
        verify_code(user, CodeKind.RESET, first, SECRET, now=T0)
    verify_code(user, CodeKind.RESET, second, SECRET, now=T0)


def test_naive_issue_time_is_read_as_utc():
    user = _user()
    code = issue_code(user, CodeKind.RESET, SECRET, now=T0)
    user.reset_code_issued_at = T0.replace(tzinfo=None)

    with pytest.raises(CodeExpired):
        verify_code(user, CodeKind.RESET, code, SECRET, now=T0 + timedelta(minutes=6))
