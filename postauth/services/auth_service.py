from __future__ import annotations

import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from postauth.config import Settings
from postauth.models.user import User
from postauth.services import accounts
from postauth.services.accounts import AccountView
from postauth.services.codes import CodeKind, issue_code, verify_code
from postauth.services.errors import (
    AccountNotFound,
    AlreadyExists,
    AlreadyVerified,
    DeliveryFailed,
    InvalidCredentials,
    NotVerified,
)
from postauth.services.mailer import Mailer
from postauth.services.passwords import hash_password, verify_password
from postauth.services.sessions import SessionClaims, issue_session_token

logger = logging.getLogger(__name__)

MAIL_TEMPLATES = {
    CodeKind.VERIFICATION: ("Verification Code", "Your verification code is {code}"),
    CodeKind.RESET: ("Forgot Password Code", "Your forgot password code is {code}"),
}


def _require_account(db: Session, email: str) -> User:
    user = accounts.get_privileged_by_email(db, email)
    if not user:
        raise AccountNotFound()
    return user


async def signup(db: Session, settings: Settings, *, email: str, password: str) -> AccountView:
    if accounts.find_by_email(db, email):
        raise AlreadyExists()

    password_hash = await run_in_threadpool(hash_password, password, settings.password_hash_rounds)
    account = accounts.create_account(db, email, password_hash)
    logger.info("account %s created", account.id)
    return account


async def signin(db: Session, settings: Settings, *, email: str, password: str) -> str:
    user = _require_account(db, email)

    if not await run_in_threadpool(verify_password, password, user.password_hash):
        logger.info("signin rejected for account %s: bad password", user.id)
        raise InvalidCredentials()

    claims = SessionClaims(account_id=user.id, email=user.email, verified=user.is_email_verified)
    return issue_session_token(claims, settings.token_secret)


async def _send_code(db: Session, settings: Settings, mailer: Mailer, user: User, kind: CodeKind) -> None:
    code = issue_code(user, kind, settings.code_secret)

    subject, body = MAIL_TEMPLATES[kind]
    delivery = await mailer.send_mail(user.email, subject, body.format(code=code))
    if not delivery.delivered:
        # drop the in-memory code, nothing was written yet
        db.rollback()
        raise DeliveryFailed()

    accounts.save(db, user)
    logger.info("%s code issued for account %s", kind.value, user.id)


async def send_verification_code(db: Session, settings: Settings, mailer: Mailer, *, email: str) -> None:
    user = _require_account(db, email)
    if user.is_email_verified:
        raise AlreadyVerified()
    await _send_code(db, settings, mailer, user, CodeKind.VERIFICATION)


async def send_forgot_password_code(db: Session, settings: Settings, mailer: Mailer, *, email: str) -> None:
    user = _require_account(db, email)
    await _send_code(db, settings, mailer, user, CodeKind.RESET)


def verify_verification_code(db: Session, settings: Settings, *, email: str, provided_code: str) -> None:
    user = _require_account(db, email)
    if user.is_email_verified:
        raise AlreadyVerified()

    verify_code(user, CodeKind.VERIFICATION, provided_code, settings.code_secret)
    user.is_email_verified = True
    accounts.save(db, user)
    logger.info("account %s verified", user.id)


async def change_password(
    db: Session,
    settings: Settings,
    *,
    claims: SessionClaims,
    old_password: str,
    new_password: str,
) -> None:
    if not claims.verified:
        raise NotVerified()

    user = accounts.get_privileged(db, claims.account_id)
    if not user:
        raise AccountNotFound()

    if not await run_in_threadpool(verify_password, old_password, user.password_hash):
        raise InvalidCredentials()

    user.password_hash = await run_in_threadpool(hash_password, new_password, settings.password_hash_rounds)
    accounts.save(db, user)
    logger.info("password changed for account %s", user.id)


async def verify_forgot_password_code(
    db: Session,
    settings: Settings,
    *,
    email: str,
    provided_code: str,
    new_password: str,
) -> None:
    user = _require_account(db, email)

    verify_code(user, CodeKind.RESET, provided_code, settings.code_secret)
    # code clear and new hash go out in the same commit
    user.password_hash = await run_in_threadpool(hash_password, new_password, settings.password_hash_rounds)
    accounts.save(db, user)
    logger.info("password reset for account %s", user.id)
