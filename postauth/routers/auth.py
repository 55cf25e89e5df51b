from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from postauth.config import Settings, get_settings
from postauth.database import get_db
from postauth.schemas.auth import (
    AccountOut,
    ChangePasswordIn,
    CredentialsIn,
    EmailIn,
    ResetPasswordIn,
    VerifyCodeIn,
)
from postauth.services import auth_service
from postauth.services.authz import get_current_claims
from postauth.services.mailer import Mailer, get_mailer
from postauth.services.sessions import SessionClaims, clear_session_cookie, set_session_cookie

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", status_code=201)
async def signup(payload: CredentialsIn, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    account = await auth_service.signup(db, settings, email=payload.email, password=payload.password)
    return {
        "success": True,
        "message": "Your account has been created successfully",
        "result": AccountOut.model_validate(account),
    }


@router.post("/signin")
async def signin(
    payload: CredentialsIn,
    resp: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    token = await auth_service.signin(db, settings, email=payload.email, password=payload.password)
    set_session_cookie(resp, token, secure=settings.is_production)
    return {"success": True, "message": "You have been logged in successfully", "token": token}


@router.post("/signout", dependencies=[Depends(get_current_claims)])
def signout(resp: Response):
    # tokens are stateless, dropping the cookie is all there is
    clear_session_cookie(resp)
    return {"success": True, "message": "You have been logged out successfully"}


@router.patch("/send-verification-code")
async def send_verification_code(
    payload: EmailIn,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    await auth_service.send_verification_code(db, settings, mailer, email=payload.email)
    return {"success": True, "message": "Code sent!"}


@router.patch("/verify-verification-code")
def verify_verification_code(
    payload: VerifyCodeIn,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    auth_service.verify_verification_code(db, settings, email=payload.email, provided_code=payload.provided_code)
    return {"success": True, "message": "User verified successfully!"}


@router.patch("/change-password")
async def change_password(
    payload: ChangePasswordIn,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    await auth_service.change_password(
        db,
        settings,
        claims=claims,
        old_password=payload.old_password,
        new_password=payload.new_password,
    )
    return {"success": True, "message": "Password changed successfully!"}


@router.patch("/send-forgot-password-code")
async def send_forgot_password_code(
    payload: EmailIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    await auth_service.send_forgot_password_code(db, settings, mailer, email=payload.email)
    return {"success": True, "message": "Code sent!"}


@router.patch("/verify-forgot-password-code")
async def verify_forgot_password_code(
    payload: ResetPasswordIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    await auth_service.verify_forgot_password_code(
        db,
        settings,
        email=payload.email,
        provided_code=payload.provided_code,
        new_password=payload.new_password,
    )
    return {"success": True, "message": "Password reset successfully!"}
