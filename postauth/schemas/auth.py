from __future__ import annotations

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from postauth.utils.constants import ALLOWED_EMAIL_TLDS

PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")


def check_password(value: str) -> str:
    if not PASSWORD_RE.match(value):
        raise ValueError("password must be at least 8 characters with a lower case letter, an upper case letter and a digit")
    return value


class EmailIn(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        email = v.lower().strip()
        if not 6 <= len(email) <= 60:
            raise ValueError("email must be between 6 and 60 characters")
        if email.rsplit(".", 1)[-1] not in ALLOWED_EMAIL_TLDS:
            raise ValueError(f"email domain must end with one of: {', '.join(sorted(ALLOWED_EMAIL_TLDS))}")
        return email


class CredentialsIn(EmailIn):
    password: str

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password(v)


class VerifyCodeIn(EmailIn):
    provided_code: str = Field(alias="providedCode")

    class Config:
        populate_by_name = True

    @field_validator("provided_code", mode="before")
    @classmethod
    def numeric_code(cls, v):
        # codes are numbers on the wire; "042" and 42 both mean "42"
        if isinstance(v, bool):
            raise ValueError("providedCode must be a number")
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str) and v.strip().isdigit():
            return str(int(v.strip()))
        raise ValueError("providedCode must be a number")


class ChangePasswordIn(BaseModel):
    old_password: str = Field(alias="oldPassword")
    new_password: str = Field(alias="newPassword")

    class Config:
        populate_by_name = True

    @field_validator("old_password", "new_password")
    @classmethod
    def strong_passwords(cls, v: str) -> str:
        return check_password(v)


class ResetPasswordIn(VerifyCodeIn):
    new_password: str = Field(alias="newPassword")

    @field_validator("new_password")
    @classmethod
    def strong_new_password(cls, v: str) -> str:
        return check_password(v)


class AccountOut(BaseModel):
    id: uuid.UUID
    email: str
    verified: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
