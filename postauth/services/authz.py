from fastapi import Depends, Request

from postauth.config import Settings, get_settings
from postauth.services.errors import NotAuthenticated
from postauth.services.sessions import SessionClaims, bearer_value, decode_session_token
from postauth.utils.constants import SESSION_COOKIE_NAME


def get_current_claims(req: Request, settings: Settings = Depends(get_settings)) -> SessionClaims:
    if req.headers.get("client") == "not-browser":
        raw = req.headers.get("authorization")
    else:
        raw = req.cookies.get(SESSION_COOKIE_NAME)

    if not raw:
        raise NotAuthenticated()

    token = bearer_value(raw)
    if not token:
        raise NotAuthenticated()

    return decode_session_token(token, settings.token_secret)
