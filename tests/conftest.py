import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from postauth.config import Settings
from postauth.main import create_app
from postauth.models.user import User
from postauth.services.mailer import Delivery

PASSWORD = "Abcdef12"


class FakeMailer:
    """Records outgoing mail instead of calling Resend."""

    def __init__(self):
        self.sent = []
        self.deliver = True

    async def send_mail(self, to: str, subject: str, text: str) -> Delivery:
        self.sent.append({"to": to, "subject": subject, "text": text})
        if not self.deliver:
            return Delivery(delivered=False)
        return Delivery(delivered=True, message_id=f"msg-{len(self.sent)}")

    def last_code(self) -> str:
        assert self.sent, "no mail was sent"
        return re.search(r"(\d+)$", self.sent[-1]["text"]).group(1)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        token_secret="test-token-secret",
        code_secret="test-code-secret",
        resend_api_key="re_test",
        mail_from="Postauth <no-reply@example.com>",
        password_hash_rounds=4,
        auto_create_tables=True,
    )


@pytest.fixture()
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture()
def app(settings, mailer):
    return create_app(settings, mailer=mailer)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def load_user(app):
    def _load(email: str) -> User:
        db = app.state.session_factory()
        try:
            return db.execute(select(User).where(User.email == email)).scalars().one()
        finally:
            db.close()

    return _load


def bearer(token: str) -> dict:
    return {"client": "not-browser", "authorization": f"Bearer {token}"}


@pytest.fixture()
def signup(client):
    def _signup(email: str = "a@b.com", password: str = PASSWORD):
        return client.post("/api/auth/signup", json={"email": email, "password": password})

    return _signup


@pytest.fixture()
def signin(client):
    def _signin(email: str = "a@b.com", password: str = PASSWORD) -> str:
        res = client.post("/api/auth/signin", json={"email": email, "password": password})
        assert res.status_code == 200, res.text
        return res.json()["token"]

    return _signin


@pytest.fixture()
def verified_token(client, mailer, signup, signin):
    """Sign up a@b.com, run the email verification flow, return a fresh token."""

    def _verified(email: str = "a@b.com") -> str:
        signup(email)
        token = signin(email)
        res = client.patch("/api/auth/send-verification-code", json={"email": email}, headers=bearer(token))
        assert res.status_code == 200, res.text
        res = client.patch(
            "/api/auth/verify-verification-code",
            json={"email": email, "providedCode": mailer.last_code()},
            headers=bearer(token),
        )
        assert res.status_code == 200, res.text
        return signin(email)

    return _verified
