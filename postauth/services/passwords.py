from passlib.context import CryptContext

DEFAULT_ROUNDS = 12

pwd = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    return pwd.handler("bcrypt").using(rounds=rounds).hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd.verify(password, password_hash)
