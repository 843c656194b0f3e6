from fastapi import Request
from passlib.context import CryptContext


def build_password_context(rounds: int) -> CryptContext:
    """Password hashing context using salted bcrypt at the given cost."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds,
    )


def get_password_context(request: Request) -> CryptContext:
    return request.app.state.password_context


def hash_password(pwd_context: CryptContext, password: str) -> str:
    return pwd_context.hash(password)


def verify_password(pwd_context: CryptContext, plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against its hash.

    A missing hash still costs one bcrypt round so unknown usernames take
    as long to reject as wrong passwords.
    """
    if not hashed_password:
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain_password, hashed_password)
