from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.auth_service import hash_password, verify_password

DUPLICATE_USER_MESSAGE = "Email or username already exists"
INVALID_LOGIN_MESSAGE = "Invalid username or password"
USER_NOT_FOUND_MESSAGE = "User not found"


def find_conflicting_user(db: Session, email: str, username: str) -> User | None:
    return (
        db.query(User)
        .filter(or_(User.email == email, User.username == username))
        .first()
    )


def create_user(
    db: Session,
    pwd_context: CryptContext,
    *,
    email: str,
    username: str,
    password: str,
    dob: str | None = None,
    gender: str | None = None,
    profile_picture: str | None = None,
) -> User:
    """Persist a new user. Raises IntegrityError if email or username is taken."""
    user = User(
        email=email,
        username=username,
        password_hash=hash_password(pwd_context, password),
        dob=dob,
        gender=gender,
        profile_picture=profile_picture,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, pwd_context: CryptContext, username: str, password: str) -> User | None:
    user = db.query(User).filter(User.username == username).first()
    if not verify_password(pwd_context, password, user.password_hash if user else None):
        return None
    return user


def get_user(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def set_profile_picture(db: Session, user: User, url: str | None) -> User:
    user.profile_picture = url
    db.commit()
    db.refresh(user)
    return user


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_users(db: Session, query: str) -> list[User]:
    """Case-insensitive substring match over usernames."""
    pattern = f"%{_escape_like(query)}%"
    return (
        db.query(User)
        .filter(User.username.ilike(pattern, escape="\\"))
        .order_by(User.username.asc())
        .all()
    )
