"""Authentication service for JWT, password handling and user lookup."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from memoir.config import get_settings
from memoir.constants import MIN_PASSWORD_LENGTH
from memoir.models.user import User

logger = logging.getLogger(__name__)


class EmailAlreadyExistsError(Exception):
    """Raised when the email is already registered."""


settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against its hash.

    Accounts created through Google have no hash and never match.
    """
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    if not password:
        raise ValueError("Password cannot be empty")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str) -> str:
    """Create a JWT access token."""
    if user_id is None or not email:
        raise ValueError("Token payload requires a user id and email")
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def touch_last_active(user: User) -> None:
    user.last_active_at = datetime.now(UTC)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email.lower()).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, email: str, password: str, nickname: str) -> User:
    """Create a new password-based user."""
    hashed_password = get_password_hash(password)
    user = User(email=email.lower(), password_hash=hashed_password, nickname=nickname.strip())
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailAlreadyExistsError(email.lower()) from e
    db.refresh(user)
    logger.info(f"Created user {user.id}")
    return user


def upsert_social_user(db: Session, email: str, name: str | None) -> User:
    """Find or create a Google-authenticated user keyed by email.

    New users get no password hash. Existing users, including password-based
    ones with the same email, are reused and marked active.
    """
    email = email.lower()
    user = get_user_by_email(db, email)
    if user is None:
        nickname = (name or "").strip() or email.split("@")[0]
        user = User(email=email, nickname=nickname[:100], password_hash=None)
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Another callback created the same email first
            db.rollback()
            user = get_user_by_email(db, email)
            if user is None:
                raise
        else:
            db.refresh(user)
            logger.info(f"Created Google user {user.id}")
            return user

    touch_last_active(user)
    db.commit()
    db.refresh(user)
    return user
