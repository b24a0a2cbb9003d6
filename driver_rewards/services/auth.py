# driver_rewards/services/auth.py

import logging
import math
from datetime import datetime, timedelta, timezone

from jose import jwt
from pwdlib import PasswordHash
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.config import settings
from driver_rewards.core.errors import AccountLockedError, AuthenticationError, NotFoundError, ValidationError
from driver_rewards.crud import cart as crud_cart
from driver_rewards.crud import user as crud_user
from driver_rewards.models.user import User
from driver_rewards.schemas.user import LoginResponse, UserPublic

logger = logging.getLogger(__name__)

password_hash = PasswordHash.recommended()


def hash_password(raw_password: str) -> str:
    return password_hash.hash(raw_password)


def verify_password(raw_password: str, hashed_password: str) -> bool:
    return password_hash.verify(raw_password, hashed_password)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Creates a JWT."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def login(db: Session, email: str, password: str) -> LoginResponse:
    """
    Email/password login with lockout: after MAX_LOGIN_ATTEMPTS consecutive
    failures the account is locked for LOCKOUT_DURATION_MINUTES.
    """
    email = (email or "").strip()
    if not email:
        raise ValidationError(locales.ERROR_EMAIL_REQUIRED)

    user = crud_user.get_user_by_email(db, email)
    if not user or not user.is_active:
        raise AuthenticationError(locales.ERROR_INVALID_CREDENTIALS)

    now = datetime.now(timezone.utc)
    if user.lockout_until and _as_utc(user.lockout_until) > now:
        minutes = math.ceil((_as_utc(user.lockout_until) - now).total_seconds() / 60)
        raise AccountLockedError(locales.ERROR_ACCOUNT_LOCKED.format(minutes=minutes))

    if not verify_password(password or "", user.password_hash):
        user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
        if user.failed_login_attempts >= settings.MAX_LOGIN_ATTEMPTS:
            user.lockout_until = now + timedelta(minutes=settings.LOCKOUT_DURATION_MINUTES)
            user.failed_login_attempts = 0
            db.commit()
            logger.warning(f"User {user.user_id} locked out for {settings.LOCKOUT_DURATION_MINUTES} minutes")
            raise AccountLockedError(locales.ERROR_ACCOUNT_LOCKED.format(minutes=settings.LOCKOUT_DURATION_MINUTES))
        db.commit()
        attempts_left = settings.MAX_LOGIN_ATTEMPTS - user.failed_login_attempts
        raise AuthenticationError(locales.ERROR_INVALID_CREDENTIALS_ATTEMPTS.format(attempts_left=attempts_left))

    user.failed_login_attempts = 0
    user.lockout_until = None
    user.last_login = now
    db.commit()
    db.refresh(user)

    access_token = create_access_token(data={"sub": str(user.user_id), "type": user.user_type})
    logger.info(f"User {user.user_id} logged in")
    return LoginResponse(message=locales.SUCCESS_LOGIN, access_token=access_token, user=UserPublic.model_validate(user))


# --- Admin ---

def get_user_by_email(db: Session, email: str) -> User:
    email = (email or "").strip()
    if not email:
        raise ValidationError(locales.ERROR_EMAIL_REQUIRED)
    user = crud_user.get_user_by_email(db, email)
    if not user:
        raise NotFoundError(locales.ERROR_USER_NOT_FOUND)
    return user


def deactivate_user(db: Session, user_id: int) -> None:
    """Soft delete. The ledger and order history stay untouched."""
    user = crud_user.lock_user(db, user_id)
    if not user:
        raise NotFoundError(locales.ERROR_USER_NOT_FOUND)
    user.is_active = False
    if user.is_driver:
        user.driver_status = "unaffiliated"
        cart = crud_cart.get_driver_cart(db, user_id)
        if cart:
            crud_cart.delete_cart(db, cart)
    db.commit()
    logger.info(f"User {user_id} deactivated")
