# driver_rewards/dependencies.py

import logging
from typing import Iterator

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from driver_rewards.core import locales
from driver_rewards.core.config import settings
from driver_rewards.core.errors import AuthenticationError
from driver_rewards.db.session import SessionLocal
from driver_rewards.models.user import User

# --- Logger ---
logger = logging.getLogger(__name__)

# --- Auth schemes ---
optional_bearer_scheme = HTTPBearer(auto_error=False)

# --- DB session management ---
def get_db() -> Iterator[Session]:
    """
    Main FastAPI dependency for a DB session: one session per request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# --- Authentication ---

def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Requires a valid bearer token; anything else is a 401 in the usual
    {"error", "reason"} shape.
    """
    if not credentials:
        raise AuthenticationError(locales.ERROR_NOT_AUTHENTICATED)

    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id: str = payload.get("sub")
        if user_id is None:
            logger.warning("Token payload is missing 'sub' (user_id).")
            raise AuthenticationError(locales.ERROR_NOT_AUTHENTICATED)
    except JWTError as e:
        logger.warning(f"JWT Error during token decoding: {e}")
        raise AuthenticationError(locales.ERROR_NOT_AUTHENTICATED)

    user = db.query(User).filter(User.user_id == int(user_id)).first()
    if user is None or not user.is_active:
        logger.warning(f"User with ID {user_id} from token not found or inactive.")
        raise AuthenticationError(locales.ERROR_NOT_AUTHENTICATED)
    return user
