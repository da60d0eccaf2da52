import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from google.oauth2 import id_token
from google.auth.transport import requests as google_requests

from matchday.api.dependencies import get_db
from matchday.core import security
from matchday.core.config import settings
from matchday.models.user import User, UserRole
from matchday.services import user_service

logger = logging.getLogger(__name__)

def verify_google_id_token(token: str, db: Session) -> Optional[User]:
    """
    Verify a Google ID token and return the matching user.

    A user with the same Google ID is returned as-is; a user with the same
    email gets the Google ID linked; otherwise a new member is created.
    """
    try:
        idinfo = id_token.verify_oauth2_token(
            token, google_requests.Request(), settings.GOOGLE_CLIENT_ID
        )
    except ValueError as e:
        # Invalid token
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid Google ID token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    email = idinfo.get("email")
    google_id = idinfo.get("sub") # 'sub' is the standard field for Google ID
    name = idinfo.get("name")

    if not email or not google_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email or Google ID missing from token payload",
        )

    user = db.query(User).filter(User.google_id == google_id).first()
    if user:
        return user

    user = user_service.get_user_by_email(db, email)
    if user:
        # Signed up with a password before, link the Google account
        user.google_id = google_id
        db.commit()
        db.refresh(user)
        return user

    new_user = User(
        name=name or email.split("@")[0],
        email=email.lower(),
        google_id=google_id,
        role=UserRole.MEMBER.value,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"Created user {new_user.id} from Google sign-in")
    return new_user


def get_current_user(token: str = Depends(security.oauth2_scheme), db: Session = Depends(get_db)) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = security.verify_token(token, credentials_exception)

    user = user_service.get_user_by_email(db, token_data.email)
    if user is None:
        raise credentials_exception
    return user


def get_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Signed-in user whose account is not dormant."""
    if current_user.is_dormant:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is dormant, reactivate it first")
    return current_user


def get_admin_user(current_user: User = Depends(get_active_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
    return current_user
