"""
Push notifications through Firebase Cloud Messaging (HTTP v1 API).

Delivery is one-way and best effort. Nothing here feeds back into match
state, and ``PushClient.broadcast`` never raises into its caller.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account
from sqlalchemy.orm import Session

from matchday.core.config import Settings
from matchday.models.push_token import PushToken
from matchday.schemas.push_schemas import PushResult
from matchday.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
SEND_TIMEOUT_SECONDS = 10

# FCM error payloads that mean the device token will never work again
INVALID_TOKEN_MARKERS = ("UNREGISTERED", "INVALID_ARGUMENT", "not a valid FCM")


def _short(token: str) -> str:
    return token[:20] + "..."


# --- Token storage ---

def save_push_token(db: Session, user_id: int, token: str) -> PushToken:
    """
    Register the user's current device token, replacing any previous one.

    A device belongs to whoever registered it last, so the same token held
    by another account is dropped.
    """
    db.query(PushToken)\
        .filter(PushToken.token == token, PushToken.user_id != user_id)\
        .delete(synchronize_session=False)
    db_token = db.query(PushToken).filter(PushToken.user_id == user_id).first()
    if db_token is None:
        db_token = PushToken(user_id=user_id, token=token)
        db.add(db_token)
    else:
        db_token.token = token
        db_token.updated_at = utcnow()
    db.commit()
    db.refresh(db_token)
    return db_token


def delete_push_token(db: Session, user_id: int) -> bool:
    deleted = db.query(PushToken).filter(PushToken.user_id == user_id).delete()
    db.commit()
    return deleted > 0


def get_all_tokens(db: Session) -> List[str]:
    return [token for (token,) in db.query(PushToken.token).all()]


def delete_tokens(db: Session, tokens: List[str]) -> int:
    if not tokens:
        return 0
    deleted = db.query(PushToken).filter(PushToken.token.in_(tokens)).delete(synchronize_session=False)
    db.commit()
    return deleted


# --- Messaging client ---

class PushClient:
    """
    FCM sender. Build one explicitly and hand it to whatever needs it.

    Credentials are loaded and the authorized HTTP session is created on
    the first send, not at construction time.
    """

    def __init__(
        self,
        service_account_file: Optional[str] = None,
        project_id: Optional[str] = None,
        icon_url: str = "/logo-192.png",
        session_factory: Optional[Callable[[], Session]] = None,
    ):
        self.service_account_file = service_account_file
        self.project_id = project_id
        self.icon_url = icon_url
        self.session_factory = session_factory
        self._http = None

    @classmethod
    def from_settings(cls, settings: Settings, session_factory: Optional[Callable[[], Session]] = None) -> "PushClient":
        return cls(
            service_account_file=settings.FIREBASE_SERVICE_ACCOUNT_FILE,
            project_id=settings.FIREBASE_PROJECT_ID,
            icon_url=settings.PUSH_ICON_URL,
            session_factory=session_factory,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.service_account_file)

    def _get_http(self) -> AuthorizedSession:
        if self._http is None:
            credentials = service_account.Credentials.from_service_account_file(
                self.service_account_file, scopes=[FCM_SCOPE]
            )
            if not self.project_id:
                self.project_id = credentials.project_id
            self._http = AuthorizedSession(credentials)
            logger.info(f"FCM client initialised for project {self.project_id}")
        return self._http

    def build_message(self, token: str, title: str, body: str, data: Optional[Dict[str, str]] = None) -> dict:
        return {
            "message": {
                "token": token,
                "notification": {"title": title, "body": body},
                "webpush": {
                    "notification": {"icon": self.icon_url, "badge": self.icon_url},
                },
                # FCM data values must be strings
                "data": {k: str(v) for k, v in (data or {}).items()},
            }
        }

    def send(self, token: str, title: str, body: str, data: Optional[Dict[str, str]] = None) -> Tuple[bool, Optional[str]]:
        """Send to one device. Returns (delivered, error text)."""
        http = self._get_http()
        url = FCM_SEND_URL.format(project_id=self.project_id)
        try:
            response = http.post(url, json=self.build_message(token, title, body, data), timeout=SEND_TIMEOUT_SECONDS)
        except (requests.RequestException, GoogleAuthError) as e:
            logger.error(f"Push send error for {_short(token)}: {e}")
            return False, str(e)
        if response.ok:
            return True, None
        logger.warning(f"Push send failed for {_short(token)}: {response.status_code} {response.text}")
        return False, response.text

    def broadcast(self, db: Session, title: str, body: str, data: Optional[Dict[str, str]] = None) -> PushResult:
        """
        Send one message to every registered device.

        Tokens FCM reports as dead are deleted afterwards.
        """
        if not self.is_configured:
            logger.warning("Push is not configured (FIREBASE_SERVICE_ACCOUNT_FILE unset), skipping broadcast")
            return PushResult()

        tokens = get_all_tokens(db)
        if not tokens:
            logger.info("No push tokens registered")
            return PushResult()

        try:
            self._get_http()
        except (OSError, ValueError, GoogleAuthError) as e:
            logger.error(f"Could not initialise FCM credentials: {e}")
            return PushResult(failed=len(tokens), total=len(tokens))

        sent, failed = 0, 0
        invalid_tokens = []
        for token in tokens:
            ok, error = self.send(token, title, body, data)
            if ok:
                sent += 1
                continue
            failed += 1
            if error and any(marker in error for marker in INVALID_TOKEN_MARKERS):
                invalid_tokens.append(token)

        removed = 0
        if invalid_tokens:
            removed = delete_tokens(db, invalid_tokens)
            logger.info(f"Removed {removed} expired push tokens")

        logger.info(f"Push broadcast done: {sent} sent, {failed} failed of {len(tokens)}")
        return PushResult(sent=sent, failed=failed, total=len(tokens), invalid_tokens_removed=removed)

    def announce(self, title: str, body: str, data: Optional[Dict[str, str]] = None) -> PushResult:
        """
        Broadcast using a session of its own, for use as a background task
        after the request's session has been closed.
        """
        if self.session_factory is None:
            logger.error("PushClient has no session factory, cannot announce")
            return PushResult()
        db = self.session_factory()
        try:
            return self.broadcast(db, title, body, data)
        except Exception as e:
            # Fire and forget: a failed announcement must not surface anywhere
            logger.error(f"Push announcement failed: {e}", exc_info=True)
            return PushResult()
        finally:
            db.close()
