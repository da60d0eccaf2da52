from datetime import datetime

from fastapi import Request
from sqlalchemy.orm import Session

from matchday.core.database import SessionLocal
from matchday.services.push_service import PushClient
from matchday.services.store import MatchStore
from matchday.utils.datetime_utils import utcnow

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_now() -> datetime:
    """Current time for deadline checks; overridden in tests."""
    return utcnow()

def get_push_client(request: Request) -> PushClient:
    # Built once in matchday.main and stored on the app
    return request.app.state.push_client

def get_store(db: Session) -> MatchStore:
    return MatchStore(db)
