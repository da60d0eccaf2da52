from datetime import date, datetime, timedelta
from unittest.mock import MagicMock

import pytest
import pytz
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from matchday.api.dependencies import get_db, get_now, get_push_client
from matchday.core import security
from matchday.core.database import init_database
from matchday.main import app
from matchday.models import Match, MatchStatus, User, UserRole, Vote, VoteStatus
from matchday.services.push_service import PushClient

# Fixed "now" shared by route tests through the get_now override
FIXED_NOW = datetime(2026, 5, 1, 12, 0, 0, tzinfo=pytz.UTC)


@pytest.fixture
def engine():
    # In-memory SQLite shared across threads for the TestClient
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(name=None, role=UserRole.MEMBER, email=None, password=None):
        counter["n"] += 1
        user = User(
            name=name or f"Player {counter['n']}",
            email=email or f"player{counter['n']}@example.com",
            role=UserRole(role).value,
            hashed_password=security.get_password_hash(password) if password else None,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_match(db_session):
    def _make_match(
        min_players=10,
        vote_deadline=FIXED_NOW + timedelta(days=1),
        status=MatchStatus.UPCOMING,
        title="Sunday league",
        match_date=date(2026, 5, 3),
        created_by=None,
    ):
        match = Match(
            title=title,
            description="Friendly match",
            match_date=match_date,
            match_start_time=9,
            match_end_time=11,
            vote_deadline=vote_deadline,
            location="Riverside pitch",
            min_players=min_players,
            status=MatchStatus(status).value,
            created_by=created_by,
        )
        db_session.add(match)
        db_session.commit()
        db_session.refresh(match)
        return match

    return _make_match


@pytest.fixture
def add_votes(db_session, make_user):
    """Create one new member per status and record their vote on the match."""
    def _add_votes(match, statuses):
        votes = []
        for vote_status in statuses:
            user = make_user()
            vote = Vote(match_id=match.id, user_id=user.id, status=VoteStatus(vote_status).value)
            db_session.add(vote)
            votes.append(vote)
        db_session.commit()
        return votes

    return _add_votes


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = security.create_access_token(data={"sub": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def push_client():
    return MagicMock(spec=PushClient)


@pytest.fixture
def client(db_session, push_client):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    app.dependency_overrides[get_push_client] = lambda: push_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def now():
    return FIXED_NOW
