from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from matchday.core.results import UNAVAILABLE_MESSAGE, StoreErrorKind, StoreResult, unwrap
from matchday.models import MatchStatus, Vote, VoteStatus
from matchday.services.store import MatchStore


class TestMatchStore:

    def test_fetch_match_not_found(self, db_session):
        result = MatchStore(db_session).fetch_match(12345)
        assert not result.is_ok
        assert result.error.kind == StoreErrorKind.NOT_FOUND

    def test_fetch_votes_empty_is_ok(self, db_session, make_match):
        match = make_match()
        result = MatchStore(db_session).fetch_votes(match.id)
        assert result.is_ok
        assert result.value == []

    def test_fetch_votes_carries_user_names(self, db_session, make_match, make_user):
        match = make_match()
        alice = make_user(name="Alice")
        db_session.add(Vote(match_id=match.id, user_id=alice.id, status=VoteStatus.LATE.value, note="10 min late"))
        db_session.commit()

        votes = MatchStore(db_session).fetch_votes(match.id).value

        assert len(votes) == 1
        assert votes[0].user_name == "Alice"
        assert votes[0].status == VoteStatus.LATE
        assert votes[0].note == "10 min late"

    def test_unreachable_store_is_an_error_not_empty(self):
        db = MagicMock(spec=Session)
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        result = MatchStore(db).fetch_votes(1)

        assert not result.is_ok
        assert result.value is None
        assert result.error.kind == StoreErrorKind.UNREACHABLE
        db.rollback.assert_called_once()

    def test_upsert_vote_twice_keeps_one_row(self, db_session, make_match, make_user):
        # attending then not_attending from the same member
        match = make_match()
        user = make_user()
        store = MatchStore(db_session)

        first = store.upsert_vote(match.id, user.id, VoteStatus.ATTENDING, None).value
        second = store.upsert_vote(match.id, user.id, VoteStatus.NOT_ATTENDING, "injured").value

        rows = db_session.query(Vote).filter(Vote.match_id == match.id, Vote.user_id == user.id).all()
        assert len(rows) == 1
        assert rows[0].status == VoteStatus.NOT_ATTENDING.value
        assert rows[0].note == "injured"
        assert first.id == second.id

    def test_upsert_vote_overwrites_vote_created_concurrently(self, engine, db_session, make_match, make_user):
        match = make_match()
        user = make_user()
        store = MatchStore(db_session)
        lookup = store._find_vote
        lookups = []

        def racing_lookup(match_id, user_id):
            lookups.append((match_id, user_id))
            if len(lookups) == 1:
                # A double-tapped request commits the first vote right after this lookup
                other = sessionmaker(bind=engine)()
                other.add(Vote(match_id=match_id, user_id=user_id, status=VoteStatus.MAYBE.value))
                other.commit()
                other.close()
                return None
            return lookup(match_id, user_id)

        store._find_vote = racing_lookup

        result = store.upsert_vote(match.id, user.id, VoteStatus.ATTENDING, "on my way")

        assert result.is_ok, result.error
        assert result.value.status == VoteStatus.ATTENDING
        assert result.value.note == "on my way"
        votes = db_session.query(Vote).filter(Vote.match_id == match.id).all()
        assert len(votes) == 1
        assert votes[0].status == VoteStatus.ATTENDING.value

    def test_upsert_vote_rejects_unknown_status(self, db_session, make_match, make_user):
        match = make_match()
        user = make_user()

        result = MatchStore(db_session).upsert_vote(match.id, user.id, "sometimes", None)

        assert result.error.kind == StoreErrorKind.VALIDATION
        assert db_session.query(Vote).count() == 0

    def test_upsert_vote_unknown_match(self, db_session, make_user):
        user = make_user()
        result = MatchStore(db_session).upsert_vote(999, user.id, VoteStatus.ATTENDING, None)
        assert result.error.kind == StoreErrorKind.NOT_FOUND

    def test_update_status_only_applies_to_upcoming(self, db_session, make_match):
        match = make_match(status=MatchStatus.CANCELLED)

        result = MatchStore(db_session).update_match_status(match.id, MatchStatus.COMPLETED)

        assert result.is_ok
        assert result.value.status == MatchStatus.CANCELLED
        db_session.refresh(match)
        assert match.status == MatchStatus.CANCELLED.value

    def test_update_status_unknown_match(self, db_session):
        result = MatchStore(db_session).update_match_status(999, MatchStatus.COMPLETED)
        assert result.error.kind == StoreErrorKind.NOT_FOUND


@pytest.mark.parametrize("kind,code,detail", [
    (StoreErrorKind.NOT_FOUND, 404, "Match 3 not found"),
    (StoreErrorKind.VALIDATION, 422, "CHECK constraint failed: ck_votes_status"),
    (StoreErrorKind.UNREACHABLE, 503, UNAVAILABLE_MESSAGE),
])
def test_unwrap_maps_errors_to_http(kind, code, detail):
    with pytest.raises(HTTPException) as exc_info:
        unwrap(StoreResult.fail(kind, detail if kind != StoreErrorKind.UNREACHABLE else "connection refused"))
    assert exc_info.value.status_code == code
    assert exc_info.value.detail == detail


def test_unwrap_returns_empty_payload():
    assert unwrap(StoreResult.ok([])) == []
