"""
Persistence boundary for the match lifecycle.

``MatchStore`` wraps a SQLAlchemy session and exposes the four operations
the match detail flow needs. Every method returns a ``StoreResult``; store
exceptions never escape. Connection problems come back as ``unreachable``,
constraint violations as ``validation`` with the database's message.
"""

import logging
from typing import Callable, List, Optional, TypeVar

from sqlalchemy import update
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from matchday.core.results import StoreErrorKind, StoreResult, UNAVAILABLE_MESSAGE
from matchday.models.match import Match, MatchStatus
from matchday.models.vote import Vote, VoteStatus
from matchday.schemas.match_schemas import MatchRead
from matchday.schemas.vote_schemas import VoteRead
from matchday.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


def vote_to_read(vote: Vote) -> VoteRead:
    return VoteRead(
        id=vote.id,
        match_id=vote.match_id,
        user_id=vote.user_id,
        user_name=vote.user.name if vote.user else None,
        status=vote.status,
        note=vote.note,
        created_at=vote.created_at,
        updated_at=vote.updated_at,
    )


class _NotFound(Exception):
    pass


class MatchStore:
    def __init__(self, db: Session):
        self.db = db

    def _run(self, operation: str, fn: Callable[[], T]) -> StoreResult[T]:
        try:
            return StoreResult.ok(fn())
        except _NotFound as e:
            self.db.rollback()
            return StoreResult.fail(StoreErrorKind.NOT_FOUND, str(e))
        except ValueError as e:
            self.db.rollback()
            return StoreResult.fail(StoreErrorKind.VALIDATION, str(e))
        except (IntegrityError, DataError) as e:
            self.db.rollback()
            message = str(e.orig) if e.orig is not None else str(e)
            logger.info(f"{operation} rejected by the store: {message}")
            return StoreResult.fail(StoreErrorKind.VALIDATION, message)
        except (OperationalError, InterfaceError) as e:
            self.db.rollback()
            logger.error(f"{operation} failed, store unreachable: {e}")
            return StoreResult.fail(StoreErrorKind.UNREACHABLE, UNAVAILABLE_MESSAGE)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{operation} failed: {e}", exc_info=True)
            return StoreResult.fail(StoreErrorKind.UNREACHABLE, UNAVAILABLE_MESSAGE)

    def _get_match(self, match_id: int) -> Match:
        match = self.db.get(Match, match_id, populate_existing=True)
        if match is None:
            raise _NotFound(f"Match {match_id} not found")
        return match

    def fetch_match(self, match_id: int) -> StoreResult[MatchRead]:
        return self._run(
            "fetch_match", lambda: MatchRead.model_validate(self._get_match(match_id))
        )

    def fetch_votes(self, match_id: int) -> StoreResult[List[VoteRead]]:
        """All votes for a match, each with the voter's display name. No pagination."""
        def _fetch():
            votes = (
                self.db.query(Vote)
                .options(joinedload(Vote.user))
                .filter(Vote.match_id == match_id)
                .order_by(Vote.created_at, Vote.id)
                .all()
            )
            return [vote_to_read(v) for v in votes]

        return self._run("fetch_votes", _fetch)

    def update_match_status(self, match_id: int, status: MatchStatus) -> StoreResult[MatchRead]:
        """
        Move an upcoming match to ``status``.

        The write only applies while the stored status is still ``upcoming``.
        The returned match is what the store holds after the call, so a
        concurrent writer that got there first wins and is reported back.
        """
        def _update():
            result = self.db.execute(
                update(Match)
                .where(Match.id == match_id, Match.status == MatchStatus.UPCOMING.value)
                .values(status=MatchStatus(status).value)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
            if result.rowcount == 0:
                logger.info(f"Match {match_id} was not upcoming, status left unchanged")
            return MatchRead.model_validate(self._get_match(match_id))

        return self._run("update_match_status", _update)

    def _find_vote(self, match_id: int, user_id: int) -> Optional[Vote]:
        return (
            self.db.query(Vote)
            .filter(Vote.match_id == match_id, Vote.user_id == user_id)
            .first()
        )

    def upsert_vote(
        self, match_id: int, user_id: int, status: VoteStatus, note: Optional[str] = None
    ) -> StoreResult[VoteRead]:
        """
        Create the member's vote for the match, or overwrite the existing one. Last write wins.

        If a concurrent request inserts the first vote between the lookup and
        the insert, the insert loses on the unique constraint and that row is
        overwritten instead.
        """
        def _overwrite(vote: Vote, value: str) -> None:
            vote.status = value
            vote.note = note
            vote.updated_at = utcnow()

        def _upsert():
            self._get_match(match_id)
            value = VoteStatus(status).value
            vote = self._find_vote(match_id, user_id)
            if vote is not None:
                _overwrite(vote, value)
                self.db.commit()
            else:
                vote = Vote(match_id=match_id, user_id=user_id, status=value, note=note)
                self.db.add(vote)
                try:
                    self.db.commit()
                except IntegrityError:
                    self.db.rollback()
                    vote = self._find_vote(match_id, user_id)
                    if vote is None:
                        raise
                    logger.info(f"Vote of user {user_id} on match {match_id} was created concurrently, overwriting it")
                    _overwrite(vote, value)
                    self.db.commit()
            self.db.refresh(vote)
            return vote_to_read(vote)

        return self._run("upsert_vote", _upsert)
