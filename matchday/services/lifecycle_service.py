"""
Match lifecycle: attendance quorum and vote deadline.

An ``upcoming`` match is settled once its vote deadline has passed. If at
least ``min_players`` members voted ``attending`` or ``late`` it becomes
``completed``, otherwise ``cancelled``. Settled matches never change again.

There is no scheduler. The check runs when someone loads the match detail,
so a match nobody opens after its deadline stays ``upcoming``.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from matchday.core.results import unwrap
from matchday.models.match import MatchStatus
from matchday.models.vote import VoteStatus
from matchday.schemas.match_schemas import MatchDetail, MatchRead
from matchday.schemas.vote_schemas import VoteRead
from matchday.services.store import MatchStore
from matchday.utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)

QUORUM_STATUSES = frozenset({VoteStatus.ATTENDING, VoteStatus.LATE})


def counts_toward_quorum(vote: VoteRead) -> bool:
    return VoteStatus(vote.status) in QUORUM_STATUSES


def attending_count(votes: Iterable[VoteRead]) -> int:
    return sum(1 for v in votes if counts_toward_quorum(v))


def quorum_met(votes: Iterable[VoteRead], min_players: int) -> bool:
    return attending_count(votes) >= min_players


def is_voting_closed(match: MatchRead, now: datetime) -> bool:
    """True once the deadline is strictly in the past. No deadline means never closed."""
    if match.vote_deadline is None:
        return False
    return ensure_utc(match.vote_deadline) < ensure_utc(now)


def can_transition(current: MatchStatus, new: MatchStatus) -> bool:
    """Only upcoming matches may change status; terminal statuses are final."""
    current, new = MatchStatus(current), MatchStatus(new)
    if current == new:
        return True
    return current == MatchStatus.UPCOMING


def decide_status(match: MatchRead, votes: List[VoteRead], now: datetime) -> Optional[MatchStatus]:
    """The status the match should move to, or None when it stays as it is."""
    if match.status != MatchStatus.UPCOMING:
        return None
    if not is_voting_closed(match, now):
        return None
    if quorum_met(votes, match.min_players):
        return MatchStatus.COMPLETED
    return MatchStatus.CANCELLED


def apply_lifecycle(store: MatchStore, match: MatchRead, votes: List[VoteRead], now: datetime) -> MatchRead:
    """
    Settle the match if its deadline has passed and persist the new status.

    Returns the match as the caller should present it. After a successful
    write this is the stored record. If the write fails the error is logged
    and the match comes back with its previous status, so the view never
    shows a status the store did not commit.
    """
    new_status = decide_status(match, votes, now)
    if new_status is None:
        return match

    logger.info(
        f"Match {match.id} deadline passed with {attending_count(votes)}/{match.min_players} "
        f"attending, moving to {new_status.value}"
    )
    result = store.update_match_status(match.id, new_status)
    if not result.is_ok:
        logger.error(
            f"Could not persist status {new_status.value} for match {match.id}: "
            f"{result.error.kind.value}: {result.error.message}"
        )
        return match
    return result.value


def count_by_status(votes: Iterable[VoteRead]) -> dict:
    counts = {s.value: 0 for s in VoteStatus}
    for v in votes:
        counts[VoteStatus(v.status).value] += 1
    return counts


def load_match_detail(
    store: MatchStore, match_id: int, now: datetime, user_id: Optional[int] = None
) -> MatchDetail:
    """
    Build the match detail view model.

    Votes are fetched before anything is decided; a failed vote fetch aborts
    the load instead of settling the match on an empty vote list.

    Raises:
        HTTPException: 404 if the match does not exist, 503 if the store is unreachable
    """
    match = unwrap(store.fetch_match(match_id))
    votes = unwrap(store.fetch_votes(match_id))

    match = apply_lifecycle(store, match, votes, now)

    my_vote = None
    if user_id is not None:
        my_vote = next((v for v in votes if v.user_id == user_id), None)

    return MatchDetail(
        match=match,
        votes=votes,
        attending_count=attending_count(votes),
        quorum_met=quorum_met(votes, match.min_players),
        voting_closed=is_voting_closed(match, now),
        vote_counts=count_by_status(votes),
        my_vote=my_vote,
    )
