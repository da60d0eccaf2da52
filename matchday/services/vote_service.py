import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status

from matchday.core.results import unwrap
from matchday.models.match import MatchStatus
from matchday.models.vote import VoteStatus
from matchday.schemas.vote_schemas import VoteRead
from matchday.services.lifecycle_service import is_voting_closed
from matchday.services.store import MatchStore

logger = logging.getLogger(__name__)

def cast_vote(
    store: MatchStore,
    match_id: int,
    user_id: int,
    vote_status: VoteStatus,
    note: Optional[str],
    now: datetime,
) -> VoteRead:
    """
    Record a member's attendance vote. A repeat vote replaces the earlier one.

    Raises:
        HTTPException: 404 if the match does not exist, 409 if voting has closed
    """
    match = unwrap(store.fetch_match(match_id))

    if match.status != MatchStatus.UPCOMING:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Match is already {match.status.value}")
    if is_voting_closed(match, now):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Voting is closed for this match")

    if note is not None:
        note = note.strip() or None

    vote = unwrap(store.upsert_vote(match_id, user_id, vote_status, note))
    logger.info(f"User {user_id} voted {vote.status.value} on match {match_id}")
    return vote
