from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from matchday.core.results import StoreError, StoreErrorKind, store_error_to_http
from matchday.models.match import Match, MatchStatus
from matchday.models.user import User
from matchday.models.vote import Vote
from matchday.schemas import match_schemas
from matchday.services import notification_service
from matchday.services.lifecycle_service import QUORUM_STATUSES, can_transition

def get_match(db: Session, match_id: int) -> Optional[Match]:
    return db.query(Match).filter(Match.id == match_id).first()

def get_match_or_404(db: Session, match_id: int) -> Match:
    db_match = get_match(db, match_id)
    if not db_match:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    return db_match

def list_matches(db: Session, match_status: Optional[MatchStatus] = None) -> List[Match]:
    query = db.query(Match)
    if match_status is not None:
        query = query.filter(Match.status == MatchStatus(match_status).value)
    return query.order_by(Match.match_date.asc(), Match.match_start_time.asc(), Match.id.asc()).all()

def get_attending_counts(db: Session) -> dict:
    """Attending (or late) headcount per match id, for every match that has any."""
    rows = db.query(Vote.match_id, func.count(Vote.id))\
        .filter(Vote.status.in_([s.value for s in QUORUM_STATUSES]))\
        .group_by(Vote.match_id)\
        .all()
    return {match_id: count for match_id, count in rows}

def get_matches_summary(db: Session, match_status: Optional[MatchStatus] = None) -> List[match_schemas.MatchSummary]:
    counts = get_attending_counts(db)
    return [
        match_schemas.MatchSummary(
            match=match_schemas.MatchRead.model_validate(m),
            attending_count=counts.get(m.id, 0),
        )
        for m in list_matches(db, match_status)
    ]

def create_match(db: Session, match_in: match_schemas.MatchCreate, creator: User) -> Match:
    db_match = Match(
        **match_in.model_dump(),
        created_by=creator.id,
        status=MatchStatus.UPCOMING.value,
    )
    db.add(db_match)
    db.commit()
    db.refresh(db_match)

    notification_service.notify_members_of_new_match(db, db_match)
    return db_match

def update_match(db: Session, match_id: int, match_update: match_schemas.MatchUpdate) -> Match:
    db_match = get_match_or_404(db, match_id)
    update_data = match_update.model_dump(exclude_unset=True)

    new_status = update_data.pop("status", None)
    if new_status is not None and not can_transition(db_match.status, new_status):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change status of a {db_match.status} match to {MatchStatus(new_status).value}",
        )

    start = update_data.get("match_start_time", db_match.match_start_time)
    end = update_data.get("match_end_time", db_match.match_end_time)
    if start is not None and end is not None and end <= start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="match_end_time must be later than match_start_time")

    if new_status is not None:
        db_match.status = MatchStatus(new_status).value
    for key, value in update_data.items():
        setattr(db_match, key, value)

    try:
        db.commit()
    except (IntegrityError, DataError) as e:
        db.rollback()
        message = str(e.orig) if e.orig is not None else str(e)
        raise store_error_to_http(StoreError(kind=StoreErrorKind.VALIDATION, message=message))
    db.refresh(db_match)
    return db_match

def delete_match(db: Session, match_id: int) -> None:
    db_match = get_match_or_404(db, match_id)
    # Votes and comments go with the match (ORM cascade)
    db.delete(db_match)
    db.commit()
