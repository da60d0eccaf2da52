from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from matchday.api.dependencies import get_db, get_now, get_push_client, get_store
from matchday.models.match import MatchStatus
from matchday.models.user import User
from matchday.schemas import comment_schemas, match_schemas, vote_schemas
from matchday.services import (
    auth_service,
    comment_service,
    lifecycle_service,
    match_service,
    notification_service,
    vote_service,
)
from matchday.services.push_service import PushClient

router = APIRouter()

@router.get("/", response_model=List[match_schemas.MatchSummary])
def list_matches_endpoint(
    match_status: Optional[MatchStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    return match_service.get_matches_summary(db=db, match_status=match_status)

@router.post("/", response_model=match_schemas.MatchRead, status_code=status.HTTP_201_CREATED)
def create_match_endpoint(
    match_in: match_schemas.MatchCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: User = Depends(auth_service.get_admin_user),
    push_client: PushClient = Depends(get_push_client),
):
    db_match = match_service.create_match(db=db, match_in=match_in, creator=admin)
    # Best effort, after the response has gone out
    background_tasks.add_task(
        push_client.announce,
        notification_service.NEW_MATCH_TITLE,
        notification_service.format_match_announcement(db_match),
        {"match_id": str(db_match.id), "type": "new_match"},
    )
    return db_match

@router.get("/{match_id}", response_model=match_schemas.MatchDetail)
def get_match_detail_endpoint(
    match_id: int,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: User = Depends(auth_service.get_current_user),
):
    return lifecycle_service.load_match_detail(
        store=get_store(db), match_id=match_id, now=now, user_id=current_user.id
    )

@router.patch("/{match_id}", response_model=match_schemas.MatchRead)
def update_match_endpoint(
    match_id: int,
    match_update: match_schemas.MatchUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(auth_service.get_admin_user),
):
    return match_service.update_match(db=db, match_id=match_id, match_update=match_update)

@router.delete("/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_match_endpoint(
    match_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(auth_service.get_admin_user),
):
    match_service.delete_match(db=db, match_id=match_id)

@router.put("/{match_id}/vote", response_model=vote_schemas.VoteRead)
def cast_vote_endpoint(
    match_id: int,
    vote_in: vote_schemas.VoteCast,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: User = Depends(auth_service.get_active_user),
):
    return vote_service.cast_vote(
        store=get_store(db),
        match_id=match_id,
        user_id=current_user.id,
        vote_status=vote_in.status,
        note=vote_in.note,
        now=now,
    )

@router.get("/{match_id}/comments", response_model=List[comment_schemas.CommentRead])
def list_comments_endpoint(
    match_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    return comment_service.list_comments(db=db, match_id=match_id)

@router.post("/{match_id}/comments", response_model=comment_schemas.CommentRead, status_code=status.HTTP_201_CREATED)
def add_comment_endpoint(
    match_id: int,
    comment_in: comment_schemas.CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_active_user),
):
    return comment_service.add_comment(db=db, match_id=match_id, user_id=current_user.id, content=comment_in.content)
