from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from matchday.api.dependencies import get_db
from matchday.models.user import User
from matchday.schemas import score_schemas
from matchday.services import auth_service, score_service

router = APIRouter()

@router.get("/", response_model=List[score_schemas.HighScoreRead])
def get_leaderboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    return score_service.get_high_scores(db=db)

@router.post("/", response_model=score_schemas.HighScoreRead)
def submit_score(
    score_in: score_schemas.ScoreSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    best = score_service.save_high_score(db=db, user_id=current_user.id, score=score_in.score)
    return score_schemas.HighScoreRead(user_id=best.user_id, user_name=current_user.name, score=best.score)
