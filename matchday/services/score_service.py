from typing import List

from sqlalchemy.orm import Session, joinedload

from matchday.models.high_score import HighScore
from matchday.schemas.score_schemas import HighScoreRead
from matchday.utils.datetime_utils import utcnow

LEADERBOARD_SIZE = 20

def get_high_scores(db: Session, limit: int = LEADERBOARD_SIZE) -> List[HighScoreRead]:
    rows = db.query(HighScore)\
        .options(joinedload(HighScore.user))\
        .order_by(HighScore.score.desc(), HighScore.updated_at.asc())\
        .limit(limit)\
        .all()
    return [
        HighScoreRead(user_id=row.user_id, user_name=row.user.name if row.user else "Unknown", score=row.score)
        for row in rows
    ]

def save_high_score(db: Session, user_id: int, score: int) -> HighScore:
    """Keep the user's best score. A lower score leaves the stored one alone."""
    db_score = db.query(HighScore).filter(HighScore.user_id == user_id).first()
    if db_score is None:
        db_score = HighScore(user_id=user_id, score=score)
        db.add(db_score)
    elif score > db_score.score:
        db_score.score = score
        db_score.updated_at = utcnow()
    else:
        return db_score
    db.commit()
    db.refresh(db_score)
    return db_score
