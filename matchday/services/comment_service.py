from typing import List

from sqlalchemy.orm import Session, joinedload

from matchday.models.comment import Comment
from matchday.schemas.comment_schemas import CommentRead
from matchday.services.match_service import get_match_or_404

def _to_read(comment: Comment) -> CommentRead:
    return CommentRead(
        id=comment.id,
        match_id=comment.match_id,
        user_id=comment.user_id,
        user_name=comment.user.name if comment.user else None,
        content=comment.content,
        created_at=comment.created_at,
    )

def add_comment(db: Session, match_id: int, user_id: int, content: str) -> CommentRead:
    get_match_or_404(db, match_id)
    comment = Comment(match_id=match_id, user_id=user_id, content=content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return _to_read(comment)

def list_comments(db: Session, match_id: int) -> List[CommentRead]:
    get_match_or_404(db, match_id)
    comments = db.query(Comment)\
        .options(joinedload(Comment.user))\
        .filter(Comment.match_id == match_id)\
        .order_by(Comment.created_at.desc(), Comment.id.desc())\
        .all()
    return [_to_read(c) for c in comments]
