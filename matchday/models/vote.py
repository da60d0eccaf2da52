import enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from matchday.core.database import Base
from matchday.utils.datetime_utils import utcnow

class VoteStatus(str, enum.Enum):
    ATTENDING = "attending"
    NOT_ATTENDING = "not_attending"
    MAYBE = "maybe"
    LATE = "late"

class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        # One vote per member per match; a second vote updates this row
        UniqueConstraint("match_id", "user_id", name="uq_votes_match_user"),
        CheckConstraint(
            "status IN ('attending', 'not_attending', 'maybe', 'late')", name="ck_votes_status"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String, nullable=False)
    note = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    match = relationship("Match", back_populates="votes")
    user = relationship("User", back_populates="votes")
