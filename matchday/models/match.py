import enum

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from matchday.core.database import Base
from matchday.utils.datetime_utils import utcnow

class MatchStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("status IN ('upcoming', 'completed', 'cancelled')", name="ck_matches_status"),
        CheckConstraint("min_players >= 1", name="ck_matches_min_players"),
        CheckConstraint(
            "match_start_time IS NULL OR (match_start_time >= 0 AND match_start_time <= 23)",
            name="ck_matches_start_hour",
        ),
        CheckConstraint(
            "match_end_time IS NULL OR (match_end_time >= 0 AND match_end_time <= 23)",
            name="ck_matches_end_hour",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    match_date = Column(Date, nullable=False, index=True)
    match_start_time = Column(Integer, nullable=True) # hour of day, 0-23
    match_end_time = Column(Integer, nullable=True)
    vote_deadline = Column(DateTime(timezone=True), nullable=True)
    location = Column(String, nullable=False)
    min_players = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=MatchStatus.UPCOMING.value)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    creator = relationship("User")
    votes = relationship("Vote", back_populates="match", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="match", cascade="all, delete-orphan")
