from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from matchday.core.database import Base
from matchday.utils.datetime_utils import utcnow

class PushToken(Base):
    __tablename__ = "push_tokens"

    id = Column(Integer, primary_key=True, index=True)
    # One device endpoint per user, the most recently registered one
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    token = Column(String, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
