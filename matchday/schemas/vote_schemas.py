from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from matchday.models.vote import VoteStatus

class VoteCast(BaseModel):
    status: VoteStatus
    note: Optional[str] = Field(None, max_length=500)

class VoteRead(BaseModel):
    id: int
    match_id: int
    user_id: int
    user_name: Optional[str] = None
    status: VoteStatus
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
