from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from matchday.models.match import MatchStatus
from matchday.utils.datetime_utils import ensure_utc
from .vote_schemas import VoteRead

class MatchBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    match_date: date
    match_start_time: Optional[int] = Field(None, ge=0, le=23, description="Kick-off hour of day")
    match_end_time: Optional[int] = Field(None, ge=0, le=23)
    vote_deadline: Optional[datetime] = Field(None, description="Votes are accepted strictly before this instant")
    location: str = Field(..., min_length=1)
    min_players: int = Field(..., ge=1, description="Attending headcount needed for the match to go ahead")

    @field_validator("vote_deadline")
    @classmethod
    def deadline_as_utc(cls, v):
        return ensure_utc(v)

class MatchCreate(MatchBase):

    @model_validator(mode="after")
    def end_after_start(self):
        if (
            self.match_start_time is not None
            and self.match_end_time is not None
            and self.match_end_time <= self.match_start_time
        ):
            raise ValueError("match_end_time must be later than match_start_time")
        return self

class MatchUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    match_date: Optional[date] = None
    match_start_time: Optional[int] = Field(None, ge=0, le=23)
    match_end_time: Optional[int] = Field(None, ge=0, le=23)
    vote_deadline: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1)
    min_players: Optional[int] = Field(None, ge=1)
    status: Optional[MatchStatus] = None # admins may close an upcoming match by hand

    @field_validator("title", "description", "match_date", "location", "min_players")
    @classmethod
    def not_null(cls, v):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("vote_deadline")
    @classmethod
    def deadline_as_utc(cls, v):
        return ensure_utc(v)

class MatchRead(MatchBase):
    id: int
    status: MatchStatus
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class MatchSummary(BaseModel):
    """Row of the match list: the match plus its current attending headcount."""
    match: MatchRead
    attending_count: int

class MatchDetail(BaseModel):
    """Everything the match detail screen renders, computed after the lifecycle check."""
    match: MatchRead
    votes: List[VoteRead]
    attending_count: int
    quorum_met: bool
    voting_closed: bool
    vote_counts: Dict[str, int]
    my_vote: Optional[VoteRead] = None
