from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

class CommentCreate(BaseModel):
    content: str = Field(..., max_length=2000)

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment must not be empty")
        return v

class CommentRead(BaseModel):
    id: int
    match_id: int
    user_id: int
    user_name: Optional[str] = None
    content: str
    created_at: datetime

    class Config:
        from_attributes = True
