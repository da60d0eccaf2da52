from pydantic import BaseModel, Field

class ScoreSubmit(BaseModel):
    score: int = Field(..., ge=0)

class HighScoreRead(BaseModel):
    user_id: int
    user_name: str
    score: int
