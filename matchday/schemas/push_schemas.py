from pydantic import BaseModel, Field

class PushTokenRegister(BaseModel):
    token: str = Field(..., min_length=1)

class PushResult(BaseModel):
    sent: int = 0
    failed: int = 0
    total: int = 0
    invalid_tokens_removed: int = 0
