from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from matchday.models.user import UserRole

class UserBase(BaseModel):
    name: str
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class UserRead(UserBase):
    id: int
    role: UserRole
    is_admin: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class RoleUpdate(BaseModel):
    role: UserRole
