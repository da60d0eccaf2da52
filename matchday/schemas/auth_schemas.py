from pydantic import BaseModel, EmailStr
from typing import Optional

class Token(BaseModel):
    access_token: str
    token_type: str
    is_dormant: bool = False # client offers reactivation when True

class TokenData(BaseModel):
    # Using email as the identifier in the token
    email: Optional[EmailStr] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class GoogleLoginRequest(BaseModel):
    token: str # This will be the Google ID token received from the client
