from pydantic import BaseModel, Field
from typing import Optional

class SignupRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=6)
    username: Optional[str] = None

class Token(BaseModel):
    access_token: str
    token_type: str

class PasswordChange(BaseModel):
    current_password: str
    new_password: str
