"""
Auth Schemas
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Literal, Optional

class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Optional[Literal["admin", "manager", "staff"]] = None

    class Config:
        str_strip_whitespace = True

class LoginRequest(BaseModel):
    email: str
    password: str

class UserInfo(BaseModel):
    id: int
    full_name: str
    email: str
    role: str
    is_active: bool

    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo
