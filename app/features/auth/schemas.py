"""
Pydantic schemas for registration and login.
"""
from pydantic import BaseModel, EmailStr, Field

from app.features.users.schemas import UserResponse


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=2)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterResponse(BaseModel):
    message: str
    user_id: str
    workspace_id: str
    access_token: str
    token_type: str = "bearer"


class LoginResponse(BaseModel):
    message: str
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
