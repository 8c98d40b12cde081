from pydantic import BaseModel

from typing import Optional


class SignupRequest(BaseModel):
    email: str
    password: str
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    success: bool = True
    token: str


class ProfileOut(BaseModel):
    id: str
    user_id: str
    name: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    success: bool = True
    profile: ProfileOut


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ReadinessResponse(BaseModel):
    success: bool = True
    database: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
