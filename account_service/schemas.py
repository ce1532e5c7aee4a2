from pydantic import BaseModel

from datetime import datetime
from typing import Optional


# Request bodies. Fields are optional here so that missing values are
# reported by the service's validation rules with field-level messages.
class RegisterRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None


# Responses
class UserView(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginData(BaseModel):
    first_name: str
    last_name: str
    email: str
    token: str


class UserResponse(BaseModel):
    data: UserView
    message: Optional[str] = None


class LoginResponse(BaseModel):
    data: LoginData
    message: str


class MessageResponse(BaseModel):
    message: str
