from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from shared.security.roles import Role


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    role: Role = Role.CUSTOMER

    @field_validator("role")
    @classmethod
    def no_self_service_admin(cls, value: Role) -> Role:
        if value == Role.ADMIN:
            raise ValueError("ADMIN accounts cannot be self-registered")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    image: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    image: Optional[str]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
