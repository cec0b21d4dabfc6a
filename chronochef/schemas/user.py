from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, EmailStr, Field, model_validator

from chronochef.schemas.base import CamelModel


class UserCreate(CamelModel):
    """Sign-up payload"""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserLogin(CamelModel):
    """Sign-in payload; either username or email identifies the account"""
    username: Optional[str] = None
    email: Optional[str] = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def identifier_present(self):
        if not (self.username or self.email):
            raise ValueError("Username or email is required")
        return self


class UserUpsert(CamelModel):
    """Identity delivered by an external provider, merged on id"""
    id: str = Field(..., min_length=1)
    email: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    user: UserResponse
    token: str
