from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=8)


class UserLoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UserCreated(BaseModel):
    user_id: UUID
    email: str


class UserProfile(BaseModel):
    id: UUID
    name: str
    email: str
    created_at: datetime
    last_login: Optional[datetime]

    model_config = {
        "from_attributes": True
    }


class TokenResponse(BaseModel):

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
