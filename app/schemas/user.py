from datetime import datetime
from pydantic import BaseModel


class OwnerSummary(BaseModel):
    """Public profile projection joined onto videos, comments, tweets, playlists."""
    id: str
    user_name: str
    full_name: str
    avatar_url: str

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: str
    user_name: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    full_name: str | None = None
    email: str | None = None


class ChannelProfileResponse(OwnerSummary):
    cover_image_url: str
    email: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class TokenPayload(BaseModel):
    sub: str  # user id
    exp: int
    type: str = "access"
    email: str | None = None
    user_name: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    user_name: str | None = None
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(TokenResponse):
    user: UserResponse


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str
