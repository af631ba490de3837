"""Toggle results and join-record views (likes, subscriptions)."""
from datetime import datetime
from pydantic import BaseModel
from app.schemas.user import OwnerSummary
from app.schemas.video import VideoWithOwner


class ToggleResult(BaseModel):
    active: bool


class LikedVideo(BaseModel):
    id: str  # like id
    video: VideoWithOwner | None = None
    liked_at: datetime


class SubscriberView(BaseModel):
    id: str  # subscription id
    subscriber: OwnerSummary | None = None
    subscribed_at: datetime


class SubscribedChannelView(BaseModel):
    id: str  # subscription id
    channel: OwnerSummary | None = None
    subscribed_at: datetime
