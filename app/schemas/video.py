from datetime import datetime
from pydantic import BaseModel
from app.schemas.user import OwnerSummary


class VideoResponse(BaseModel):
    id: str
    owner_id: str
    video_file_url: str
    thumbnail_url: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VideoWithOwner(VideoResponse):
    owner: OwnerSummary | None = None


class ChannelVideo(BaseModel):
    id: str
    title: str
    description: str
    video_file_url: str
    thumbnail_url: str
    is_published: bool
    likes_count: int
    views_count: int
    created_at: datetime
    updated_at: datetime


class ChannelStats(BaseModel):
    total_subscribers: int = 0
    total_videos: int = 0
    total_likes: int = 0
    total_views: int = 0
