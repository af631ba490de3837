from datetime import datetime
from pydantic import BaseModel
from app.schemas.user import OwnerSummary
from app.schemas.video import VideoWithOwner


class PlaylistFields(BaseModel):
    name: str | None = None
    description: str | None = None


class PlaylistResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    description: str
    videos: list[str] = []
    created_at: datetime
    updated_at: datetime


class PlaylistSummary(BaseModel):
    id: str
    owner_id: str
    name: str
    description: str
    video_count: int
    total_views: int
    created_at: datetime
    updated_at: datetime


class PlaylistDetail(BaseModel):
    id: str
    name: str
    description: str
    owner: OwnerSummary | None = None
    videos: list[VideoWithOwner] = []
    created_at: datetime
    updated_at: datetime
