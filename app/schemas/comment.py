from datetime import datetime
from pydantic import BaseModel
from app.schemas.user import OwnerSummary


class CommentContent(BaseModel):
    content: str | None = None


class CommentResponse(BaseModel):
    id: str
    video_id: str
    owner_id: str
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CommentView(BaseModel):
    """Comment joined with its owner and like count (video id omitted)."""
    id: str
    content: str
    owner: OwnerSummary | None = None
    like_count: int = 0
    created_at: datetime
    updated_at: datetime
