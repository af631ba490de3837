from datetime import datetime
from pydantic import BaseModel
from app.schemas.user import OwnerSummary


class TweetContent(BaseModel):
    content: str | None = None


class TweetResponse(BaseModel):
    id: str
    owner_id: str
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TweetView(BaseModel):
    id: str
    content: str
    owner: OwnerSummary | None = None
    like_count: int = 0
    created_at: datetime
    updated_at: datetime
