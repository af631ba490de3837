from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.responses import api_response
from app.database import get_db
from app.models.user import User
from app.repositories import projections

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
def get_channel_stats(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Subscribers, videos, likes on own videos and total views for the caller's channel."""
    return api_response(projections.channel_stats(db, user.id), "Channel stats fetched successfully")


@router.get("/videos")
def get_channel_videos(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return api_response(projections.channel_videos(db, user.id), "Channel videos fetched successfully")
