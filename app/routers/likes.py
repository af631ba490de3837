from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.responses import api_response
from app.database import get_db
from app.models.user import User
from app.repositories import projections
from app.repositories.relationships import RelationshipKind, toggle_relationship
from app.schemas.social import ToggleResult

router = APIRouter(prefix="/api/likes", tags=["likes"])


def _toggle_like(db: Session, kind: RelationshipKind, target_id: str, user: User, label: str):
    active = toggle_relationship(db, kind, target_id, user.id)
    message = f"{label} liked successfully" if active else f"{label} unliked successfully"
    return api_response(ToggleResult(active=active), message)


@router.post("/toggle/v/{video_id}")
def toggle_video_like(
    video_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _toggle_like(db, RelationshipKind.VIDEO_LIKE, video_id, user, "Video")


@router.post("/toggle/c/{comment_id}")
def toggle_comment_like(
    comment_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _toggle_like(db, RelationshipKind.COMMENT_LIKE, comment_id, user, "Comment")


@router.post("/toggle/t/{tweet_id}")
def toggle_tweet_like(
    tweet_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _toggle_like(db, RelationshipKind.TWEET_LIKE, tweet_id, user, "Tweet")


@router.get("/videos")
def get_liked_videos(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Videos the caller liked, newest like first. `video` is null if it was removed."""
    items = projections.liked_videos(db, user.id)
    message = "Liked videos fetched successfully" if items else "No liked videos found"
    return api_response(items, message)
