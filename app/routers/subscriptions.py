from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import Forbidden
from app.core.responses import api_response
from app.database import get_db
from app.models.user import User
from app.repositories import projections
from app.repositories.relationships import RelationshipKind, toggle_relationship
from app.schemas.social import ToggleResult
from app.utils.ids import parse_id

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}")
def toggle_subscription(
    channel_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Subscribe if not subscribed, unsubscribe otherwise. Subscribing to yourself is a 400."""
    active = toggle_relationship(db, RelationshipKind.SUBSCRIPTION, channel_id, user.id)
    message = "Subscribed successfully" if active else "Unsubscribed successfully"
    return api_response(ToggleResult(active=active), message)


@router.get("/c/{channel_id}")
def get_channel_subscribers(
    channel_id: str,
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    channel_id = parse_id(channel_id, "channel ID")
    return api_response(projections.subscribers_of(db, channel_id), "Subscribers fetched successfully")


@router.get("/u/{subscriber_id}")
def get_subscribed_channels(
    subscriber_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Only the subscriber can list their own subscriptions."""
    subscriber_id = parse_id(subscriber_id, "subscriber ID")
    if subscriber_id != user.id:
        raise Forbidden("You are not authorized to view this")
    return api_response(projections.subscribed_channels(db, subscriber_id), "Subscribed channels fetched successfully")
