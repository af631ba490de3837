"""
Relationship toggle for join records (video/comment/tweet likes, channel subscriptions).

Delete-first: one DELETE matching (actor, target). A deleted row means the relationship is now
inactive. Otherwise a join record is inserted; the (actor, target) unique constraint rejects a
concurrent duplicate insert, and the toggle is retried from the DELETE step.
"""
import enum
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, Forbidden, InternalError, NotFound
from app.models.comment import Comment
from app.models.like import Like
from app.models.subscription import Subscription
from app.models.tweet import Tweet
from app.models.user import User
from app.models.video import Video
from app.utils.ids import parse_id

logger = logging.getLogger(__name__)

MAX_TOGGLE_ATTEMPTS = 3


class RelationshipKind(str, enum.Enum):
    VIDEO_LIKE = "video-like"
    COMMENT_LIKE = "comment-like"
    TWEET_LIKE = "tweet-like"
    SUBSCRIPTION = "subscription"


# kind -> (join model, actor column, target column)
_JOIN_COLUMNS = {
    RelationshipKind.VIDEO_LIKE: (Like, Like.liked_by_id, Like.video_id),
    RelationshipKind.COMMENT_LIKE: (Like, Like.liked_by_id, Like.comment_id),
    RelationshipKind.TWEET_LIKE: (Like, Like.liked_by_id, Like.tweet_id),
    RelationshipKind.SUBSCRIPTION: (Subscription, Subscription.subscriber_id, Subscription.channel_id),
}

_TARGET_LABELS = {
    RelationshipKind.VIDEO_LIKE: "video ID",
    RelationshipKind.COMMENT_LIKE: "comment ID",
    RelationshipKind.TWEET_LIKE: "tweet ID",
    RelationshipKind.SUBSCRIPTION: "channel ID",
}


def _check_target(db: Session, kind: RelationshipKind, target_id: str) -> None:
    if kind is RelationshipKind.VIDEO_LIKE:
        video = db.query(Video.is_published).filter(Video.id == target_id).first()
        if video is None:
            raise NotFound("Video not found")
        if not video.is_published:
            raise Forbidden("Video is not published")
    elif kind is RelationshipKind.COMMENT_LIKE:
        if db.query(Comment.id).filter(Comment.id == target_id).first() is None:
            raise NotFound("Comment not found")
    elif kind is RelationshipKind.TWEET_LIKE:
        if db.query(Tweet.id).filter(Tweet.id == target_id).first() is None:
            raise NotFound("Tweet not found")
    elif kind is RelationshipKind.SUBSCRIPTION:
        if db.query(User.id).filter(User.id == target_id).first() is None:
            raise NotFound("Channel not found")


def toggle_relationship(db: Session, kind: RelationshipKind | str, target_id: str, actor_id: str) -> bool:
    """Flip (actor, target) membership. Returns the new state: True = active."""
    kind = RelationshipKind(kind)
    if kind is RelationshipKind.SUBSCRIPTION and str(target_id) == str(actor_id):
        raise BadRequest("You cannot subscribe to yourself")
    target_id = parse_id(target_id, _TARGET_LABELS[kind])
    if kind is RelationshipKind.SUBSCRIPTION and target_id == actor_id:
        raise BadRequest("You cannot subscribe to yourself")
    _check_target(db, kind, target_id)

    model, actor_col, target_col = _JOIN_COLUMNS[kind]
    for attempt in range(1, MAX_TOGGLE_ATTEMPTS + 1):
        removed = (
            db.query(model)
            .filter(actor_col == actor_id, target_col == target_id)
            .delete(synchronize_session=False)
        )
        if removed:
            db.commit()
            return False
        db.add(model(**{actor_col.key: actor_id, target_col.key: target_id}))
        try:
            db.commit()
            return True
        except IntegrityError:
            # A concurrent toggle inserted the same pair first
            db.rollback()
            logger.info(
                "Concurrent %s toggle on %s by %s, retrying (%d/%d)",
                kind.value, target_id, actor_id, attempt, MAX_TOGGLE_ATTEMPTS,
            )
    logger.error("Giving up %s toggle on %s by %s", kind.value, target_id, actor_id)
    raise InternalError("Could not update, please retry")


def is_subscribed(db: Session, subscriber_id: str, channel_id: str) -> bool:
    return (
        db.query(Subscription.id)
        .filter(Subscription.subscriber_id == subscriber_id, Subscription.channel_id == channel_id)
        .first()
        is not None
    )
