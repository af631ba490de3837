"""Video write paths that are not ownership-scoped: view counting and watch history."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.video import Video
from app.models.watch_history import WatchHistoryEntry

logger = logging.getLogger(__name__)


def visible_video(db: Session, video_id: str, viewer_id: str) -> Video | None:
    """Published videos are visible to everyone; unpublished ones only to their owner."""
    video = db.query(Video).filter(Video.id == video_id).first()
    if video is None or (not video.is_published and video.owner_id != viewer_id):
        return None
    return video


def record_view(db: Session, video_id: str, viewer_id: str) -> Video | None:
    """Increment views in one UPDATE and add the video to the viewer's watch history once."""
    updated = (
        db.query(Video)
        .filter(Video.id == video_id)
        .update({"views": Video.views + 1}, synchronize_session=False)
    )
    if not updated:
        return None
    db.commit()
    add_to_watch_history(db, viewer_id, video_id)
    return db.get(Video, video_id, populate_existing=True)


def add_to_watch_history(db: Session, user_id: str, video_id: str) -> bool:
    """Append-only, deduplicated. Returns True when a new entry was added."""
    exists = (
        db.query(WatchHistoryEntry.id)
        .filter(WatchHistoryEntry.user_id == user_id, WatchHistoryEntry.video_id == video_id)
        .first()
    )
    if exists:
        return False
    db.add(WatchHistoryEntry(user_id=user_id, video_id=video_id))
    try:
        db.commit()
    except IntegrityError:
        # Same video recorded by a parallel request
        db.rollback()
        logger.debug("Watch history entry for %s/%s already present", user_id, video_id)
        return False
    return True
