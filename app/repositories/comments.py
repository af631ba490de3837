"""Comment insertion with a per-video sequence number."""
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import InternalError
from app.models.comment import Comment

logger = logging.getLogger(__name__)

MAX_INSERT_ATTEMPTS = 3


def next_seq(db: Session, video_id: str) -> int:
    last = db.query(func.max(Comment.seq)).filter(Comment.video_id == video_id).scalar()
    return (last or 0) + 1


def add_comment(db: Session, video_id: str, owner_id: str, content: str) -> Comment:
    """Insert with seq = max + 1. A parallel insert taking the same seq trips
    uq_comments_video_seq; the insert is then retried with a fresh seq."""
    for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
        comment = Comment(video_id=video_id, owner_id=owner_id, content=content, seq=next_seq(db, video_id))
        db.add(comment)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("Comment seq taken on video %s, retrying (%d/%d)", video_id, attempt, MAX_INSERT_ATTEMPTS)
            continue
        db.refresh(comment)
        return comment
    logger.error("Giving up adding a comment to video %s", video_id)
    raise InternalError("Could not add comment, please retry")
