"""Dependent-row cleanup run inside ownership-scoped deletes. Callers commit."""
from sqlalchemy.orm import Session

from app.models.comment import Comment
from app.models.like import Like
from app.models.playlist import PlaylistVideo
from app.models.watch_history import WatchHistoryEntry


def purge_comment(db: Session, comment: dict) -> None:
    db.query(Like).filter(Like.comment_id == comment["id"]).delete(synchronize_session=False)


def purge_tweet(db: Session, tweet: dict) -> None:
    db.query(Like).filter(Like.tweet_id == tweet["id"]).delete(synchronize_session=False)


def purge_video(db: Session, video: dict) -> None:
    """Likes on the video, its comments and their likes, playlist memberships, watch history."""
    video_id = video["id"]
    comment_ids = [cid for (cid,) in db.query(Comment.id).filter(Comment.video_id == video_id).all()]
    if comment_ids:
        db.query(Like).filter(Like.comment_id.in_(comment_ids)).delete(synchronize_session=False)
        db.query(Comment).filter(Comment.id.in_(comment_ids)).delete(synchronize_session=False)
    db.query(Like).filter(Like.video_id == video_id).delete(synchronize_session=False)
    db.query(PlaylistVideo).filter(PlaylistVideo.video_id == video_id).delete(synchronize_session=False)
    db.query(WatchHistoryEntry).filter(WatchHistoryEntry.video_id == video_id).delete(synchronize_session=False)
