"""
Read views built as application-level joins: fetch the primary rows, then batch-fetch the
referenced owners and counts. A joined reference that no longer exists projects as None.
All functions are sync and read-only.
"""
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.models.comment import Comment
from app.models.like import Like
from app.models.playlist import Playlist, PlaylistVideo
from app.models.subscription import Subscription
from app.models.tweet import Tweet
from app.models.user import User
from app.models.video import Video
from app.models.watch_history import WatchHistoryEntry
from app.repositories.relationships import is_subscribed
from app.schemas.comment import CommentView
from app.schemas.playlist import PlaylistDetail, PlaylistResponse, PlaylistSummary
from app.schemas.social import LikedVideo, SubscribedChannelView, SubscriberView
from app.schemas.tweet import TweetView
from app.schemas.user import ChannelProfileResponse, OwnerSummary
from app.schemas.video import ChannelStats, ChannelVideo, VideoWithOwner
from app.utils.pagination import build_page, page_offset

VIDEO_SORT_FIELDS = {
    "created_at": Video.created_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}


# ---------- Building blocks ----------


def owner_summaries(db: Session, user_ids) -> dict[str, OwnerSummary]:
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}
    rows = db.query(User).filter(User.id.in_(ids)).all()
    return {u.id: OwnerSummary.model_validate(u) for u in rows}


def like_counts(db: Session, column, target_ids) -> dict[str, int]:
    """{target_id: number of likes} for one Like target column."""
    ids = list({t for t in target_ids if t})
    if not ids:
        return {}
    rows = (
        db.query(column, func.count(Like.id))
        .filter(column.in_(ids))
        .group_by(column)
        .all()
    )
    return {target: count for target, count in rows}


def videos_with_owners(db: Session, videos: list[Video]) -> list[VideoWithOwner]:
    owners = owner_summaries(db, (v.owner_id for v in videos))
    out = []
    for v in videos:
        item = VideoWithOwner.model_validate(v)
        item.owner = owners.get(v.owner_id)
        out.append(item)
    return out


def video_with_owner(db: Session, video: Video) -> VideoWithOwner:
    return videos_with_owners(db, [video])[0]


# ---------- Videos ----------


def videos_page(
    db: Session,
    page: int,
    limit: int,
    *,
    query: str | None = None,
    user_id: str | None = None,
    sort_by: str | None = None,
    sort_type: str | None = None,
) -> dict:
    """Published videos, optionally filtered by owner and title/description substring."""
    q = db.query(Video).filter(Video.is_published.is_(True))
    if user_id:
        q = q.filter(Video.owner_id == user_id)
    if query and query.strip():
        term = query.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{term}%"
        q = q.filter(or_(
            func.lower(Video.title).like(pattern, escape="\\"),
            func.lower(Video.description).like(pattern, escape="\\"),
        ))
    total = q.count()
    column = VIDEO_SORT_FIELDS.get((sort_by or "").strip(), Video.created_at)
    ordering = column.asc() if (sort_type or "").lower() == "asc" else column.desc()
    rows = q.order_by(ordering, Video.id).offset(page_offset(page, limit)).limit(limit).all()
    return build_page(videos_with_owners(db, rows), total, page, limit)


# ---------- Comments ----------


def comments_page(db: Session, video_id: str, page: int, limit: int) -> dict:
    """Newest first; created_at ties keep insertion order."""
    base = db.query(Comment).filter(Comment.video_id == video_id)
    total = base.count()
    rows = (
        base.order_by(Comment.created_at.desc(), Comment.seq.asc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    owners = owner_summaries(db, (c.owner_id for c in rows))
    counts = like_counts(db, Like.comment_id, (c.id for c in rows))
    docs = [
        CommentView(
            id=c.id,
            content=c.content,
            owner=owners.get(c.owner_id),
            like_count=counts.get(c.id, 0),
            created_at=c.created_at,
            updated_at=c.updated_at,
        )
        for c in rows
    ]
    return build_page(docs, total, page, limit)


# ---------- Likes ----------


def liked_videos(db: Session, user_id: str) -> list[LikedVideo]:
    likes = (
        db.query(Like)
        .filter(Like.liked_by_id == user_id, Like.video_id.isnot(None))
        .order_by(Like.created_at.desc())
        .all()
    )
    videos = db.query(Video).filter(Video.id.in_([lk.video_id for lk in likes])).all() if likes else []
    by_id = {v.id: item for v, item in zip(videos, videos_with_owners(db, videos))}
    return [LikedVideo(id=lk.id, video=by_id.get(lk.video_id), liked_at=lk.created_at) for lk in likes]


# ---------- Tweets ----------


def user_tweets(db: Session, user_id: str) -> list[TweetView]:
    rows = db.query(Tweet).filter(Tweet.owner_id == user_id).order_by(Tweet.created_at.desc()).all()
    owners = owner_summaries(db, (t.owner_id for t in rows))
    counts = like_counts(db, Like.tweet_id, (t.id for t in rows))
    return [
        TweetView(
            id=t.id,
            content=t.content,
            owner=owners.get(t.owner_id),
            like_count=counts.get(t.id, 0),
            created_at=t.created_at,
            updated_at=t.updated_at,
        )
        for t in rows
    ]


# ---------- Subscriptions & channels ----------


def subscribers_of(db: Session, channel_id: str) -> list[SubscriberView]:
    rows = (
        db.query(Subscription)
        .filter(Subscription.channel_id == channel_id)
        .order_by(Subscription.created_at.desc())
        .all()
    )
    users = owner_summaries(db, (s.subscriber_id for s in rows))
    return [
        SubscriberView(id=s.id, subscriber=users.get(s.subscriber_id), subscribed_at=s.created_at)
        for s in rows
    ]


def subscribed_channels(db: Session, subscriber_id: str) -> list[SubscribedChannelView]:
    rows = (
        db.query(Subscription)
        .filter(Subscription.subscriber_id == subscriber_id)
        .order_by(Subscription.created_at.desc())
        .all()
    )
    users = owner_summaries(db, (s.channel_id for s in rows))
    return [
        SubscribedChannelView(id=s.id, channel=users.get(s.channel_id), subscribed_at=s.created_at)
        for s in rows
    ]


def channel_profile(db: Session, user: User, viewer_id: str) -> ChannelProfileResponse:
    subscribers = db.query(func.count(Subscription.id)).filter(Subscription.channel_id == user.id).scalar() or 0
    subscribed_to = db.query(func.count(Subscription.id)).filter(Subscription.subscriber_id == user.id).scalar() or 0
    return ChannelProfileResponse(
        id=user.id,
        user_name=user.user_name,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
        cover_image_url=user.cover_image_url,
        email=user.email,
        subscribers_count=subscribers,
        channels_subscribed_to_count=subscribed_to,
        is_subscribed=is_subscribed(db, viewer_id, user.id),
    )


def watch_history(db: Session, user_id: str) -> list[VideoWithOwner]:
    """Videos in first-watched order; videos deleted since are skipped."""
    rows = (
        db.query(Video)
        .join(WatchHistoryEntry, WatchHistoryEntry.video_id == Video.id)
        .filter(WatchHistoryEntry.user_id == user_id)
        .order_by(WatchHistoryEntry.watched_at.asc())
        .all()
    )
    return videos_with_owners(db, rows)


# ---------- Playlists ----------


def playlist_video_ids(db: Session, playlist_id: str) -> list[str]:
    rows = (
        db.query(PlaylistVideo.video_id)
        .filter(PlaylistVideo.playlist_id == playlist_id)
        .order_by(PlaylistVideo.added_at.asc())
        .all()
    )
    return [vid for (vid,) in rows]


def playlist_response(db: Session, playlist: Playlist) -> PlaylistResponse:
    return PlaylistResponse(
        id=playlist.id,
        owner_id=playlist.owner_id,
        name=playlist.name,
        description=playlist.description,
        videos=playlist_video_ids(db, playlist.id),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


def playlist_summaries(db: Session, owner_id: str) -> list[PlaylistSummary]:
    playlists = db.query(Playlist).filter(Playlist.owner_id == owner_id).order_by(Playlist.created_at.desc()).all()
    if not playlists:
        return []
    stats = dict(
        (pid, (count, views))
        for pid, count, views in (
            db.query(PlaylistVideo.playlist_id, func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
            .join(Video, Video.id == PlaylistVideo.video_id)
            .filter(PlaylistVideo.playlist_id.in_([p.id for p in playlists]))
            .group_by(PlaylistVideo.playlist_id)
            .all()
        )
    )
    return [
        PlaylistSummary(
            id=p.id,
            owner_id=p.owner_id,
            name=p.name,
            description=p.description,
            video_count=stats.get(p.id, (0, 0))[0],
            total_views=int(stats.get(p.id, (0, 0))[1]),
            created_at=p.created_at,
            updated_at=p.updated_at,
        )
        for p in playlists
    ]


def playlist_detail(db: Session, playlist: Playlist) -> PlaylistDetail:
    rows = (
        db.query(Video)
        .join(PlaylistVideo, PlaylistVideo.video_id == Video.id)
        .filter(PlaylistVideo.playlist_id == playlist.id)
        .order_by(PlaylistVideo.added_at.asc())
        .all()
    )
    owners = owner_summaries(db, [playlist.owner_id])
    return PlaylistDetail(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner=owners.get(playlist.owner_id),
        videos=videos_with_owners(db, rows),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


# ---------- Dashboard ----------


def channel_stats(db: Session, channel_id: str) -> ChannelStats:
    subscribers = db.query(func.count(Subscription.id)).filter(Subscription.channel_id == channel_id).scalar() or 0
    total_videos, total_views = (
        db.query(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
        .filter(Video.owner_id == channel_id)
        .one()
    )
    total_likes = (
        db.query(func.count(Like.id))
        .join(Video, Video.id == Like.video_id)
        .filter(Video.owner_id == channel_id)
        .scalar()
        or 0
    )
    return ChannelStats(
        total_subscribers=subscribers,
        total_videos=total_videos or 0,
        total_likes=total_likes,
        total_views=int(total_views or 0),
    )


def channel_videos(db: Session, channel_id: str) -> list[ChannelVideo]:
    rows = db.query(Video).filter(Video.owner_id == channel_id).order_by(Video.created_at.desc()).all()
    counts = like_counts(db, Like.video_id, (v.id for v in rows))
    return [
        ChannelVideo(
            id=v.id,
            title=v.title,
            description=v.description,
            video_file_url=v.video_file_url,
            thumbnail_url=v.thumbnail_url,
            is_published=v.is_published,
            likes_count=counts.get(v.id, 0),
            views_count=v.views,
            created_at=v.created_at,
            updated_at=v.updated_at,
        )
        for v in rows
    ]
