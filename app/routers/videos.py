"""
Videos: browse, publish, watch, edit, delete, publish toggle.
Files live on the media host; edits and deletes are ownership-scoped (404 for non-owners).
"""
import logging
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy import not_
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import BadRequest, NotFound
from app.core.responses import api_response
from app.database import get_db
from app.models.user import User
from app.models.video import Video
from app.repositories import cascades, projections
from app.repositories.ownership import delete_if_owner, find_owned, update_if_owner
from app.repositories.videos import record_view, visible_video
from app.schemas.common import Page
from app.schemas.video import VideoResponse
from app.services.media import get_media_host
from app.services.uploads import has_upload, is_image_upload, is_video_upload, store_upload
from app.utils.ids import parse_id
from app.utils.pagination import clamp_pagination

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["videos"])


@router.get("")
def list_videos(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    query: str | None = Query(None),
    sort_by: str | None = Query(None),
    sort_type: str | None = Query(None),
    user_id: str | None = Query(None),
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Published videos. ?query= matches title/description; sort_by created_at|views|duration|title."""
    page_no, page_size = clamp_pagination(page, limit)
    owner_id = parse_id(user_id, "user ID") if user_id else None
    result = projections.videos_page(
        db, page_no, page_size, query=query, user_id=owner_id, sort_by=sort_by, sort_type=sort_type,
    )
    return api_response(Page(**result), "Videos fetched successfully")


@router.post("")
def publish_video(
    title: str = Form(""),
    description: str = Form(""),
    video_file: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    media=Depends(get_media_host),
):
    """Upload video + thumbnail to the media host and create a published video."""
    if not has_upload(video_file) or not has_upload(thumbnail):
        raise BadRequest("Video file and thumbnail are required")
    if not title.strip() or not description.strip():
        raise BadRequest("Title and description are required")
    if not is_video_upload(video_file) or not is_image_upload(thumbnail):
        raise BadRequest("Invalid file types uploaded")

    video_asset = store_upload(media, video_file, "Failed to upload video or thumbnail")
    try:
        thumb_asset = store_upload(media, thumbnail, "Failed to upload video or thumbnail")
    except Exception:
        media.delete(video_asset.public_id, video_asset.kind)
        raise
    if video_asset.kind != "video" or thumb_asset.kind != "image":
        media.delete(video_asset.public_id, video_asset.kind)
        media.delete(thumb_asset.public_id, thumb_asset.kind)
        raise BadRequest("Invalid file types uploaded")

    video = Video(
        owner_id=user.id,
        video_file_url=video_asset.url,
        video_file_public_id=video_asset.public_id,
        thumbnail_url=thumb_asset.url,
        thumbnail_public_id=thumb_asset.public_id,
        title=title.strip(),
        description=description.strip(),
        duration=video_asset.duration or 0,
        is_published=True,
    )
    db.add(video)
    db.commit()
    db.refresh(video)
    logger.info("User %s published video %s", user.id, video.id)
    return api_response(VideoResponse.model_validate(video), "Video published successfully", status.HTTP_201_CREATED)


@router.get("/{video_id}")
def get_video(
    video_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Counts a view, records watch history, returns the video with its owner."""
    video_id = parse_id(video_id, "video ID")
    if visible_video(db, video_id, user.id) is None:
        raise NotFound("Video not found")
    video = record_view(db, video_id, user.id)
    if video is None:
        raise NotFound("Video not found")
    return api_response(projections.video_with_owner(db, video), "Video fetched successfully")


@router.patch("/{video_id}")
def update_video(
    video_id: str,
    title: str | None = Form(None),
    description: str | None = Form(None),
    thumbnail: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    media=Depends(get_media_host),
):
    """Owner only: title, description and/or a new thumbnail (old one is removed from the host)."""
    video_id = parse_id(video_id, "video ID")
    values = {}
    if title is not None and title.strip():
        values["title"] = title.strip()
    if description is not None and description.strip():
        values["description"] = description.strip()
    new_thumbnail = has_upload(thumbnail)
    if not values and not new_thumbnail:
        raise BadRequest("Title, description or thumbnail is required")
    if new_thumbnail and not is_image_upload(thumbnail):
        raise BadRequest("Thumbnail must be an image")

    current = find_owned(db, Video, video_id, user.id, label="Video")
    old_thumbnail_id = current.thumbnail_public_id
    asset = None
    if new_thumbnail:
        asset = store_upload(media, thumbnail, "Failed to upload thumbnail")
        values["thumbnail_url"] = asset.url
        values["thumbnail_public_id"] = asset.public_id
    try:
        video = update_if_owner(db, Video, video_id, user.id, values, label="Video")
    except NotFound:
        if asset:
            media.delete(asset.public_id, asset.kind)
        raise
    if asset:
        media.delete(old_thumbnail_id, "image")
    return api_response(VideoResponse.model_validate(video), "Video updated successfully")


@router.delete("/{video_id}")
def delete_video(
    video_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    media=Depends(get_media_host),
):
    """Owner only. Removes media assets and everything attached to the video."""
    video_id = parse_id(video_id, "video ID")
    deleted = delete_if_owner(db, Video, video_id, user.id, label="Video", cascade=cascades.purge_video)
    media.delete(deleted["video_file_public_id"], "video")
    media.delete(deleted["thumbnail_public_id"], "image")
    logger.info("User %s deleted video %s", user.id, video_id)
    return api_response(None, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}")
def toggle_publish_status(
    video_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    video_id = parse_id(video_id, "video ID")
    video = update_if_owner(
        db, Video, video_id, user.id, {"is_published": not_(Video.is_published)}, label="Video",
    )
    state = "published" if video.is_published else "unpublished"
    return api_response(VideoResponse.model_validate(video), f"Video {state} successfully")
