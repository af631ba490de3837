from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import BadRequest, NotFound
from app.core.responses import api_response
from app.database import get_db
from app.models.comment import Comment
from app.models.user import User
from app.models.video import Video
from app.repositories import cascades, comments, projections
from app.repositories.ownership import delete_if_owner, update_if_owner
from app.schemas.comment import CommentContent, CommentResponse
from app.schemas.common import Page
from app.utils.ids import parse_id
from app.utils.pagination import clamp_pagination

router = APIRouter(prefix="/api/comments", tags=["comments"])


def _published_video_exists(db: Session, video_id: str) -> bool:
    return (
        db.query(Video.id)
        .filter(Video.id == video_id, Video.is_published.is_(True))
        .first()
        is not None
    )


def _content(body: CommentContent) -> str:
    content = (body.content or "").strip()
    if not content:
        raise BadRequest("Comment content cannot be empty")
    return content


@router.get("/{video_id}")
def get_video_comments(
    video_id: str,
    page: str | None = Query(None),
    limit: str | None = Query(None),
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Comments with owner and like count, newest first. page/limit are clamped, never rejected."""
    video_id = parse_id(video_id, "video ID")
    page_no, page_size = clamp_pagination(page, limit)
    if not _published_video_exists(db, video_id):
        raise NotFound("Video not found")
    result = projections.comments_page(db, video_id, page_no, page_size)
    return api_response(Page(**result), "Comments fetched successfully")


@router.post("/{video_id}")
def add_comment(
    video_id: str,
    body: CommentContent,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    video_id = parse_id(video_id, "video ID")
    content = _content(body)
    if not _published_video_exists(db, video_id):
        raise NotFound("Video not found")
    comment = comments.add_comment(db, video_id, user.id, content)
    return api_response(CommentResponse.model_validate(comment), "Comment added successfully", status.HTTP_201_CREATED)


@router.patch("/c/{comment_id}")
def update_comment(
    comment_id: str,
    body: CommentContent,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment_id = parse_id(comment_id, "comment ID")
    content = _content(body)
    comment = update_if_owner(db, Comment, comment_id, user.id, {"content": content}, label="Comment")
    return api_response(CommentResponse.model_validate(comment), "Comment updated successfully")


@router.delete("/c/{comment_id}")
def delete_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Owner only; the comment's likes go with it."""
    comment_id = parse_id(comment_id, "comment ID")
    delete_if_owner(db, Comment, comment_id, user.id, label="Comment", cascade=cascades.purge_comment)
    return api_response({}, "Comment deleted successfully")
