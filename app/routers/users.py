from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import BadRequest, Conflict, NotFound
from app.core.responses import api_response
from app.database import get_db
from app.models.user import User
from app.repositories import projections
from app.schemas.user import UserResponse, UserUpdate
from app.services.media import get_media_host
from app.services.uploads import has_upload, is_image_upload, store_upload

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me")
def get_me(user: User = Depends(get_current_user)):
    return api_response(UserResponse.model_validate(user), "Current user fetched successfully")


@router.patch("/me")
def update_account(
    body: UserUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update full name and/or email."""
    full_name = (body.full_name or "").strip()
    email = (body.email or "").strip().lower()
    if not full_name and not email:
        raise BadRequest("Full name or email is required")
    if email and email != user.email:
        taken = db.query(User.id).filter(User.email == email, User.id != user.id).first()
        if taken:
            raise Conflict("Email is already in use")
        user.email = email
    if full_name:
        user.full_name = full_name
    db.commit()
    db.refresh(user)
    return api_response(UserResponse.model_validate(user), "Account details updated successfully")


def _replace_image(
    user: User,
    file: UploadFile | None,
    field: str,
    db: Session,
    media,
) -> User:
    """Store the new image, point `<field>_url` at it, then drop the old asset."""
    if not has_upload(file) or not is_image_upload(file):
        raise BadRequest("Image file is required")
    asset = store_upload(media, file, "Image upload failed")
    old_public_id = getattr(user, f"{field}_public_id")
    setattr(user, f"{field}_url", asset.url)
    setattr(user, f"{field}_public_id", asset.public_id)
    db.commit()
    db.refresh(user)
    media.delete(old_public_id, "image")
    return user


@router.patch("/me/avatar")
def update_avatar(
    avatar: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    media=Depends(get_media_host),
):
    user = _replace_image(user, avatar, "avatar", db, media)
    return api_response(UserResponse.model_validate(user), "Avatar updated successfully")


@router.patch("/me/cover-image")
def update_cover_image(
    cover_image: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    media=Depends(get_media_host),
):
    user = _replace_image(user, cover_image, "cover_image", db, media)
    return api_response(UserResponse.model_validate(user), "Cover image updated successfully")


@router.get("/c/{user_name}")
def get_channel_profile(
    user_name: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Channel page: profile plus subscriber counts and whether the caller is subscribed."""
    name = (user_name or "").strip().lower()
    if not name:
        raise BadRequest("Username is missing")
    channel = db.query(User).filter(User.user_name == name).first()
    if not channel:
        raise NotFound("Channel does not exist")
    return api_response(projections.channel_profile(db, channel, user.id), "Channel fetched successfully")


@router.get("/me/history")
def get_watch_history(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return api_response(projections.watch_history(db, user.id), "Watch history fetched successfully")
