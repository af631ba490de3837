"""Register, login/logout and token refresh. Tokens go out in the body and as http-only cookies."""
import logging
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from app.auth import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    decode_token,
    get_current_user,
    hash_password,
    issue_tokens,
    verify_password,
)
from app.config import get_settings
from app.core.errors import BadRequest, Conflict, Unauthorized
from app.core.responses import api_response
from app.database import get_db
from app.models.user import User
from app.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    TokenResponse,
    UserResponse,
)
from app.services.media import get_media_host
from app.services.uploads import has_upload, is_image_upload, store_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])
settings = get_settings()

MIN_PASSWORD_LENGTH = 6


def _set_token_cookies(response: JSONResponse, access_token: str, refresh_token: str) -> JSONResponse:
    opts = {"httponly": True, "secure": settings.cookie_secure, "samesite": "lax"}
    response.set_cookie(ACCESS_TOKEN_COOKIE, access_token, max_age=settings.access_token_expire_minutes * 60, **opts)
    response.set_cookie(REFRESH_TOKEN_COOKIE, refresh_token, max_age=settings.refresh_token_expire_minutes * 60, **opts)
    return response


def _clear_token_cookies(response: JSONResponse) -> JSONResponse:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
    return response


@router.post("/register")
def register(
    full_name: str = Form(""),
    email: str = Form(""),
    user_name: str = Form(""),
    password: str = Form(""),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    media=Depends(get_media_host),
):
    """Create an account. Avatar image is required, cover image optional."""
    if any(not (field or "").strip() for field in (full_name, email, user_name, password)):
        raise BadRequest("All fields are required")
    email = email.strip().lower()
    user_name = user_name.strip().lower()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    existing = db.query(User.id).filter(or_(User.email == email, User.user_name == user_name)).first()
    if existing:
        raise Conflict("User with this email or username already exists")
    if not has_upload(avatar):
        raise BadRequest("Avatar is required")
    if not is_image_upload(avatar) or (has_upload(cover_image) and not is_image_upload(cover_image)):
        raise BadRequest("Avatar and cover image must be images")

    avatar_asset = store_upload(media, avatar, "Avatar upload failed", error=BadRequest)
    cover_asset = None
    if has_upload(cover_image):
        try:
            cover_asset = store_upload(media, cover_image, "Cover image upload failed")
        except Exception:
            media.delete(avatar_asset.public_id, avatar_asset.kind)
            raise

    user = User(
        full_name=full_name.strip(),
        email=email,
        user_name=user_name,
        password=hash_password(password),
        avatar_url=avatar_asset.url,
        avatar_public_id=avatar_asset.public_id,
        cover_image_url=cover_asset.url if cover_asset else "",
        cover_image_public_id=cover_asset.public_id if cover_asset else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return api_response(UserResponse.model_validate(user), "User registered successfully", status.HTTP_201_CREATED)


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Login with email or user name and password."""
    if not (body.email or body.user_name):
        raise BadRequest("Email or username is required")
    q = db.query(User)
    if body.email:
        q = q.filter(func.lower(User.email) == body.email.strip().lower())
    else:
        q = q.filter(User.user_name == body.user_name.strip().lower())
    user = q.first()
    if not user or not verify_password(body.password, user.password):
        raise Unauthorized("Invalid credentials")
    access_token, refresh_token = issue_tokens(user)
    db.commit()
    db.refresh(user)
    data = LoginResponse(access_token=access_token, refresh_token=refresh_token, user=UserResponse.model_validate(user))
    return _set_token_cookies(api_response(data, "User logged in successfully"), access_token, refresh_token)


@router.post("/logout")
def logout(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user.refresh_token = None
    db.commit()
    return _clear_token_cookies(api_response({}, "User logged out successfully"))


@router.post("/refresh-token")
def refresh_token(
    request: Request,
    body: RefreshRequest | None = None,
    db: Session = Depends(get_db),
):
    """Rotate tokens. The refresh token must match the one stored on the user."""
    incoming = (body.refresh_token if body else None) or request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not incoming:
        raise Unauthorized("Refresh token is required")
    payload = decode_token(incoming, expected_type="refresh")
    if not payload:
        raise Unauthorized("Invalid or expired refresh token")
    user = db.query(User).filter(User.id == payload.sub).first()
    if not user or user.refresh_token != incoming:
        raise Unauthorized("Refresh token is expired or used")
    access_token, new_refresh = issue_tokens(user)
    db.commit()
    data = TokenResponse(access_token=access_token, refresh_token=new_refresh)
    return _set_token_cookies(api_response(data, "Access token refreshed"), access_token, new_refresh)


@router.post("/change-password")
def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not verify_password(body.old_password, user.password):
        raise BadRequest("Invalid old password")
    if len(body.new_password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    user.password = hash_password(body.new_password)
    db.commit()
    return api_response({}, "Password changed successfully")
