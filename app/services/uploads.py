"""Incoming multipart files are spooled to a temp folder, then handed to the media host."""
import logging
import uuid
from pathlib import Path
from fastapi import UploadFile
from app.config import get_settings
from app.core.errors import BadRequest, InternalError
from app.services.media import MediaUploadError

logger = logging.getLogger(__name__)

VIDEO_CONTENT_TYPES = {"video/mp4", "video/webm", "video/ogg", "video/quicktime"}
VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg", ".mov")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp")
CHUNK_SIZE = 1024 * 1024  # 1 MB


def temp_upload_dir() -> Path:
    settings = get_settings()
    if settings.temp_upload_dir:
        return Path(settings.temp_upload_dir)
    return Path(__file__).resolve().parent.parent.parent / "uploads" / "tmp"


def content_type_of(file: UploadFile) -> str:
    return (file.content_type or "").split(";")[0].strip().lower()


def is_video_upload(file: UploadFile) -> bool:
    ct = content_type_of(file)
    return ct in VIDEO_CONTENT_TYPES or (file.filename or "").lower().endswith(VIDEO_EXTENSIONS)


def is_image_upload(file: UploadFile) -> bool:
    return content_type_of(file).startswith("image/") or (file.filename or "").lower().endswith(IMAGE_EXTENSIONS)


def has_upload(file: UploadFile | None) -> bool:
    return file is not None and bool(file.filename)


def save_temp_upload(file: UploadFile) -> Path:
    """Write the upload to a uniquely named temp file. The media host removes it after storing."""
    if not has_upload(file):
        raise BadRequest("File is required")
    temp_upload_dir().mkdir(parents=True, exist_ok=True)
    ext = Path(file.filename or "upload").suffix.lower()
    if len(ext) > 10:
        ext = ""
    path = temp_upload_dir() / f"{uuid.uuid4().hex}{ext}"
    try:
        with path.open("wb") as f:
            while chunk := file.file.read(CHUNK_SIZE):
                f.write(chunk)
    except OSError as e:
        path.unlink(missing_ok=True)
        logger.error("Spooling upload %s failed: %s", file.filename, e)
        raise InternalError("Failed to receive uploaded file") from e
    return path


def store_upload(media, file: UploadFile, failure_message: str = "Failed to upload file", error=InternalError):
    """Spool the upload and store it on the media host. MediaUploadError -> `error` (InternalError by default)."""
    path = save_temp_upload(file)
    try:
        return media.store(path, content_type_of(file))
    except MediaUploadError as e:
        logger.error("Media upload failed for %s: %s", file.filename, e)
        raise error(failure_message) from e
