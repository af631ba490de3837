"""
Media delegate: stores binary assets on a media host and returns URL + public id.
The bundled LocalMediaHost copies files into a media folder served at settings.media_base_url
and probes video duration with ffprobe. The local temp file is removed whether storing succeeds or not.
"""
import logging
import mimetypes
import shutil
import subprocess
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from app.config import get_settings

logger = logging.getLogger(__name__)

MEDIA_KINDS = ("video", "image", "raw")


class MediaUploadError(Exception):
    """The media host could not store an asset."""


@dataclass
class MediaAsset:
    url: str
    public_id: str
    kind: str  # "video" | "image" | "raw"
    duration: float | None = None


# Content types that say nothing about the payload; the file extension decides instead
GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream", "application/unknown"}


def media_kind(path: Path, content_type: str | None = None) -> str:
    ct = (content_type or "").split(";")[0].strip().lower()
    if ct in GENERIC_CONTENT_TYPES:
        ct = mimetypes.guess_type(path.name)[0] or ""
    if ct.startswith("video/"):
        return "video"
    if ct.startswith("image/"):
        return "image"
    return "raw"


def probe_duration(path: Path) -> float | None:
    """Duration in seconds via ffprobe. None if ffprobe is missing or fails."""
    cmd = [
        "ffprobe",
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(path),
    ]
    try:
        result = subprocess.run(cmd, check=True, capture_output=True, timeout=60)
        return float(result.stdout.decode().strip())
    except subprocess.CalledProcessError as e:
        logger.warning("ffprobe failed for %s: %s", path, e.stderr and e.stderr.decode() or e)
        return None
    except subprocess.TimeoutExpired:
        logger.warning("ffprobe timed out for %s", path)
        return None
    except FileNotFoundError:
        logger.warning("ffprobe not found; install FFmpeg to record video durations")
        return None
    except ValueError:
        return None


def _remove_temp(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove temp upload %s: %s", path, e)


class LocalMediaHost:
    def __init__(self, root: Path, base_url: str, probe: bool = True):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.probe = probe

    def _asset_path(self, public_id: str, kind: str) -> Path | None:
        if kind not in MEDIA_KINDS:
            return None
        base = (self.root / kind).resolve()
        if not base.is_dir():
            return None
        for path in base.iterdir():
            if path.is_file() and path.stem == public_id:
                return path
        return None

    def store(self, local_path: Path, content_type: str | None = None) -> MediaAsset:
        """Move local_path onto the host. Raises MediaUploadError; temp file is gone either way."""
        local_path = Path(local_path)
        try:
            if not local_path.is_file():
                raise MediaUploadError(f"Local file not found: {local_path.name}")
            kind = media_kind(local_path, content_type)
            public_id = uuid.uuid4().hex
            target_dir = self.root / kind
            target_dir.mkdir(parents=True, exist_ok=True)
            target = target_dir / f"{public_id}{local_path.suffix.lower()}"
            try:
                shutil.copyfile(local_path, target)
            except OSError as e:
                raise MediaUploadError(str(e)) from e
            duration = probe_duration(target) if kind == "video" and self.probe else None
            logger.info("Stored %s asset %s", kind, public_id)
            return MediaAsset(
                url=f"{self.base_url}/{kind}/{target.name}",
                public_id=public_id,
                kind=kind,
                duration=duration,
            )
        finally:
            _remove_temp(local_path)

    def delete(self, public_id: str | None, kind: str = "image") -> bool:
        """Remove an asset. Failures are logged, never raised."""
        if not public_id:
            return False
        path = self._asset_path(public_id, kind)
        if path is None:
            logger.warning("Media asset %s (%s) not found on host", public_id, kind)
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error("Deleting media asset %s failed: %s", public_id, e)
            return False
        logger.info("Deleted %s asset %s", kind, public_id)
        return True


def media_root() -> Path:
    settings = get_settings()
    if settings.media_dir:
        return Path(settings.media_dir)
    return Path(__file__).resolve().parent.parent.parent / "uploads" / "media"


@lru_cache
def get_media_host() -> LocalMediaHost:
    """FastAPI dependency; tests override it with a host rooted in a tmp dir."""
    return LocalMediaHost(media_root(), get_settings().media_base_url)
