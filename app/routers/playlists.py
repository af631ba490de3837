"""Playlists: CRUD plus set-like add/remove of videos. Mutations are ownership-scoped."""
from datetime import datetime
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import BadRequest, NotFound
from app.core.responses import api_response
from app.database import get_db
from app.models.playlist import Playlist, PlaylistVideo
from app.models.user import User
from app.models.video import Video
from app.repositories import projections
from app.repositories.ownership import delete_if_owner, update_if_owner
from app.schemas.playlist import PlaylistFields
from app.utils.ids import parse_id

router = APIRouter(prefix="/api/playlists", tags=["playlists"])


def _fields(body: PlaylistFields) -> tuple[str, str]:
    name = (body.name or "").strip()
    description = (body.description or "").strip()
    if not name or not description:
        raise BadRequest("Name and description are required")
    return name, description


def _purge_memberships(db: Session, playlist: dict) -> None:
    db.query(PlaylistVideo).filter(PlaylistVideo.playlist_id == playlist["id"]).delete(synchronize_session=False)


@router.post("")
def create_playlist(
    body: PlaylistFields,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    name, description = _fields(body)
    playlist = Playlist(owner_id=user.id, name=name, description=description)
    db.add(playlist)
    db.commit()
    db.refresh(playlist)
    return api_response(projections.playlist_response(db, playlist), "Playlist created successfully", status.HTTP_201_CREATED)


@router.get("/user/{user_id}")
def get_user_playlists(
    user_id: str,
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Playlists of a user with video count and total views."""
    user_id = parse_id(user_id, "user ID")
    return api_response(projections.playlist_summaries(db, user_id), "Playlists fetched successfully")


@router.get("/{playlist_id}")
def get_playlist(
    playlist_id: str,
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist_id = parse_id(playlist_id, "playlist ID")
    playlist = db.query(Playlist).filter(Playlist.id == playlist_id).first()
    if not playlist:
        raise NotFound("Playlist not found")
    return api_response(projections.playlist_detail(db, playlist), "Playlist fetched successfully")


@router.patch("/add/{video_id}/{playlist_id}")
def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Set union: adding a video already in the playlist is a no-op."""
    playlist_id = parse_id(playlist_id, "playlist ID")
    video_id = parse_id(video_id, "video ID")
    if db.query(Video.id).filter(Video.id == video_id).first() is None:
        raise NotFound("Video not found")
    # Ownership guard and updated_at bump in one statement
    playlist = update_if_owner(db, Playlist, playlist_id, user.id, {"updated_at": datetime.utcnow()}, label="Playlist")
    present = (
        db.query(PlaylistVideo.id)
        .filter(PlaylistVideo.playlist_id == playlist_id, PlaylistVideo.video_id == video_id)
        .first()
    )
    if not present:
        db.add(PlaylistVideo(playlist_id=playlist_id, video_id=video_id))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
    return api_response(projections.playlist_response(db, playlist), "Video added to playlist successfully")


@router.patch("/remove/{video_id}/{playlist_id}")
def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist_id = parse_id(playlist_id, "playlist ID")
    video_id = parse_id(video_id, "video ID")
    owned = select(Playlist.id).where(Playlist.id == playlist_id, Playlist.owner_id == user.id)
    removed = (
        db.query(PlaylistVideo)
        .filter(
            PlaylistVideo.playlist_id == playlist_id,
            PlaylistVideo.video_id == video_id,
            PlaylistVideo.playlist_id.in_(owned),
        )
        .delete(synchronize_session=False)
    )
    if not removed:
        db.rollback()
        raise NotFound("Playlist not found, video not in playlist, or you are not the owner")
    playlist = update_if_owner(db, Playlist, playlist_id, user.id, {"updated_at": datetime.utcnow()}, label="Playlist")
    return api_response(projections.playlist_response(db, playlist), "Video removed from playlist successfully")


@router.patch("/{playlist_id}")
def update_playlist(
    playlist_id: str,
    body: PlaylistFields,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist_id = parse_id(playlist_id, "playlist ID")
    name, description = _fields(body)
    playlist = update_if_owner(
        db, Playlist, playlist_id, user.id, {"name": name, "description": description}, label="Playlist",
    )
    return api_response(projections.playlist_response(db, playlist), "Playlist updated successfully")


@router.delete("/{playlist_id}")
def delete_playlist(
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist_id = parse_id(playlist_id, "playlist ID")
    delete_if_owner(db, Playlist, playlist_id, user.id, label="Playlist", cascade=_purge_memberships)
    return api_response(None, "Playlist deleted successfully")
