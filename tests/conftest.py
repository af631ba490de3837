"""
Pytest configuration and shared fixtures.
Each test gets a fresh in-memory SQLite database and a media host rooted in tmp_path.
"""
from typing import Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401 - register tables on Base
from app.auth import create_access_token, hash_password
from app.config import get_settings
from app.database import Base, get_db
from app.main import app
from app.models.comment import Comment
from app.models.tweet import Tweet
from app.models.user import User
from app.models.video import Video
from app.repositories.comments import next_seq
from app.services.media import LocalMediaHost, get_media_host

SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
PASSWORD = "testpassword123"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def media_host(tmp_path) -> LocalMediaHost:
    return LocalMediaHost(tmp_path / "media", "/media", probe=False)


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    path = tmp_path / "tmp"
    monkeypatch.setattr(get_settings(), "temp_upload_dir", str(path))
    return path


@pytest.fixture(scope="function")
def client(test_db: Session, media_host: LocalMediaHost, temp_dir) -> Generator[TestClient, None, None]:
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_host] = lambda: media_host

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(test_db: Session) -> Callable[..., User]:
    def _make(user_name: str, **fields) -> User:
        user = User(
            user_name=user_name,
            email=fields.pop("email", f"{user_name}@example.com"),
            full_name=fields.pop("full_name", user_name.title()),
            password=hash_password(fields.pop("password", PASSWORD)),
            avatar_url=f"/media/image/{user_name}.png",
            **fields,
        )
        test_db.add(user)
        test_db.commit()
        test_db.refresh(user)
        return user

    return _make


@pytest.fixture
def alice(make_user) -> User:
    return make_user("alice")


@pytest.fixture
def bob(make_user) -> User:
    return make_user("bob")


def headers_for(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.user_name)}"}


@pytest.fixture
def auth_for() -> Callable[[User], Dict[str, str]]:
    """Factory: Bearer headers for any user."""
    return headers_for


@pytest.fixture
def alice_headers(alice: User) -> Dict[str, str]:
    return headers_for(alice)


@pytest.fixture
def bob_headers(bob: User) -> Dict[str, str]:
    return headers_for(bob)


@pytest.fixture
def make_video(test_db: Session) -> Callable[..., Video]:
    def _make(owner: User, title: str = "A video", **fields) -> Video:
        video = Video(
            owner_id=owner.id,
            title=title,
            description=fields.pop("description", f"About {title}"),
            video_file_url="/media/video/x.mp4",
            thumbnail_url="/media/image/x.png",
            **fields,
        )
        test_db.add(video)
        test_db.commit()
        test_db.refresh(video)
        return video

    return _make


@pytest.fixture
def make_comment(test_db: Session) -> Callable[..., Comment]:
    def _make(video: Video, owner: User, content: str = "Nice", **fields) -> Comment:
        seq = fields.pop("seq", None) or next_seq(test_db, video.id)
        comment = Comment(video_id=video.id, owner_id=owner.id, content=content, seq=seq, **fields)
        test_db.add(comment)
        test_db.commit()
        test_db.refresh(comment)
        return comment

    return _make


@pytest.fixture
def make_tweet(test_db: Session) -> Callable[..., Tweet]:
    def _make(owner: User, content: str = "Hello") -> Tweet:
        tweet = Tweet(owner_id=owner.id, content=content)
        test_db.add(tweet)
        test_db.commit()
        test_db.refresh(tweet)
        return tweet

    return _make

@pytest.fixture
def password() -> str:
    """Plain-text password of every user made by make_user."""
    return PASSWORD


@pytest.fixture
def png_file():
    return ("a.png", PNG_BYTES, "image/png")


@pytest.fixture
def mp4_file():
    return ("clip.mp4", MP4_BYTES, "video/mp4")
