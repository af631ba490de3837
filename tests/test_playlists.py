"""
API tests for playlists.
"""
import uuid

import pytest

from app.models.playlist import Playlist, PlaylistVideo


@pytest.fixture
def playlist(test_db, alice):
    item = Playlist(owner_id=alice.id, name="Watch later", description="Queue")
    test_db.add(item)
    test_db.commit()
    test_db.refresh(item)
    return item


@pytest.mark.api
class TestPlaylistCrud:

    def test_create(self, client, alice, alice_headers):
        response = client.post("/api/playlists", json={"name": "Mix", "description": "Songs"}, headers=alice_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["owner_id"] == alice.id
        assert data["videos"] == []

    def test_create_requires_fields(self, client, alice_headers):
        response = client.post("/api/playlists", json={"name": "Mix"}, headers=alice_headers)
        assert response.status_code == 400

    def test_user_playlists_with_stats(self, client, test_db, alice, bob_headers, make_video, playlist):
        for views in (3, 4):
            video = make_video(alice, views=views)
            test_db.add(PlaylistVideo(playlist_id=playlist.id, video_id=video.id))
        test_db.commit()

        response = client.get(f"/api/playlists/user/{alice.id}", headers=bob_headers)

        [summary] = response.json()["data"]
        assert summary["video_count"] == 2
        assert summary["total_views"] == 7

    def test_user_without_playlists(self, client, bob, alice_headers):
        response = client.get(f"/api/playlists/user/{bob.id}", headers=alice_headers)
        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_get_playlist_detail(self, client, test_db, alice, bob, bob_headers, make_video, playlist):
        video = make_video(bob, "Bob's clip")
        test_db.add(PlaylistVideo(playlist_id=playlist.id, video_id=video.id))
        test_db.commit()

        data = client.get(f"/api/playlists/{playlist.id}", headers=bob_headers).json()["data"]

        assert data["owner"]["user_name"] == "alice"
        assert [v["title"] for v in data["videos"]] == ["Bob's clip"]
        assert data["videos"][0]["owner"]["user_name"] == "bob"

    def test_missing_playlist(self, client, alice_headers):
        assert client.get(f"/api/playlists/{uuid.uuid4()}", headers=alice_headers).status_code == 404

    def test_update_and_non_owner(self, client, playlist, alice_headers, bob_headers):
        body = {"name": "Later", "description": "Queue v2"}

        assert client.patch(f"/api/playlists/{playlist.id}", json=body, headers=bob_headers).status_code == 404
        response = client.patch(f"/api/playlists/{playlist.id}", json=body, headers=alice_headers)
        assert response.json()["data"]["name"] == "Later"

    def test_delete_removes_memberships(self, client, test_db, alice, alice_headers, bob_headers, make_video, playlist):
        playlist_id = playlist.id
        test_db.add(PlaylistVideo(playlist_id=playlist_id, video_id=make_video(alice).id))
        test_db.commit()

        assert client.delete(f"/api/playlists/{playlist_id}", headers=bob_headers).status_code == 404
        assert client.delete(f"/api/playlists/{playlist_id}", headers=alice_headers).status_code == 200
        assert test_db.query(Playlist).filter_by(id=playlist_id).count() == 0
        assert test_db.query(PlaylistVideo).count() == 0


@pytest.mark.api
class TestPlaylistMembership:

    def test_add_is_idempotent(self, client, alice, alice_headers, make_video, playlist):
        video = make_video(alice)

        first = client.patch(f"/api/playlists/add/{video.id}/{playlist.id}", headers=alice_headers)
        second = client.patch(f"/api/playlists/add/{video.id}/{playlist.id}", headers=alice_headers)

        assert first.status_code == 200
        assert first.json()["data"]["videos"] == [video.id]
        assert second.json()["data"]["videos"] == [video.id]

    def test_add_to_someone_elses_playlist(self, client, test_db, alice, bob_headers, make_video, playlist):
        video = make_video(alice)

        response = client.patch(f"/api/playlists/add/{video.id}/{playlist.id}", headers=bob_headers)

        assert response.status_code == 404
        assert test_db.query(PlaylistVideo).count() == 0

    def test_add_missing_video(self, client, alice_headers, playlist):
        response = client.patch(f"/api/playlists/add/{uuid.uuid4()}/{playlist.id}", headers=alice_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Video not found"

    def test_remove(self, client, test_db, alice, alice_headers, bob_headers, make_video, playlist):
        video = make_video(alice)
        test_db.add(PlaylistVideo(playlist_id=playlist.id, video_id=video.id))
        test_db.commit()

        assert client.patch(f"/api/playlists/remove/{video.id}/{playlist.id}", headers=bob_headers).status_code == 404
        response = client.patch(f"/api/playlists/remove/{video.id}/{playlist.id}", headers=alice_headers)
        assert response.status_code == 200
        assert response.json()["data"]["videos"] == []

        again = client.patch(f"/api/playlists/remove/{video.id}/{playlist.id}", headers=alice_headers)
        assert again.status_code == 404
