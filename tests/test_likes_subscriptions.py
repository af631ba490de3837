"""
API tests for like toggles, liked videos and subscriptions.
"""
import uuid

import pytest

from app.models.subscription import Subscription


@pytest.mark.api
class TestLikeToggles:

    def test_video_like_round_trip(self, client, alice, bob_headers, make_video):
        video = make_video(alice)

        liked = client.post(f"/api/likes/toggle/v/{video.id}", headers=bob_headers)
        unliked = client.post(f"/api/likes/toggle/v/{video.id}", headers=bob_headers)

        assert liked.status_code == 200
        assert liked.json()["data"] == {"active": True}
        assert liked.json()["message"] == "Video liked successfully"
        assert unliked.json()["data"] == {"active": False}
        assert unliked.json()["message"] == "Video unliked successfully"

    def test_comment_and_tweet_likes(self, client, alice, bob_headers, make_video, make_comment, make_tweet):
        comment = make_comment(make_video(alice), alice)
        tweet = make_tweet(alice)

        assert client.post(f"/api/likes/toggle/c/{comment.id}", headers=bob_headers).json()["data"]["active"] is True
        assert client.post(f"/api/likes/toggle/t/{tweet.id}", headers=bob_headers).json()["data"]["active"] is True

    def test_unpublished_video_is_forbidden(self, client, alice, bob_headers, make_video):
        video = make_video(alice, is_published=False)
        response = client.post(f"/api/likes/toggle/v/{video.id}", headers=bob_headers)
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_missing_targets(self, client, bob_headers):
        missing = str(uuid.uuid4())
        for path in ("v", "c", "t"):
            assert client.post(f"/api/likes/toggle/{path}/{missing}", headers=bob_headers).status_code == 404
        assert client.post("/api/likes/toggle/v/nope", headers=bob_headers).status_code == 400

    def test_requires_auth(self, client, alice, make_video):
        video = make_video(alice)
        assert client.post(f"/api/likes/toggle/v/{video.id}").status_code == 401


@pytest.mark.api
class TestLikedVideos:

    def test_liked_videos_newest_first(self, client, alice, bob_headers, make_video):
        older = make_video(alice, "Older")
        newer = make_video(alice, "Newer")
        client.post(f"/api/likes/toggle/v/{older.id}", headers=bob_headers)
        client.post(f"/api/likes/toggle/v/{newer.id}", headers=bob_headers)

        response = client.get("/api/likes/videos", headers=bob_headers)

        items = response.json()["data"]
        assert [i["video"]["title"] for i in items] == ["Newer", "Older"]
        assert items[0]["video"]["owner"]["user_name"] == "alice"

    def test_no_liked_videos(self, client, bob_headers):
        response = client.get("/api/likes/videos", headers=bob_headers)
        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["message"] == "No liked videos found"


@pytest.mark.api
class TestSubscriptions:

    def test_toggle_subscription(self, client, test_db, alice, bob, bob_headers):
        on = client.post(f"/api/subscriptions/c/{alice.id}", headers=bob_headers)
        assert on.status_code == 200
        assert on.json()["data"] == {"active": True}
        assert test_db.query(Subscription).filter_by(subscriber_id=bob.id, channel_id=alice.id).count() == 1

        off = client.post(f"/api/subscriptions/c/{alice.id}", headers=bob_headers)
        assert off.json()["data"] == {"active": False}
        assert off.json()["message"] == "Unsubscribed successfully"
        assert test_db.query(Subscription).count() == 0

    def test_cannot_subscribe_to_self(self, client, alice, alice_headers):
        response = client.post(f"/api/subscriptions/c/{alice.id}", headers=alice_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "You cannot subscribe to yourself"

    def test_unknown_channel(self, client, bob_headers):
        response = client.post(f"/api/subscriptions/c/{uuid.uuid4()}", headers=bob_headers)
        assert response.status_code == 404

    def test_channel_subscribers(self, client, alice, bob, make_user, auth_for):
        carol = make_user("carol")
        for user in (bob, carol):
            client.post(f"/api/subscriptions/c/{alice.id}", headers=auth_for(user))

        response = client.get(f"/api/subscriptions/c/{alice.id}", headers=auth_for(bob))

        names = sorted(s["subscriber"]["user_name"] for s in response.json()["data"])
        assert names == ["bob", "carol"]

    def test_subscribed_channels_only_for_self(self, client, alice, bob, bob_headers, alice_headers):
        client.post(f"/api/subscriptions/c/{alice.id}", headers=bob_headers)

        mine = client.get(f"/api/subscriptions/u/{bob.id}", headers=bob_headers)
        assert [s["channel"]["id"] for s in mine.json()["data"]] == [alice.id]

        assert client.get(f"/api/subscriptions/u/{bob.id}", headers=alice_headers).status_code == 403
