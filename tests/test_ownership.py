"""
Tests for ownership-scoped update/delete: non-owners get the same NotFound as missing ids
and nothing changes.
"""
import uuid

import pytest
from sqlalchemy import not_

from app.core.errors import NotFound
from app.models.comment import Comment
from app.models.like import Like
from app.models.tweet import Tweet
from app.models.video import Video
from app.repositories import cascades
from app.repositories.ownership import delete_if_owner, find_owned, update_if_owner


@pytest.mark.unit
class TestUpdateIfOwner:

    def test_owner_updates(self, test_db, alice, make_tweet):
        tweet = make_tweet(alice, "before")

        updated = update_if_owner(test_db, Tweet, tweet.id, alice.id, {"content": "after"}, label="Tweet")

        assert updated.content == "after"

    def test_non_owner_cannot_update(self, test_db, alice, bob, make_tweet):
        tweet = make_tweet(alice, "before")
        tweet_id = tweet.id

        with pytest.raises(NotFound) as exc:
            update_if_owner(test_db, Tweet, tweet_id, bob.id, {"content": "hijacked"}, label="Tweet")

        assert exc.value.detail == "Tweet not found or you are not the owner"
        test_db.expire_all()
        assert test_db.query(Tweet).filter(Tweet.id == tweet_id).one().content == "before"

    def test_missing_and_foreign_look_identical(self, test_db, alice, bob, make_tweet):
        tweet = make_tweet(alice)

        with pytest.raises(NotFound) as foreign:
            update_if_owner(test_db, Tweet, tweet.id, bob.id, {"content": "x"}, label="Tweet")
        with pytest.raises(NotFound) as missing:
            update_if_owner(test_db, Tweet, str(uuid.uuid4()), bob.id, {"content": "x"}, label="Tweet")

        assert foreign.value.detail == missing.value.detail
        assert foreign.value.status_code == missing.value.status_code == 404

    def test_sql_expression_values(self, test_db, alice, make_video):
        video = make_video(alice)

        flipped = update_if_owner(test_db, Video, video.id, alice.id, {"is_published": not_(Video.is_published)})
        assert flipped.is_published is False
        flipped = update_if_owner(test_db, Video, video.id, alice.id, {"is_published": not_(Video.is_published)})
        assert flipped.is_published is True

    def test_find_owned_masks_too(self, test_db, alice, bob, make_tweet):
        tweet = make_tweet(alice)
        assert find_owned(test_db, Tweet, tweet.id, alice.id).id == tweet.id
        with pytest.raises(NotFound):
            find_owned(test_db, Tweet, tweet.id, bob.id)


@pytest.mark.unit
class TestDeleteIfOwner:

    def test_non_owner_cannot_delete(self, test_db, alice, bob, make_tweet):
        tweet = make_tweet(alice)
        tweet_id = tweet.id

        with pytest.raises(NotFound):
            delete_if_owner(test_db, Tweet, tweet_id, bob.id, label="Tweet")

        assert test_db.query(Tweet).filter(Tweet.id == tweet_id).count() == 1

    def test_owner_delete_returns_row_and_runs_cascade(self, test_db, alice, bob, make_video, make_comment):
        comment = make_comment(make_video(alice), alice, "bye")
        comment_id = comment.id
        test_db.add(Like(comment_id=comment_id, liked_by_id=bob.id))
        test_db.add(Like(comment_id=comment_id, liked_by_id=alice.id))
        test_db.commit()

        deleted = delete_if_owner(
            test_db, Comment, comment_id, alice.id, label="Comment", cascade=cascades.purge_comment,
        )

        assert deleted["id"] == comment_id
        assert deleted["content"] == "bye"
        assert test_db.query(Comment).filter(Comment.id == comment_id).count() == 0
        assert test_db.query(Like).filter(Like.comment_id == comment_id).count() == 0
