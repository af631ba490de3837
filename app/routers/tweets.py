from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import BadRequest
from app.core.responses import api_response
from app.database import get_db
from app.models.tweet import Tweet
from app.models.user import User
from app.repositories import cascades, projections
from app.repositories.ownership import delete_if_owner, update_if_owner
from app.schemas.tweet import TweetContent, TweetResponse
from app.utils.ids import parse_id

router = APIRouter(prefix="/api/tweets", tags=["tweets"])


def _content(body: TweetContent) -> str:
    content = (body.content or "").strip()
    if not content:
        raise BadRequest("Tweet content is required")
    return content


@router.post("")
def create_tweet(
    body: TweetContent,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tweet = Tweet(owner_id=user.id, content=_content(body))
    db.add(tweet)
    db.commit()
    db.refresh(tweet)
    return api_response(TweetResponse.model_validate(tweet), "Tweet created successfully", status.HTTP_201_CREATED)


@router.get("/user/{user_id}")
def get_user_tweets(
    user_id: str,
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_id = parse_id(user_id, "user ID")
    return api_response(projections.user_tweets(db, user_id), "Tweets fetched successfully")


@router.patch("/{tweet_id}")
def update_tweet(
    tweet_id: str,
    body: TweetContent,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tweet_id = parse_id(tweet_id, "tweet ID")
    content = _content(body)
    tweet = update_if_owner(db, Tweet, tweet_id, user.id, {"content": content}, label="Tweet")
    return api_response(TweetResponse.model_validate(tweet), "Tweet updated successfully")


@router.delete("/{tweet_id}")
def delete_tweet(
    tweet_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tweet_id = parse_id(tweet_id, "tweet ID")
    delete_if_owner(db, Tweet, tweet_id, user.id, label="Tweet", cascade=cascades.purge_tweet)
    return api_response({}, "Tweet deleted successfully")
