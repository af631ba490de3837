from datetime import datetime, timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.config import get_settings
from app.core.errors import Unauthorized
from app.database import get_db
from app.models.user import User
from app.schemas.user import TokenPayload

settings = get_settings()
security = HTTPBearer(auto_error=False)

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"

# Use Argon2 for password hashing
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)

def create_access_token(user_id: str, email: str, user_name: str | None = None) -> str:
    expire = datetime.utcnow() + timedelta(
        minutes=settings.access_token_expire_minutes
    )
    payload = {
        "sub": user_id,
        "email": email,
        "user_name": user_name,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)

def create_refresh_token(user_id: str) -> str:
    expire = datetime.utcnow() + timedelta(
        minutes=settings.refresh_token_expire_minutes
    )
    payload = {
        "sub": user_id,
        "exp": expire,
        "type": "refresh",
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)

def decode_token(token: str, expected_type: str = "access") -> TokenPayload | None:
    """Payload when the signature, expiry and token type check out, else None."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        data = TokenPayload(
            sub=payload["sub"],
            exp=payload["exp"],
            type=payload.get("type", "access"),
            email=payload.get("email"),
            user_name=payload.get("user_name"),
        )
    except (JWTError, KeyError, ValueError):
        return None
    if data.type != expected_type:
        return None
    return data

def issue_tokens(user: User) -> tuple[str, str]:
    """New access + refresh pair; the refresh token is stored on the user (caller commits)."""
    access = create_access_token(user.id, user.email, user.user_name)
    refresh = create_refresh_token(user.id)
    user.refresh_token = refresh
    return access, refresh

def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Acting principal from the Bearer header, falling back to the access_token cookie."""
    token = credentials.credentials if credentials else request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise Unauthorized("Not authenticated")

    payload = decode_token(token)

    if not payload:
        raise Unauthorized("Invalid or expired token")

    user = db.query(User).filter(User.id == payload.sub).first()

    if not user:
        raise Unauthorized("User not found")

    return user
