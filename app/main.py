import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.config import get_settings
from app.core.errors import register_exception_handlers
from app.database import init_db
from app.routers import auth, comments, dashboard, health, likes, playlists, subscriptions, tweets, users, videos
from app.services.media import media_root

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        init_db()
        logger.info("Database tables ensured")
    yield


app = FastAPI(title="VidTube API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(videos.router)
app.include_router(comments.router)
app.include_router(likes.router)
app.include_router(tweets.router)
app.include_router(subscriptions.router)
app.include_router(playlists.router)
app.include_router(dashboard.router)

# Assets stored by the local media host
app.mount(settings.media_base_url, StaticFiles(directory=media_root(), check_dir=False), name="media")


@app.get("/")
def root():
    return {"message": "VidTube API", "docs": "/docs"}
