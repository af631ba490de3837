import logging
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.errors import InternalError
from app.core.responses import api_response
from app.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/healthcheck", tags=["healthcheck"])


@router.get("")
def healthcheck(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database health ping failed: %s", e)
        raise InternalError("Database unavailable")
    return api_response({"status": "ok"}, "OK")
