import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db

logger = logging.getLogger("todays_meal.health")

router = APIRouter()


@router.get("/health")
async def health(request: Request, db: Session = Depends(get_db)):
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.warning(f"Health check database probe failed: {e}")

    pipeline = getattr(request.app.state, "pipeline", None)
    llm = pipeline.generator.llm if pipeline else None
    return {
        "ok": True,
        "db_ok": db_ok,
        "ai_mode": getattr(request.app.state, "ai_mode", None),
        "model": getattr(llm, "model", None),
        "last_llm_error": getattr(llm, "last_error", None),
    }
