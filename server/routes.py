import logging
import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

import config
from clock.slots import PoemCache
from db.database import Database

logger = logging.getLogger(__name__)


def create_router(db: Database, cache: PoemCache, model: str,
                  retention_hours: int) -> APIRouter:
    router = APIRouter()

    @router.get("/current-poem")
    def get_current_poem():
        current = cache.current
        if current.is_empty:
            raise HTTPException(503, "Poem not ready yet, the server is still initializing")
        return {
            "poem": current.text,
            "timeString": current.time_label,
            "timestamp": current.timestamp,
        }

    @router.get("/poem-history")
    def get_poem_history(limit: int = config.HISTORY_DEFAULT_LIMIT):
        if limit < 1:
            raise HTTPException(400, "limit must be a positive integer")
        try:
            poems = db.list_recent(limit)
        except sqlite3.Error as e:
            logger.error("Error fetching poem history: %s", e)
            raise HTTPException(500, f"Failed to fetch poem history: {e}")
        return {
            "poems": [p.to_dict() for p in poems],
            "count": len(poems),
            "retentionHours": retention_hours,
        }

    @router.get("/health")
    def health():
        return {
            "status": "ok",
            "model": model,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "currentPoem": cache.current.time_label or "Initializing...",
            "retentionHours": retention_hours,
        }

    return router
