from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

import config
from server.routes import create_router


def create_app(db, cache, model: str = config.OPENROUTER_MODEL,
               retention_hours: int = config.POEM_RETENTION_HOURS) -> FastAPI:
    app = FastAPI(title="Poem Clock", version="0.1.0")

    router = create_router(db, cache, model, retention_hours)
    app.include_router(router, prefix="/api")

    app.mount("/", StaticFiles(directory=str(config.STATIC_DIR), html=True), name="static")

    return app
