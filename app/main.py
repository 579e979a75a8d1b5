from fastapi import FastAPI
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from app import __version__
from app.utils.logger import setup_logging, change_log_level_runtime
from app.database import SessionLocal, init_db
from app.startup import init_config, get_config_value
from app.api import episodes, series


logger = logging.getLogger(__name__)


def get_log_level_from_db():
    """Lese Log-Level aus Datenbank, mit Fallback"""
    db = SessionLocal()
    try:
        return str(get_config_value(db, "log_level", "INFO")).upper()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("INFO")

    logger.info("Starting EpisodArr...")
    init_db()
    init_config()
    change_log_level_runtime(get_log_level_from_db())

    yield

    logger.info("Shutting down EpisodArr...")


app = FastAPI(
    title="EpisodArr - Episode Catalog & Release Decisions",
    description="Episoden-Katalog mit TVDB-Abgleich und Upgrade-Entscheidungen",
    version=__version__,
    lifespan=lifespan
)


app.include_router(episodes.router)
app.include_router(series.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": __version__}


@app.get("/")
async def root():
    return JSONResponse({
        "app": "EpisodArr",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
