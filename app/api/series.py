import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_metadata_source
from app.database import get_db
from app.models.series import Series
from app.services.episode_provider import EpisodeProvider
from app.services.episode_store import EpisodeStore
from app.services.season_provider import SeasonProvider
from app.services.tvdb_client import TVDBClient, TVDBError


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/series", tags=["series"])


@router.post("/{series_id}/refresh")
def refresh_series(
    series_id: int,
    db: Session = Depends(get_db),
    tvdb: TVDBClient = Depends(get_metadata_source)
):
    """Episoden einer Serie von TVDB aktualisieren"""
    if not db.get(Series, series_id):
        raise HTTPException(status_code=404, detail="Series not found")

    provider = EpisodeProvider(EpisodeStore(db), seasons=SeasonProvider(db), metadata=tvdb)
    try:
        result = provider.refresh_episode_info(series_id)
    except (TVDBError, httpx.HTTPError) as e:
        logger.error(f"✗ TVDB refresh failed for series {series_id}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "series_id": result.series_id,
        "successful": result.successful,
        "failed": result.failed,
        "inserted": result.inserted,
        "updated": result.updated,
    }
