from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.episode_provider import EpisodeProvider
from app.services.episode_store import EpisodeStore
from app.services.season_provider import SeasonProvider
from app.services.tvdb_client import TVDBClient
from app.startup import get_config_value


def get_metadata_source(db: Session = Depends(get_db)):
    """TVDB Client aus der Config, ein Client pro Request"""
    api_key = get_config_value(db, "tvdb_api_key")
    if not api_key:
        raise HTTPException(status_code=400, detail="TVDB API key not configured")

    client = TVDBClient(api_key, base_url=get_config_value(db, "tvdb_base_url"))
    try:
        yield client
    finally:
        client.close()


def get_episode_provider(db: Session = Depends(get_db)) -> EpisodeProvider:
    return EpisodeProvider(EpisodeStore(db), seasons=SeasonProvider(db))
