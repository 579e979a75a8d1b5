from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.api.deps import get_episode_provider
from app.database import get_db
from app.models.parse_result import EpisodeParseResult
from app.models.quality import Quality
from app.models.series import Series
from app.services.episode_provider import EpisodeProvider
from app.services.release_parser import ReleaseParser

router = APIRouter(prefix="/api", tags=["episodes"])


class EpisodeResponse(BaseModel):
    id: int
    tvdb_episode_id: Optional[int]
    series_id: int
    season_id: Optional[int]
    season_number: int
    episode_number: int
    title: str
    overview: Optional[str]
    air_date: Optional[date]
    language: Optional[str]
    episode_file_id: Optional[int]

    model_config = ConfigDict(from_attributes=True)


class EpisodeUpdate(BaseModel):
    title: Optional[str] = None
    overview: Optional[str] = None
    air_date: Optional[date] = None
    language: Optional[str] = None
    episode_file_id: Optional[int] = None


class ParseResultRequest(BaseModel):
    series_id: int
    season_number: int
    episodes: List[int] = Field(min_length=1)
    quality: Quality = Quality.UNKNOWN
    proper: bool = False


class ReleaseCheckRequest(BaseModel):
    title: str


@router.get("/episodes/{episode_id}", response_model=EpisodeResponse)
def get_episode(episode_id: int, provider: EpisodeProvider = Depends(get_episode_provider)):
    """Episode Details"""
    episode = provider.get_episode(episode_id)
    if not episode:
        raise HTTPException(status_code=404, detail="Episode not found")
    return episode


@router.put("/episodes/{episode_id}", response_model=EpisodeResponse)
def update_episode(
    episode_id: int,
    changes: EpisodeUpdate,
    provider: EpisodeProvider = Depends(get_episode_provider)
):
    """Episode bearbeiten"""
    episode = provider.get_episode(episode_id)
    if not episode:
        raise HTTPException(status_code=404, detail="Episode not found")

    for key, value in changes.model_dump(exclude_unset=True).items():
        setattr(episode, key, value)
    return provider.update_episode(episode)


@router.delete("/episodes/{episode_id}")
def delete_episode(episode_id: int, provider: EpisodeProvider = Depends(get_episode_provider)):
    """Episode löschen"""
    if not provider.delete_episode(episode_id):
        raise HTTPException(status_code=404, detail="Episode not found")
    return {"deleted": episode_id}


@router.get("/series/{series_id}/episodes", response_model=List[EpisodeResponse])
def list_series_episodes(series_id: int, provider: EpisodeProvider = Depends(get_episode_provider)):
    return provider.get_episodes_by_series(series_id)


@router.get("/seasons/{season_id}/episodes", response_model=List[EpisodeResponse])
def list_season_episodes(season_id: int, provider: EpisodeProvider = Depends(get_episode_provider)):
    return provider.get_episodes_by_season(season_id)


@router.post("/episodes/needed")
def check_needed(
    report: ParseResultRequest,
    db: Session = Depends(get_db),
    provider: EpisodeProvider = Depends(get_episode_provider)
):
    """Prüft ob ein Release heruntergeladen werden soll"""
    if not db.get(Series, report.series_id):
        raise HTTPException(status_code=404, detail="Series not found")

    parse_result = EpisodeParseResult(**report.model_dump())
    return {"needed": provider.is_needed(parse_result)}


@router.post("/releases/check")
def check_release(
    release: ReleaseCheckRequest,
    db: Session = Depends(get_db),
    provider: EpisodeProvider = Depends(get_episode_provider)
):
    """Release-Titel parsen und prüfen"""
    parser = ReleaseParser(db)
    parsed = parser.parse(release.title)
    if parsed is None:
        raise HTTPException(status_code=422, detail="Could not parse release title")

    parse_result = parser.attach_series(parsed, release.title)
    if parse_result is None:
        raise HTTPException(status_code=404, detail=f"Series '{parsed.series_title}' not found")

    return {
        "series_id": parse_result.series_id,
        "season_number": parse_result.season_number,
        "episodes": parse_result.episodes,
        "quality": parse_result.quality.name,
        "proper": parse_result.proper,
        "needed": provider.is_needed(parse_result),
    }
