"""Shared test fixtures for EpisodArr."""

import os

# In-Memory SQLite, muss vor dem ersten Import von app.database gesetzt sein
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date
from typing import Optional

import pytest

from app.database import Base, SessionLocal, engine, init_db
from app.models.episode import Episode
from app.models.episode_file import EpisodeFile
from app.models.quality import Quality
from app.models.quality_profile import QualityProfile
from app.models.series import Series


@pytest.fixture
def db():
    """Fresh schema per test."""
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def profile(db) -> QualityProfile:
    profile = QualityProfile(name="HD", cutoff=Quality.HDTV)
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def series(db, profile) -> Series:
    series = Series(id=1, title="The Office (US)", quality_profile_id=profile.id)
    db.add(series)
    db.commit()
    return series


def add_episode(
    db,
    series: Series,
    season_number: int,
    episode_number: int,
    quality: Optional[Quality] = None,
    proper: bool = False,
    **fields,
) -> Episode:
    """Store an episode, optionally with an attached file of the given quality."""
    episode_file = None
    if quality is not None:
        episode_file = EpisodeFile(
            series_id=series.id,
            path=f"/tv/{series.title}/S{season_number:02d}E{episode_number:02d}.mkv",
            quality=quality,
            proper=proper,
        )
        db.add(episode_file)
        db.flush()

    fields.setdefault("title", f"Episode {episode_number}")
    fields.setdefault("air_date", date(2006, 1, 1))
    episode = Episode(
        series_id=series.id,
        season_number=season_number,
        episode_number=episode_number,
        episode_file_id=episode_file.id if episode_file else None,
        **fields,
    )
    db.add(episode)
    db.commit()
    return episode
