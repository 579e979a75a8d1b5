import logging
from datetime import date
from typing import List, Optional

import pytest

from app.models.episode import Episode
from app.models.season import Season
from app.models.quality import Quality
from app.services.episode_provider import MIN_AIR_DATE, EpisodeProvider
from app.services.episode_store import EpisodeStore
from app.services.season_provider import SeasonProvider
from app.services.tvdb_client import TVDBError, TvdbEpisode, TvdbLanguage, TvdbSeries

from conftest import add_episode


class FakeMetadataSource:
    def __init__(self, series: Optional[TvdbSeries] = None, error: Optional[Exception] = None) -> None:
        self.series = series
        self.error = error
        self.calls: list[tuple[int, bool]] = []

    def get_series(self, series_id: int, include_episodes: bool = False) -> TvdbSeries:
        self.calls.append((series_id, include_episodes))
        if self.error:
            raise self.error
        return self.series


class RecordingSeasons:
    def __init__(self) -> None:
        self.calls: list[tuple[int, Optional[int], int]] = []

    def ensure_season(self, series_id: int, season_id: Optional[int], season_number: int) -> None:
        self.calls.append((series_id, season_id, season_number))


def _tvdb_episode(
    season: Optional[int],
    number: Optional[int],
    *,
    episode_id: Optional[int] = None,
    aired: Optional[date] = date(2006, 3, 1),
    language: Optional[TvdbLanguage] = TvdbLanguage("en"),
    name: str = "",
) -> TvdbEpisode:
    return TvdbEpisode(
        id=episode_id or (season or 0) * 1000 + (number or 0),
        series_id=1,
        season_id=100 + season if season is not None else None,
        season_number=season,
        episode_number=number,
        first_aired=aired,
        language=language,
        overview=f"Overview {season}x{number}",
        episode_name=name or f"Episode {number}",
    )


def _tvdb_series(episodes: List[TvdbEpisode]) -> TvdbSeries:
    return TvdbSeries(id=1, series_name="The Office (US)", language="en", episodes=episodes)


def _provider(db, source, seasons=None) -> EpisodeProvider:
    return EpisodeProvider(EpisodeStore(db), seasons=seasons or SeasonProvider(db), metadata=source)


def _stored(db) -> list:
    db.expire_all()
    return [
        (e.id, e.season_number, e.episode_number, e.title, e.overview, e.air_date, e.language, e.season_id)
        for e in db.query(Episode).order_by(Episode.season_number, Episode.episode_number)
    ]


def test_refresh_inserts_new_episodes(db, series) -> None:
    source = FakeMetadataSource(_tvdb_series([_tvdb_episode(1, 1), _tvdb_episode(1, 2), _tvdb_episode(2, 1)]))
    provider = _provider(db, source)

    result = provider.refresh_episode_info(1)

    assert source.calls == [(1, True)]
    assert (result.successful, result.failed, result.inserted, result.updated) == (3, 0, 3, 0)

    episodes = provider.get_episodes_by_series(1)
    assert [(e.season_number, e.episode_number) for e in episodes] == [(1, 1), (1, 2), (2, 1)]
    first = episodes[0]
    assert first.tvdb_episode_id == 1001
    assert first.season_id == 101
    assert first.title == "Episode 1"
    assert first.overview == "Overview 1x1"
    assert first.language == "en"
    assert first.air_date == date(2006, 3, 1)


def test_refresh_ensures_each_distinct_season_once(db, series) -> None:
    seasons = RecordingSeasons()
    source = FakeMetadataSource(_tvdb_series([
        _tvdb_episode(1, 1), _tvdb_episode(1, 2), _tvdb_episode(2, 1), _tvdb_episode(2, 2),
    ]))

    _provider(db, source, seasons=seasons).refresh_episode_info(1)

    assert sorted(seasons.calls) == [(1, 101, 1), (1, 102, 2)]


def test_refresh_creates_season_records(db, series) -> None:
    source = FakeMetadataSource(_tvdb_series([_tvdb_episode(1, 1), _tvdb_episode(2, 1)]))

    _provider(db, source).refresh_episode_info(1)

    seasons = SeasonProvider(db).get_seasons(1)
    assert [(s.season_number, s.season_id) for s in seasons] == [(1, 101), (2, 102)]


def test_refresh_is_idempotent(db, series) -> None:
    source = FakeMetadataSource(_tvdb_series([_tvdb_episode(1, 1), _tvdb_episode(1, 2)]))
    provider = _provider(db, source)

    provider.refresh_episode_info(1)
    before = _stored(db)

    result = provider.refresh_episode_info(1)

    assert (result.inserted, result.updated, result.failed) == (0, 2, 0)
    assert _stored(db) == before
    assert db.query(Season).count() == 1


def test_existing_episode_keeps_id_and_file(db, series) -> None:
    placeholder = add_episode(db, series, 1, 2, quality=Quality.HDTV, title="", overview="")
    original_id = placeholder.id
    file_id = placeholder.episode_file_id
    source = FakeMetadataSource(_tvdb_series([_tvdb_episode(1, 1), _tvdb_episode(1, 2, name="Diversity Day")]))
    provider = _provider(db, source)

    result = provider.refresh_episode_info(1)

    assert (result.inserted, result.updated) == (1, 1)
    db.expire_all()
    updated = provider.get_episode(original_id)
    assert updated.title == "Diversity Day"
    assert updated.overview == "Overview 1x2"
    assert updated.tvdb_episode_id == 1002
    assert updated.episode_file_id == file_id
    assert db.query(Episode).count() == 2


def test_air_date_before_floor_is_clamped(db, series) -> None:
    add_episode(db, series, 1, 2)
    source = FakeMetadataSource(_tvdb_series([
        _tvdb_episode(1, 1, aired=date(1700, 5, 5)),
        _tvdb_episode(1, 2, aired=date(1, 1, 1)),
        _tvdb_episode(1, 3, aired=date(1753, 1, 1)),
        _tvdb_episode(1, 4, aired=None),
    ]))
    provider = _provider(db, source)

    result = provider.refresh_episode_info(1)

    assert (result.inserted, result.updated) == (3, 1)
    db.expire_all()
    dates = {e.episode_number: e.air_date for e in provider.get_episodes_by_series(1)}
    assert dates == {1: MIN_AIR_DATE, 2: MIN_AIR_DATE, 3: date(1753, 1, 1), 4: None}


def test_malformed_record_is_counted_and_skipped(db, series, caplog) -> None:
    source = FakeMetadataSource(_tvdb_series([
        _tvdb_episode(1, 1),
        _tvdb_episode(1, None),
        _tvdb_episode(1, 3, language=None),
        _tvdb_episode(1, 4),
    ]))
    provider = _provider(db, source)

    with caplog.at_level(logging.ERROR):
        result = provider.refresh_episode_info(1)

    assert (result.successful, result.failed) == (2, 2)
    assert [e.episode_number for e in provider.get_episodes_by_series(1)] == [1, 4]
    assert "An error has occurred while updating episode info for series 1" in caplog.text


def test_duplicate_record_in_one_fetch_is_counted_as_failure(db, series) -> None:
    source = FakeMetadataSource(_tvdb_series([_tvdb_episode(1, 1), _tvdb_episode(1, 1, episode_id=9999)]))
    provider = _provider(db, source)

    result = provider.refresh_episode_info(1)

    assert (result.inserted, result.failed) == (1, 1)
    assert provider.get_episode_by_number(1, 1, 1).tvdb_episode_id == 1001


def test_injected_logger_receives_messages(db, series, caplog) -> None:
    source = FakeMetadataSource(_tvdb_series([_tvdb_episode(1, 1)]))
    provider = EpisodeProvider(
        EpisodeStore(db), seasons=SeasonProvider(db), metadata=source,
        logger=logging.getLogger("episodarr.refresh"),
    )

    with caplog.at_level(logging.INFO, logger="episodarr.refresh"):
        provider.refresh_episode_info(1)

    assert any(r.name == "episodarr.refresh" and "Finished episode refresh" in r.getMessage() for r in caplog.records)


def test_metadata_failure_propagates(db, series) -> None:
    provider = _provider(db, FakeMetadataSource(error=TVDBError("TVDB login failed: HTTP 401")))

    with pytest.raises(TVDBError):
        provider.refresh_episode_info(1)

    assert db.query(Episode).count() == 0


def test_store_failure_propagates(db, series) -> None:
    class BrokenStore(EpisodeStore):
        def add_many(self, episodes) -> None:
            raise RuntimeError("disk full")

    source = FakeMetadataSource(_tvdb_series([_tvdb_episode(1, 1)]))
    provider = EpisodeProvider(BrokenStore(db), seasons=SeasonProvider(db), metadata=source)

    with pytest.raises(RuntimeError, match="disk full"):
        provider.refresh_episode_info(1)
