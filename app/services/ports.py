"""Ports (interfaces) used by the episode provider.

Ports define the minimal contracts for storage, season bookkeeping and the
metadata source so that the provider can be reused with different backends.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Protocol

from app.models.episode import Episode
from app.services.tvdb_client import TvdbSeries


class EpisodeStorePort(Protocol):
    """Storage operations over Episode records."""

    def get_by_id(self, episode_id: int) -> Optional[Episode]:
        ...

    def single(self, *criteria) -> Optional[Episode]:
        ...

    def find(self, *criteria) -> List[Episode]:
        ...

    def find_all(self) -> List[Episode]:
        ...

    def add(self, episode: Episode) -> Episode:
        ...

    def add_many(self, episodes: Iterable[Episode]) -> None:
        ...

    def update(self, episode: Episode) -> Episode:
        ...

    def update_many(self, episodes: Iterable[Episode]) -> None:
        ...

    def delete(self, episode_id: int) -> bool:
        ...


class SeasonPort(Protocol):
    """Season bookkeeping required before episodes are merged."""

    def ensure_season(self, series_id: int, season_id: Optional[int], season_number: int) -> None:
        ...


class MetadataSourcePort(Protocol):
    """Remote episode metadata (TVDB)."""

    def get_series(self, series_id: int, include_episodes: bool = False) -> TvdbSeries:
        ...
