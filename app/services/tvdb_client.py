"""
TVDB API v4 Client
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional

import httpx


logger = logging.getLogger(__name__)


class TVDBError(Exception):
    """TVDB nicht erreichbar oder Antwort unbrauchbar"""


@dataclass
class TvdbLanguage:
    abbreviation: str


@dataclass
class TvdbEpisode:
    id: int
    series_id: int
    season_id: Optional[int]
    season_number: Optional[int]
    episode_number: Optional[int]
    first_aired: Optional[date]
    language: Optional[TvdbLanguage]
    overview: str = ""
    episode_name: str = ""


@dataclass
class TvdbSeries:
    id: int
    series_name: str
    language: Optional[str] = None
    episodes: List[TvdbEpisode] = field(default_factory=list)


def _parse_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning(f"Unparseable TVDB air date: {value!r}")
        return None


class TVDBClient:
    BASE_URL = "https://api4.thetvdb.com/v4"
    TOKEN_TTL = timedelta(days=25)

    def __init__(self, api_key: str, base_url: str = None, client: httpx.Client = None, timeout: float = 10.0):
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)
        self.access_token = None
        self.token_expires = None

    def close(self):
        self.client.close()

    def _get_token(self) -> str:
        if self.access_token and self.token_expires and datetime.now() < self.token_expires:
            return self.access_token

        resp = self.client.post(f"{self.base_url}/login", json={'apikey': self.api_key})
        if resp.status_code != 200:
            raise TVDBError(f"TVDB login failed: HTTP {resp.status_code}")

        token = resp.json().get('data', {}).get('token')
        if not token:
            raise TVDBError("TVDB login returned no token")

        self.access_token = token
        self.token_expires = datetime.now() + self.TOKEN_TTL
        logger.info("✓ TVDB token acquired")
        return token

    def _get(self, path: str, params: dict = None) -> dict:
        headers = {'Authorization': f'Bearer {self._get_token()}'}
        resp = self.client.get(f"{self.base_url}{path}", headers=headers, params=params)
        resp.raise_for_status()
        data = resp.json().get('data')
        if not isinstance(data, dict):
            raise TVDBError(f"Unexpected TVDB response for {path}")
        return data

    def get_series(self, series_id: int, include_episodes: bool = False) -> TvdbSeries:
        """
        Fetch series info from TVDB

        Args:
            series_id: TVDB Series ID
            include_episodes: Alle Episoden mitladen (extended record)

        Returns:
            TvdbSeries
        """
        logger.info(f"Fetching TVDB series #{series_id} (episodes: {include_episodes})")

        if not include_episodes:
            data = self._get(f"/series/{series_id}")
            return TvdbSeries(
                id=data.get('id', series_id),
                series_name=data.get('name') or f'Show_{series_id}',
                language=data.get('originalLanguage'),
            )

        data = self._get(f"/series/{series_id}/extended", params={'meta': 'episodes', 'short': 'true'})
        language = data.get('originalLanguage')

        # Offizielle Staffeln: Nummer -> TVDB Season ID
        season_ids = {}
        for season in data.get('seasons') or []:
            season_type = (season.get('type') or {}).get('type', 'official')
            if season_type == 'official' and season.get('number') is not None:
                season_ids.setdefault(season['number'], season.get('id'))

        episodes = []
        for ep in data.get('episodes') or []:
            if not isinstance(ep, dict):
                continue
            season_number = ep.get('seasonNumber')
            episodes.append(TvdbEpisode(
                id=ep.get('id'),
                series_id=ep.get('seriesId', series_id),
                season_id=season_ids.get(season_number),
                season_number=season_number,
                episode_number=ep.get('number'),
                first_aired=_parse_date(ep.get('aired')),
                language=TvdbLanguage(language or 'en'),
                overview=ep.get('overview') or '',
                episode_name=ep.get('name') or '',
            ))

        logger.info(f"✓ Total: {len(episodes)} episodes")
        return TvdbSeries(
            id=data.get('id', series_id),
            series_name=data.get('name') or f'Show_{series_id}',
            language=language,
            episodes=episodes,
        )
