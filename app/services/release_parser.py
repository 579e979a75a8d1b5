"""
Release Parser - Release-Titel zu EpisodeParseResult
Unterstützt S01E02, S01E02E03, S01E02-E03 und 1x02
"""
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.parse_result import EpisodeParseResult
from app.models.quality import Quality
from app.models.series import Series

logger = logging.getLogger(__name__)


EPISODE_PATTERNS = [
    # Show.Name.S01E02E03 / Show.Name.S01E02-E03 / Show.Name.S01E02-03
    re.compile(
        r'^(?P<title>.+?)[\s._-]+S(?P<season>\d{1,2})(?P<episodes>E\d{2,3}(?:-?E\d{2,3}|-\d{2,3})*)(?!\d)',
        re.IGNORECASE
    ),
    # Show.Name.1x02
    re.compile(r'^(?P<title>.+?)[\s._-]+(?P<season>\d{1,2})x(?P<episodes>\d{2,3}(?:x\d{2,3})*)', re.IGNORECASE),
]

PROPER_PATTERN = re.compile(r'\b(proper|repack)\b', re.IGNORECASE)


@dataclass
class ParsedRelease:
    """Ergebnis des Title-Parsings, noch ohne Series-Zuordnung"""
    series_title: str
    season_number: int
    episodes: List[int] = field(default_factory=list)
    quality: Quality = Quality.UNKNOWN
    proper: bool = False


def normalize_title(title: str) -> str:
    """Vergleichbarer Titel: lowercase, nur Buchstaben/Ziffern"""
    title = re.sub(r'\((\d{4})\)', r'\1', title or '')
    return re.sub(r'[^a-z0-9]', '', title.lower())


def parse_quality(name: str) -> Quality:
    name = name.lower()

    if 'bluray' in name or 'blu-ray' in name:
        if '1080p' in name:
            return Quality.BLURAY1080
        return Quality.BLURAY720

    if re.search(r'web[-_. ]?dl', name):
        return Quality.WEBDL

    if 'hdtv' in name or '720p' in name:
        if '720p' in name or '1080i' in name or '1080p' in name:
            return Quality.HDTV
        return Quality.SDTV

    if 'dvd' in name:
        return Quality.DVD

    if 'xvid' in name or 'sdtv' in name or 'pdtv' in name:
        return Quality.SDTV

    return Quality.UNKNOWN


class ReleaseParser:
    """Parst Release-Titel und ordnet sie einer Serie zu"""

    def __init__(self, db: Session = None):
        self.db = db

    def parse(self, title: str) -> Optional[ParsedRelease]:
        if not title:
            return None

        for pattern in EPISODE_PATTERNS:
            match = pattern.search(title.strip())
            if not match:
                continue

            episodes = [int(n) for n in re.findall(r'\d{2,3}', match.group('episodes'))]
            if len(episodes) == 2 and episodes[1] > episodes[0] and '-' in match.group('episodes'):
                # Range: S01E02-E05
                episodes = list(range(episodes[0], episodes[1] + 1))

            series_title = re.sub(r'[._]+', ' ', match.group('title')).strip(' -')
            result = ParsedRelease(
                series_title=series_title,
                season_number=int(match.group('season')),
                episodes=episodes,
                quality=parse_quality(title),
                proper=bool(PROPER_PATTERN.search(title))
            )
            logger.debug(f"Parsed '{title}' → {result}")
            return result

        logger.debug(f"Could not parse release title: {title}")
        return None

    def find_series(self, series_title: str) -> Optional[Series]:
        wanted = normalize_title(series_title)
        if not wanted:
            return None
        for series in self.db.query(Series).all():
            if normalize_title(series.title) == wanted:
                return series
        return None

    def resolve(self, title: str) -> Optional[EpisodeParseResult]:
        """Parst einen Release und ordnet ihn einer gespeicherten Serie zu"""
        parsed = self.parse(title)
        if parsed is None:
            return None
        return self.attach_series(parsed, title)

    def attach_series(self, parsed: ParsedRelease, title: str = None) -> Optional[EpisodeParseResult]:
        """Ordnet einen bereits geparsten Release einer gespeicherten Serie zu"""
        series = self.find_series(parsed.series_title)
        if series is None:
            logger.info(f"Series '{parsed.series_title}' is not tracked")
            return None

        return EpisodeParseResult(
            series_id=series.id,
            season_number=parsed.season_number,
            episodes=parsed.episodes,
            quality=parsed.quality,
            proper=parsed.proper,
            series_title=series.title,
            release_title=title
        )
