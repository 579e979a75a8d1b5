from dataclasses import dataclass, field
from typing import List, Optional

from app.models.quality import Quality


@dataclass
class EpisodeParseResult:
    """Ein gefundener Release, beschreibt eine oder mehrere Episoden einer Staffel"""
    series_id: int
    season_number: int
    episodes: List[int] = field(default_factory=list)
    quality: Quality = Quality.UNKNOWN
    proper: bool = False
    series_title: Optional[str] = None
    release_title: Optional[str] = None

    def __str__(self):
        numbers = "".join(f"E{e:02d}" for e in self.episodes)
        name = self.series_title or f"series {self.series_id}"
        return f"[{name} - S{self.season_number:02d}{numbers} {self.quality.name}{' PROPER' if self.proper else ''}]"
