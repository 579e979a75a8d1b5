from app.models.quality import Quality
from app.models.config import Config
from app.models.quality_profile import QualityProfile
from app.models.series import Series
from app.models.season import Season
from app.models.episode_file import EpisodeFile
from app.models.episode import Episode
from app.models.parse_result import EpisodeParseResult

__all__ = [
    "Quality",
    "Config",
    "QualityProfile",
    "Series",
    "Season",
    "EpisodeFile",
    "Episode",
    "EpisodeParseResult",
]
