"""
Episode Provider - Need Evaluation & TVDB Reconciliation

Decides whether a parsed release is worth downloading and merges the TVDB
episode list of a series into the local episode table.
"""
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from app.models.episode import Episode
from app.models.parse_result import EpisodeParseResult
from app.services.ports import EpisodeStorePort, MetadataSourcePort, SeasonPort
from app.services.tvdb_client import TvdbEpisode


logger = logging.getLogger(__name__)

# Älteste Air Date die gespeichert wird (SQL Server datetime Untergrenze)
MIN_AIR_DATE = date(1753, 1, 1)


class RefreshOutcome(Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass
class RefreshResult:
    series_id: int
    successful: int = 0
    failed: int = 0
    inserted: int = 0
    updated: int = 0

    def record(self, outcome: RefreshOutcome):
        if outcome is RefreshOutcome.FAILED:
            self.failed += 1
            return
        self.successful += 1
        if outcome is RefreshOutcome.INSERTED:
            self.inserted += 1
        else:
            self.updated += 1


class EpisodeProvider:
    """Episode lookup, need evaluation and metadata refresh"""

    def __init__(
        self,
        store: EpisodeStorePort,
        seasons: SeasonPort = None,
        metadata: MetadataSourcePort = None,
        logger: logging.Logger = None
    ):
        self.store = store
        self.seasons = seasons
        self.metadata = metadata
        self.logger = logger or logging.getLogger(__name__)

    def get_episode(self, episode_id: int) -> Optional[Episode]:
        return self.store.get_by_id(episode_id)

    def get_episode_by_number(self, series_id: int, season_number: int, episode_number: int) -> Optional[Episode]:
        return self.store.single(
            Episode.series_id == series_id,
            Episode.season_number == season_number,
            Episode.episode_number == episode_number
        )

    def get_episodes_by_series(self, series_id: int) -> List[Episode]:
        return self.store.find(Episode.series_id == series_id)

    def get_episodes_by_season(self, season_id: int) -> List[Episode]:
        return self.store.find(Episode.season_id == season_id)

    def get_episodes_by_parse_result(self, parse_result: EpisodeParseResult) -> List[Episode]:
        """Gespeicherte Episoden die von einem Release abgedeckt werden"""
        if not parse_result.episodes:
            return []
        return self.store.find(
            Episode.series_id == parse_result.series_id,
            Episode.season_number == parse_result.season_number,
            Episode.episode_number.in_(parse_result.episodes)
        )

    def delete_episode(self, episode_id: int) -> bool:
        return self.store.delete(episode_id)

    def update_episode(self, episode: Episode) -> Episode:
        return self.store.update(episode)

    def is_needed(self, parsed_report: EpisodeParseResult) -> bool:
        """
        Comprehensive check whether a release should be downloaded.

        The release is needed as soon as one of its episodes is missing a file,
        or holds a file the release would upgrade below the profile cutoff.
        Unknown episodes are added to the database as placeholders first.
        """
        for episode_number in parsed_report.episodes:
            episode = self.get_episode_by_number(
                parsed_report.series_id, parsed_report.season_number, episode_number
            )

            if episode is None:
                self.logger.debug(
                    f"Episode S{parsed_report.season_number:02d}E{episode_number:02d} "
                    f"doesn't exist in db. adding it now."
                )
                episode = self.store.add(self._placeholder(parsed_report, episode_number))

            file = episode.episode_file

            if file is not None:
                self.logger.debug(f"File is {file.quality.name} Proper: {file.proper}")

                if file.quality > parsed_report.quality:
                    self.logger.debug("File has better quality. skipping")
                    continue

                if file.quality == parsed_report.quality and file.proper == parsed_report.proper:
                    self.logger.debug("Same quality/proper. skipping")
                    continue

                if file.quality < parsed_report.quality:
                    if episode.series.quality_profile.cutoff <= file.quality:
                        self.logger.debug("Quality is past cut-off. skipping")
                        continue

            self.logger.debug(f"Episode {parsed_report} is needed")
            return True

        self.logger.debug(f"Episode {parsed_report} is not needed")
        return False

    def _placeholder(self, parsed_report: EpisodeParseResult, episode_number: int) -> Episode:
        # Titel/Beschreibung kommen beim nächsten TVDB Refresh
        return Episode(
            series_id=parsed_report.series_id,
            season_number=parsed_report.season_number,
            episode_number=episode_number,
            air_date=date.today(),
            title="",
            overview="",
            language="en"
        )

    def refresh_episode_info(self, series_id: int) -> RefreshResult:
        """
        Merge the TVDB episode list of a series into the episode table.

        Existing episodes keep their id and are updated, unknown ones are
        inserted. A broken TVDB record is logged and counted, it never aborts
        the refresh. Failures of TVDB itself or of the store propagate.
        """
        self.logger.info(f"Starting episode info refresh for series: {series_id}")
        result = RefreshResult(series_id=series_id)

        target_series = self.metadata.get_series(series_id, include_episodes=True)

        self.logger.debug(f"Updating season info for series: {target_series.series_name}")
        season_pairs = dict.fromkeys(
            (e.season_id, e.season_number)
            for e in target_series.episodes
            if e.season_number is not None
        )
        for season_id, season_number in season_pairs:
            self.seasons.ensure_season(series_id, season_id, season_number)

        new_list = []
        update_list = []
        seen = set()

        for tvdb_episode in target_series.episodes:
            outcome, episode = self._merge_episode(series_id, target_series.series_name, tvdb_episode, seen)
            result.record(outcome)

            if outcome is RefreshOutcome.INSERTED:
                new_list.append(episode)
            elif outcome is RefreshOutcome.UPDATED:
                update_list.append(episode)

        self.store.add_many(new_list)
        self.store.update_many(update_list)

        self.logger.info(
            f"✓ Finished episode refresh for series: {target_series.series_name}. "
            f"Successful: {result.successful} - Failed: {result.failed} "
            f"(new: {result.inserted}, updated: {result.updated})"
        )
        return result

    def _merge_episode(
        self, series_id: int, series_name: str, tvdb_episode: TvdbEpisode, seen: set
    ) -> Tuple[RefreshOutcome, Optional[Episode]]:
        try:
            if tvdb_episode.season_number is None or tvdb_episode.episode_number is None:
                raise ValueError(f"TVDB episode {tvdb_episode.id} has no season/episode number")

            key = (tvdb_episode.season_number, tvdb_episode.episode_number)
            if key in seen:
                raise ValueError(f"Duplicate TVDB episode S{key[0]:02d}E{key[1]:02d}")
            seen.add(key)

            air_date = tvdb_episode.first_aired
            if air_date is not None and air_date < MIN_AIR_DATE:
                air_date = MIN_AIR_DATE

            self.logger.debug(
                f"Updating info for [{series_name}] - "
                f"S{tvdb_episode.season_number:02d}E{tvdb_episode.episode_number:02d}"
            )
            episode = Episode(
                air_date=air_date,
                tvdb_episode_id=tvdb_episode.id,
                episode_number=tvdb_episode.episode_number,
                language=tvdb_episode.language.abbreviation,
                overview=tvdb_episode.overview,
                season_id=tvdb_episode.season_id,
                season_number=tvdb_episode.season_number,
                series_id=series_id,
                title=tvdb_episode.episode_name
            )

            existing = self.get_episode_by_number(
                series_id, tvdb_episode.season_number, tvdb_episode.episode_number
            )
            if existing is not None:
                episode.id = existing.id
                return RefreshOutcome.UPDATED, episode
            return RefreshOutcome.INSERTED, episode

        except Exception as e:
            self.logger.error(
                f"An error has occurred while updating episode info for series {series_id}: {e}",
                exc_info=True
            )
            return RefreshOutcome.FAILED, None
