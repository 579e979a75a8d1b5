"""
SQLAlchemy Episode Store
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.models.episode import Episode


logger = logging.getLogger(__name__)


class EpisodeStore:
    """Thin session wrapper that satisfies the EpisodeStorePort contract.

    Every write commits immediately; errors from the database are not caught
    here and reach the caller.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, episode_id: int) -> Optional[Episode]:
        return self.db.get(Episode, episode_id)

    def single(self, *criteria) -> Optional[Episode]:
        return self.db.query(Episode).filter(*criteria).first()

    def find(self, *criteria) -> List[Episode]:
        return (
            self.db.query(Episode)
            .filter(*criteria)
            .order_by(Episode.season_number, Episode.episode_number)
            .all()
        )

    def find_all(self) -> List[Episode]:
        return self.find()

    def add(self, episode: Episode) -> Episode:
        self.db.add(episode)
        self.db.commit()
        self.db.refresh(episode)
        return episode

    def add_many(self, episodes: Iterable[Episode]) -> None:
        episodes = list(episodes)
        if not episodes:
            return
        self.db.add_all(episodes)
        self.db.commit()
        logger.debug(f"Inserted {len(episodes)} episodes")

    def update(self, episode: Episode) -> Episode:
        if episode.id is None:
            raise ValueError("Cannot update an episode without id")
        merged = self.db.merge(episode)
        self.db.commit()
        return merged

    def update_many(self, episodes: Iterable[Episode]) -> None:
        count = 0
        for episode in episodes:
            if episode.id is None:
                raise ValueError("Cannot update an episode without id")
            # merge überschreibt nur gesetzte Felder, episode_file_id bleibt erhalten
            self.db.merge(episode)
            count += 1
        if count:
            self.db.commit()
            logger.debug(f"Updated {count} episodes")

    def delete(self, episode_id: int) -> bool:
        episode = self.get_by_id(episode_id)
        if not episode:
            return False
        self.db.delete(episode)
        self.db.commit()
        return True
