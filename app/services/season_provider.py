import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.season import Season


logger = logging.getLogger(__name__)


class SeasonProvider:
    """Staffel-Verwaltung"""

    def __init__(self, db: Session):
        self.db = db

    def ensure_season(self, series_id: int, season_id: Optional[int], season_number: int) -> Season:
        """Legt die Staffel an falls sie noch nicht existiert (idempotent)"""
        season = self.db.query(Season).filter(
            Season.series_id == series_id,
            Season.season_number == season_number
        ).first()

        if season:
            if season_id is not None and season.season_id != season_id:
                season.season_id = season_id
                self.db.commit()
            return season

        logger.debug(f"Creating season {season_number} for series {series_id}")
        season = Season(
            series_id=series_id,
            season_id=season_id,
            season_number=season_number,
            monitored=True
        )
        self.db.add(season)
        self.db.commit()
        return season

    def get_seasons(self, series_id: int) -> List[Season]:
        return self.db.query(Season).filter(Season.series_id == series_id).order_by(Season.season_number).all()
