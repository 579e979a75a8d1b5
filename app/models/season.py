from sqlalchemy import Column, Integer, Boolean, UniqueConstraint

from app.database import Base


class Season(Base):
    __tablename__ = "seasons"

    id = Column(Integer, primary_key=True)
    season_id = Column(Integer, nullable=True, unique=True)  # TVDB Season ID
    series_id = Column(Integer, nullable=False, index=True)
    season_number = Column(Integer, nullable=False)
    monitored = Column(Boolean, default=True)

    __table_args__ = (
        UniqueConstraint('series_id', 'season_number', name='uq_series_season'),
    )

    def __repr__(self):
        return f"<Season {self.series_id} S{self.season_number:02d}>"
