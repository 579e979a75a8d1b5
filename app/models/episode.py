from sqlalchemy import Column, Integer, String, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base


class Episode(Base):
    __tablename__ = "episodes"

    id = Column(Integer, primary_key=True)
    tvdb_episode_id = Column(Integer, nullable=True)
    series_id = Column(Integer, ForeignKey("series.id"), nullable=False, index=True)
    season_id = Column(Integer, nullable=True, index=True)  # TVDB Season ID

    season_number = Column(Integer, nullable=False)
    episode_number = Column(Integer, nullable=False)

    title = Column(String, nullable=False, default="")
    overview = Column(Text, nullable=True)
    air_date = Column(Date, nullable=True)
    language = Column(String, default="en")

    episode_file_id = Column(Integer, ForeignKey("episode_files.id"), nullable=True)

    series = relationship("Series")
    episode_file = relationship("EpisodeFile")

    __table_args__ = (
        UniqueConstraint('series_id', 'season_number', 'episode_number', name='uq_series_episode'),
    )

    def __repr__(self):
        return f"<Episode S{self.season_number:02d}E{self.episode_number:02d}: {self.title}>"
