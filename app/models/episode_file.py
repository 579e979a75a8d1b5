from sqlalchemy import Column, Integer, String, DateTime, Boolean, BigInteger
from datetime import datetime

from app.database import Base
from app.models.quality import Quality, QualityType


class EpisodeFile(Base):
    __tablename__ = "episode_files"

    id = Column(Integer, primary_key=True)
    series_id = Column(Integer, nullable=False, index=True)
    path = Column(String, nullable=True)  # Lokaler Pfad

    quality = Column(QualityType, nullable=False, default=Quality.UNKNOWN)
    proper = Column(Boolean, default=False, nullable=False)

    size = Column(BigInteger, default=0)
    date_added = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<EpisodeFile {self.path} [{self.quality.name}{' PROPER' if self.proper else ''}]>"
