from sqlalchemy import Column, Integer, String

from app.database import Base
from app.models.quality import Quality, QualityType


class QualityProfile(Base):
    __tablename__ = "quality_profiles"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)

    # Ab dieser Qualität werden keine Upgrades mehr gesucht
    cutoff = Column(QualityType, nullable=False, default=Quality.HDTV)

    def __repr__(self):
        return f"<QualityProfile {self.name} (cutoff: {self.cutoff.name if self.cutoff is not None else '?'})>"
