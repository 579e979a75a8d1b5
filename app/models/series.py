from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from app.database import Base


class Series(Base):
    __tablename__ = "series"

    # TVDB Series ID, nicht autoincrement
    id = Column(Integer, primary_key=True, autoincrement=False)
    title = Column(String, nullable=False, index=True)
    path = Column(String, nullable=True)
    monitored = Column(Boolean, default=True)

    quality_profile_id = Column(Integer, ForeignKey("quality_profiles.id"), nullable=False)
    quality_profile = relationship("QualityProfile", lazy="joined")

    added_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Series {self.title} (TVDB: {self.id})>"
