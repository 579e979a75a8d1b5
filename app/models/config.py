from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from datetime import datetime
import json

from app.database import Base


class Config(Base):
    __tablename__ = "config"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    value = Column(Text)
    module = Column(String, default="core")  # "tvdb", "core", "system"
    secret = Column(Boolean, default=False)
    data_type = Column(String, default="string")  # string, int, bool, json
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    description = Column(String, nullable=True)

    def __repr__(self):
        shown = "***" if self.secret else (self.value or "")[:20]
        return f"<Config {self.key}={shown}>"

    @property
    def typed_value(self):
        """Gibt value als korrekten Typ zurück"""
        if self.value is None:
            return None
        if self.data_type in ("bool", "boolean"):
            return self.value.lower() in ("true", "1", "yes")
        elif self.data_type in ("int", "integer"):
            return int(self.value)
        elif self.data_type == "json":
            return json.loads(self.value)
        return self.value
