from enum import IntEnum

from sqlalchemy import Integer
from sqlalchemy.types import TypeDecorator


class Quality(IntEnum):
    """Release quality tiers, higher is better"""
    UNKNOWN = 0
    SDTV = 1
    DVD = 2
    HDTV = 3
    WEBDL = 4
    BLURAY720 = 5
    BLURAY1080 = 6


class QualityType(TypeDecorator):
    """Stores a Quality as its integer value"""
    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Quality(value)
