import logging
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.models.config import Config
from app.models.quality import Quality
from app.models.quality_profile import QualityProfile


logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = "Any"


def init_config():
    """Initialize default configs"""
    db = SessionLocal()

    configs = [
        # TVDB
        ("tvdb_api_key", "", "tvdb", True, "string", "TVDB API Key für Episode-Daten"),
        ("tvdb_base_url", "https://api4.thetvdb.com/v4", "tvdb", False, "string", "TVDB API v4 Basis-URL"),

        # Quality
        ("default_quality_cutoff", Quality.HDTV.name, "core", False, "string", "Cutoff für das Standard-Qualitätsprofil"),

        # System
        ("log_level", "INFO", "system", False, "string", "Log-Level (DEBUG, INFO, WARNING, ERROR)"),
    ]

    try:
        for key, value, module, secret, data_type, description in configs:
            existing = db.query(Config).filter_by(key=key).first()
            if not existing:
                db.add(Config(
                    key=key,
                    value=value,
                    module=module,
                    secret=secret,
                    data_type=data_type,
                    description=description
                ))
                logger.info(f"✓ Added config: {key}")
        db.commit()

        ensure_default_profile(db)
    finally:
        db.close()
    logger.info("✅ Base config initialized")


def get_config_value(db: Session, key: str, default=None):
    """Typisierter Config-Wert oder default"""
    config = db.query(Config).filter_by(key=key).first()
    if not config or config.value in (None, ""):
        return default
    return config.typed_value


def ensure_default_profile(db: Session) -> QualityProfile:
    """Standard-Qualitätsprofil anlegen falls keins existiert"""
    profile = db.query(QualityProfile).filter_by(name=DEFAULT_PROFILE_NAME).first()
    if profile:
        return profile

    cutoff_name = get_config_value(db, "default_quality_cutoff", Quality.HDTV.name)
    try:
        cutoff = Quality[cutoff_name.upper()]
    except KeyError:
        logger.warning(f"Unknown default_quality_cutoff '{cutoff_name}', using HDTV")
        cutoff = Quality.HDTV

    profile = QualityProfile(name=DEFAULT_PROFILE_NAME, cutoff=cutoff)
    db.add(profile)
    db.commit()
    logger.info(f"✓ Added quality profile: {DEFAULT_PROFILE_NAME} (cutoff {cutoff.name})")
    return profile
