# virtus/config.py
import zoneinfo
from datetime import date
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Database
    DATABASE_URL: str = "sqlite:///./virtus.db"

    # Parcours (70 days, periods derived from the start date)
    PARCOURS_START: date = date(2026, 2, 1)

    # Daily content (formations/exhortations JSON); packaged content when unset
    CONTENT_DIR: Optional[str] = None

    # Bilan
    CONFESSION_GOAL_DAYS: int = 14

    # Timezone used to decide "today" when the caller does not pass a date
    TZ_DEFAULT: str = "Europe/Paris"

    # Dev reset
    RESET_DB_ON_STARTUP: bool = False

    # Debug logging
    VIRTUS_DEBUG: bool = False


    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # ignore unexpected keys instead of erroring
    )

settings = Settings()
DEFAULT_TZ = zoneinfo.ZoneInfo(settings.TZ_DEFAULT)
