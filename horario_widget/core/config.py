import os
import logging
from datetime import tzinfo, datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DATA_SOURCES = ("cached", "remote")
PREFERENCE_BACKENDS = ("memory", "file", "mongo")
LOCALES = ("es", "en")


class Settings:
    def __init__(self):
        # MongoDB Database (remote schedule source and optional preference backend)
        self.MONGODB_URL: str = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
        self.MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "agenda_ai")

        # Security
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "horario-widget-dev-secret")
        self.ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

        # App Settings
        self.APP_NAME: str = os.getenv("APP_NAME", "Horario Widget Service")
        self.APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")
        self.DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"

        # Widget Settings
        self.WIDGET_NAME: str = os.getenv("WIDGET_NAME", "Horario Widget")
        self.WIDGET_VERSION: str = os.getenv("WIDGET_VERSION", "1.0")
        self.WIDGET_CHANNEL: str = os.getenv("WIDGET_CHANNEL", "com.example.appmobilav/widget")
        self.WIDGET_DATA_SOURCE: str = self._choice("WIDGET_DATA_SOURCE", "cached", DATA_SOURCES)
        self.WIDGET_LOCALE: str = self._choice("WIDGET_LOCALE", "es", LOCALES)
        self.WIDGET_TIMEZONE: str = os.getenv("WIDGET_TIMEZONE", "")

        # Snapshot Store
        self.PREFERENCES_BACKEND: str = self._choice("PREFERENCES_BACKEND", "file", PREFERENCE_BACKENDS)
        self.PREFERENCES_PATH: str = os.getenv("PREFERENCES_PATH", "data/widget_preferences.json")
        self.INSTALLATION_ID: str = os.getenv("INSTALLATION_ID", "default")

        # CORS Settings - Allow all origins for development
        cors_origins = os.getenv("ALLOWED_ORIGINS", "*")
        if cors_origins == "*":
            self.ALLOWED_ORIGINS = ["*"]
        else:
            self.ALLOWED_ORIGINS = [origin.strip() for origin in cors_origins.split(",")]

    @staticmethod
    def _choice(name: str, default: str, allowed: tuple) -> str:
        """Read an enum-like setting, falling back to the default on unknown values"""
        value = os.getenv(name, default).strip().lower()
        if value not in allowed:
            logger.warning(f"Unknown {name}={value!r}, using {default!r} (allowed: {', '.join(allowed)})")
            return default
        return value

    @property
    def timezone(self) -> Optional[tzinfo]:
        """Timezone the widget renders in; None means system local time"""
        if not self.WIDGET_TIMEZONE:
            return None
        try:
            return ZoneInfo(self.WIDGET_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown WIDGET_TIMEZONE {self.WIDGET_TIMEZONE!r}, using system local time")
            return None

    def now(self) -> datetime:
        """Current wall-clock time as an aware datetime in the widget timezone"""
        tz = self.timezone
        if tz is None:
            return datetime.now().astimezone()
        return datetime.now(tz)


# Create settings instance
settings = Settings()
