"""
Wires the snapshot store, data source, host, provider and bridge together
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from .bridge import WidgetBridge
from .core.config import Settings, settings as default_settings
from .core.messages import Messages
from .host import InMemoryWidgetHost
from .provider import WidgetProvider
from .schemas.bridge import WidgetInfo
from .sources import create_source
from .store import Preferences, SnapshotStore, create_preferences

logger = logging.getLogger(__name__)


class WidgetRuntime:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        preferences: Optional[Preferences] = None,
        get_database: Optional[Callable] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.settings = settings or default_settings
        self.messages = Messages(self.settings.WIDGET_LOCALE)
        clock = clock or self.settings.now

        self.store = SnapshotStore(
            preferences or create_preferences(self.settings, get_database),
            default_status=self.messages["no_data"]
        )
        self.source = create_source(self.settings, self.store, get_database)
        self.host = InMemoryWidgetHost()
        self.provider = WidgetProvider(self.host, self.source, messages=self.messages, clock=clock)
        self.host.attach(self.provider)
        self.bridge = WidgetBridge(
            self.store,
            self.provider,
            info=WidgetInfo(name=self.settings.WIDGET_NAME, version=self.settings.WIDGET_VERSION),
            messages=self.messages,
            clock=clock
        )
        logger.info(
            f"Widget runtime ready (source={self.source.name}, "
            f"preferences={self.store.preferences.name}, locale={self.messages.locale})"
        )

    @property
    def uses_database(self) -> bool:
        return self.settings.WIDGET_DATA_SOURCE == "remote" or self.settings.PREFERENCES_BACKEND == "mongo"
