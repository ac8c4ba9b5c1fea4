"""
App Bridge
Named commands through which the mobile app pushes widget snapshots.
Every command returns a BridgeResult; no exception leaves handle().
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from .core.config import settings as default_settings
from .core.messages import Messages
from .core.utils import to_millis
from .provider import WidgetProvider
from .schemas.bridge import BridgeResult, WidgetInfo
from .schemas.widget import WidgetSnapshot
from .store import SnapshotStore

logger = logging.getLogger(__name__)

# method -> (error code, message) reported when the command raises
COMMAND_ERRORS: Dict[str, tuple] = {
    "initialize": ("INIT_ERROR", "Error inicializando widget"),
    "updateWidget": ("UPDATE_ERROR", "Error actualizando widget"),
    "schedulePeriodicUpdates": ("SCHEDULE_ERROR", "Error programando actualizaciones"),
    "clearWidget": ("CLEAR_ERROR", "Error limpiando widget"),
}


class WidgetBridge:
    def __init__(
        self,
        store: SnapshotStore,
        provider: WidgetProvider,
        info: Optional[WidgetInfo] = None,
        messages: Optional[Messages] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.provider = provider
        self.info = info or WidgetInfo(name=default_settings.WIDGET_NAME, version=default_settings.WIDGET_VERSION)
        self.messages = messages or Messages(default_settings.WIDGET_LOCALE)
        self.clock = clock or default_settings.now
        self._handlers: Dict[str, Callable[[Any], BridgeResult]] = {
            "initialize": self._initialize,
            "updateWidget": self._update_widget,
            "schedulePeriodicUpdates": self._schedule_periodic_updates,
            "clearWidget": self._clear_widget,
            "isSupported": self._is_supported,
            "getWidgetInfo": self._get_widget_info,
        }

    @property
    def methods(self):
        return sorted(self._handlers)

    def handle(self, method: Any, arguments: Any = None) -> BridgeResult:
        """Run one named command and report its outcome"""
        handler = self._handlers.get(method) if isinstance(method, str) else None
        if handler is None:
            logger.warning(f"Bridge method not implemented: {method!r}")
            return BridgeResult.not_implemented(str(method))

        if method not in COMMAND_ERRORS:
            # Pure queries with nothing that can fail
            return handler(arguments)

        try:
            result = handler(arguments)
        except Exception as e:
            code, message = COMMAND_ERRORS[method]
            logger.error(f"Bridge method {method} failed: {e}")
            return BridgeResult.error(code, message, str(e))

        logger.info(f"Bridge method {method} -> {'ok' if result.ok else result.code}")
        return result

    def _next_version(self) -> int:
        """Version for the next write: past both the stored one and the one on screen"""
        return max(self.store.next_version(), self.provider.rendered_version + 1)

    def _initialize(self, arguments: Any) -> BridgeResult:
        return BridgeResult.success("Widget inicializado")

    def _update_widget(self, arguments: Any) -> BridgeResult:
        if not isinstance(arguments, dict):
            return BridgeResult.error("NO_DATA", "No se recibieron datos")

        snapshot = WidgetSnapshot.from_preferences(arguments, default_status=self.messages["no_data"])
        update = {"version": self._next_version()}
        if snapshot.last_update == 0:
            update["last_update"] = to_millis(self.clock())
        snapshot = snapshot.model_copy(update=update)

        if not self.store.save(snapshot):
            return BridgeResult.error(*COMMAND_ERRORS["updateWidget"], "snapshot store write failed")
        self.provider.on_refresh_requested()
        return BridgeResult.success("Widget actualizado")

    def _schedule_periodic_updates(self, arguments: Any) -> BridgeResult:
        # Refresh cadence belongs to the widget host; nothing to schedule here
        return BridgeResult.success("Actualizaciones programadas")

    def _clear_widget(self, arguments: Any) -> BridgeResult:
        snapshot = WidgetSnapshot.empty(self.messages["no_data"])
        snapshot = snapshot.model_copy(update={"version": self._next_version()})
        if not self.store.save(snapshot):
            return BridgeResult.error(*COMMAND_ERRORS["clearWidget"], "snapshot store write failed")
        self.provider.on_refresh_requested()
        return BridgeResult.success("Widget limpiado")

    def _is_supported(self, arguments: Any) -> BridgeResult:
        return BridgeResult.success(True)

    def _get_widget_info(self, arguments: Any) -> BridgeResult:
        return BridgeResult.success(self.info.model_dump())
