"""
Widget Provider
Host lifecycle callbacks: load from the configured data source,
format, and paint every requested widget instance.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from .core.config import settings as default_settings
from .core.messages import Messages
from .formatter import format_data
from .host import WidgetHost
from .schemas.widget import RenderedText, WidgetSnapshot
from .sources import DataSource

logger = logging.getLogger(__name__)


class WidgetProvider:
    def __init__(
        self,
        host: WidgetHost,
        source: DataSource,
        messages: Optional[Messages] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.host = host
        self.source = source
        self.messages = messages or Messages(default_settings.WIDGET_LOCALE)
        self.clock = clock or default_settings.now
        self._rendered_version = 0

    @property
    def rendered_version(self) -> int:
        return self._rendered_version

    def on_refresh_requested(
        self,
        instance_ids: Optional[Iterable[int]] = None,
        user_id: Optional[str] = None
    ) -> Optional[RenderedText]:
        """Repaint the given instances (all live ones when None).

        Without an explicit user, each instance is rendered for the user it
        was placed for. Returns the last text painted, or None when nothing was.
        """
        ids = list(instance_ids) if instance_ids is not None else self.host.get_instance_ids()
        if not ids:
            logger.debug("Widget refresh requested with no live instances")
            return None

        owners: Dict[Optional[str], List[int]] = {}
        for instance_id in ids:
            owner = user_id or self.host.get_instance_user(instance_id)
            owners.setdefault(owner, []).append(instance_id)

        now = self.clock()
        rendered = None
        for owner, group in owners.items():
            data = self.source.load(now, owner)
            if self._is_stale(data.snapshot):
                return None

            rendered = format_data(now, data, self.messages)
            regions = rendered.regions()
            for instance_id in group:
                self.host.update_instance(instance_id, regions)

        logger.info(f"Widget refreshed from {self.source.name} source for {len(ids)} instance(s)")
        return rendered

    def _is_stale(self, snapshot: Optional[WidgetSnapshot]) -> bool:
        if snapshot is None or not snapshot.version:
            return False
        if snapshot.version < self._rendered_version:
            logger.info(
                f"Ignoring stale widget snapshot v{snapshot.version} "
                f"(already rendered v{self._rendered_version})"
            )
            return True
        self._rendered_version = snapshot.version
        return False

    def on_first_instance_added(self) -> None:
        logger.info("First widget instance added")

    def on_last_instance_removed(self) -> None:
        logger.info("Last widget instance removed")
        self._rendered_version = 0
