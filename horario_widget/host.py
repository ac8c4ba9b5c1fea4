"""
Widget host
The runtime that owns widget instances and paints their text regions.
"""

import logging
import threading
from typing import Dict, List, Optional

from .core.exceptions import InstanceNotFoundError

logger = logging.getLogger(__name__)


class WidgetHost:
    """Interface of the surface the provider paints into"""

    def get_instance_ids(self) -> List[int]:
        raise NotImplementedError

    def update_instance(self, instance_id: int, regions: Dict[str, str]) -> None:
        raise NotImplementedError

    def get_instance_user(self, instance_id: int) -> Optional[str]:
        """User the instance was placed for, if the host knows it"""
        return None


class InMemoryWidgetHost(WidgetHost):
    """Keeps registered instances and the regions last painted into each"""

    def __init__(self):
        self._views: Dict[int, Dict[str, str]] = {}
        self._owners: Dict[int, Optional[str]] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.provider = None

    def attach(self, provider) -> None:
        self.provider = provider

    def get_instance_ids(self) -> List[int]:
        with self._lock:
            return sorted(self._views)

    def update_instance(self, instance_id: int, regions: Dict[str, str]) -> None:
        with self._lock:
            if instance_id not in self._views:
                logger.debug(f"Skipping paint of removed widget instance {instance_id}")
                return
            self._views[instance_id] = dict(regions)

    def get_view(self, instance_id: int) -> Dict[str, str]:
        with self._lock:
            if instance_id not in self._views:
                raise InstanceNotFoundError(instance_id)
            return dict(self._views[instance_id])

    def get_instance_user(self, instance_id: int) -> Optional[str]:
        with self._lock:
            return self._owners.get(instance_id)

    def add_instance(self, user_id: Optional[str] = None) -> int:
        """Register a new widget instance and paint it once"""
        with self._lock:
            instance_id = self._next_id
            self._next_id += 1
            first = not self._views
            self._views[instance_id] = {}
            self._owners[instance_id] = user_id
        logger.info(f"Widget instance {instance_id} added")

        if self.provider is not None:
            if first:
                self.provider.on_first_instance_added()
            self.provider.on_refresh_requested([instance_id], user_id=user_id)
        return instance_id

    def remove_instance(self, instance_id: int) -> None:
        with self._lock:
            if instance_id not in self._views:
                raise InstanceNotFoundError(instance_id)
            del self._views[instance_id]
            self._owners.pop(instance_id, None)
            last = not self._views
        logger.info(f"Widget instance {instance_id} removed")

        if last and self.provider is not None:
            self.provider.on_last_instance_removed()
