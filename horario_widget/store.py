"""
Snapshot Store
Flat key/value preference area holding the single live WidgetSnapshot.
Every save overwrites all keys; concurrent writers are last-write-wins.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pymongo.errors import PyMongoError

from .core.config import Settings
from .core.exceptions import PreferencesError
from .schemas.widget import DEFAULT_STATUS, WidgetSnapshot

logger = logging.getLogger(__name__)

PREFERENCES_COLLECTION = "widget_preferences"


class Preferences:
    """Backend interface: read the whole key/value area, or overwrite it"""

    name = "base"

    def read(self) -> Dict[str, Any]:
        raise NotImplementedError

    def write(self, values: Dict[str, Any]) -> None:
        raise NotImplementedError


class MemoryPreferences(Preferences):
    name = "memory"

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values = dict(values or {})

    def read(self) -> Dict[str, Any]:
        return dict(self._values)

    def write(self, values: Dict[str, Any]) -> None:
        self._values = dict(values)


class JsonFilePreferences(Preferences):
    """One JSON object on disk, replaced atomically on every write"""

    name = "file"

    def __init__(self, path):
        self.path = Path(path)

    def read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                values = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable preferences file {self.path}: {e}")
            return {}
        if not isinstance(values, dict):
            logger.warning(f"Preferences file {self.path} does not hold an object, ignoring it")
            return {}
        return values

    def write(self, values: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".prefs-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(values, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise PreferencesError(f"Failed to write preferences file: {e}", self.name) from e


class MongoPreferences(Preferences):
    """One document per installation in the widget_preferences collection"""

    name = "mongo"

    def __init__(self, collection, installation_id: str = "default"):
        self.collection = collection
        self.installation_id = installation_id

    def read(self) -> Dict[str, Any]:
        try:
            doc = self.collection.find_one({"_id": self.installation_id})
        except PyMongoError as e:
            raise PreferencesError(f"Failed to read preferences: {e}", self.name) from e
        if not doc:
            return {}
        doc.pop("_id", None)
        return doc

    def write(self, values: Dict[str, Any]) -> None:
        try:
            self.collection.replace_one(
                {"_id": self.installation_id},
                {"_id": self.installation_id, **values},
                upsert=True,
            )
        except PyMongoError as e:
            raise PreferencesError(f"Failed to write preferences: {e}", self.name) from e


class SnapshotStore:
    def __init__(self, preferences: Preferences, default_status: str = DEFAULT_STATUS):
        self.preferences = preferences
        self.default_status = default_status

    def load(self) -> WidgetSnapshot:
        """Read the live snapshot; never fails, absent or bad keys take defaults"""
        try:
            values = self.preferences.read()
        except Exception as e:
            logger.warning(f"Could not read widget snapshot from {self.preferences.name} preferences: {e}")
            values = {}
        return WidgetSnapshot.from_preferences(values, default_status=self.default_status)

    def save(self, snapshot: WidgetSnapshot) -> bool:
        """Overwrite the stored snapshot; False when the backend failed"""
        try:
            self.preferences.write(snapshot.to_preferences())
        except Exception as e:
            logger.error(f"Could not save widget snapshot to {self.preferences.name} preferences: {e}")
            return False
        logger.debug(f"Widget snapshot v{snapshot.version} saved ({self.preferences.name})")
        return True

    def next_version(self) -> int:
        return self.load().version + 1


def create_preferences(settings: Settings, get_database: Optional[Callable] = None) -> Preferences:
    """Build the preference backend named by PREFERENCES_BACKEND"""
    if settings.PREFERENCES_BACKEND == "memory":
        return MemoryPreferences()
    if settings.PREFERENCES_BACKEND == "mongo":
        if get_database is None:
            from .database import get_database
        return MongoPreferences(get_database()[PREFERENCES_COLLECTION], settings.INSTALLATION_ID)
    return JsonFilePreferences(settings.PREFERENCES_PATH)
