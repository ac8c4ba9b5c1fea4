"""
Widget data sources
RemoteSource queries the schedule and event collections directly;
CachedSource returns the snapshot last pushed by the app.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from .core.config import Settings
from .core.utils import day_window
from .schemas.schedule import Event, parse_schedule_document
from .schemas.widget import ScheduleData
from .store import SnapshotStore

logger = logging.getLogger(__name__)

SCHEDULES_COLLECTION = "horarios"
EVENTS_COLLECTION = "eventos"


class DataSource:
    name = "base"

    def load(self, now: datetime, user_id: Optional[str] = None) -> ScheduleData:
        raise NotImplementedError


class RemoteSource(DataSource):
    """Reads the user's active schedule document and today's events"""

    name = "remote"

    def __init__(self, get_database: Callable):
        self._get_database = get_database

    def load(self, now: datetime, user_id: Optional[str] = None) -> ScheduleData:
        if not user_id:
            logger.info("Remote widget refresh without a signed-in user")
            return ScheduleData(signed_in=False)

        data = ScheduleData()
        self._load_schedule(data, user_id)
        self._load_events(data, now, user_id)
        return data

    def _load_schedule(self, data: ScheduleData, user_id: str) -> None:
        try:
            db = self._get_database()
            # More than one active schedule is not expected; the first match wins
            doc = db[SCHEDULES_COLLECTION].find_one({"userId": user_id, "esActivo": True})
        except (PyMongoError, ConnectionError) as e:
            logger.error(f"Error loading schedule for user {user_id}: {e}")
            data.schedule_error = str(e)
            return

        if not doc:
            data.no_schedule = True
            return
        data.slots, data.subjects = parse_schedule_document(doc)
        logger.debug(f"Loaded {len(data.slots)} slots and {len(data.subjects)} subjects for user {user_id}")

    def _load_events(self, data: ScheduleData, now: datetime, user_id: str) -> None:
        start, end = day_window(now)
        try:
            db = self._get_database()
            cursor = db[EVENTS_COLLECTION].find({
                "uid": user_id,
                "fecha": {"$gte": start, "$lt": end}
            }).sort("fecha", ASCENDING)
            docs = list(cursor)
        except (PyMongoError, ConnectionError) as e:
            logger.error(f"Error loading events for user {user_id}: {e}")
            data.events_error = str(e)
            return

        events = []
        for doc in docs:
            event = Event.from_document(doc)
            if event is not None:
                events.append(event)
        data.events = events


class CachedSource(DataSource):
    """Reads the snapshot pushed through the app bridge"""

    name = "cached"

    def __init__(self, store: SnapshotStore):
        self.store = store

    def load(self, now: datetime, user_id: Optional[str] = None) -> ScheduleData:
        return ScheduleData(snapshot=self.store.load())


def create_source(settings: Settings, store: SnapshotStore, get_database: Optional[Callable] = None) -> DataSource:
    """Build the data source named by WIDGET_DATA_SOURCE"""
    if settings.WIDGET_DATA_SOURCE == "remote":
        if get_database is None:
            from .database import get_database
        return RemoteSource(get_database)
    return CachedSource(store)
