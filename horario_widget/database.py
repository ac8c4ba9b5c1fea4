import logging
import threading
import time
from typing import Optional, Dict, Any
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError, OperationFailure, PyMongoError

from .core.config import settings

logger = logging.getLogger(__name__)

# Collections the widget reads or writes, with the indexes its queries rely on
WIDGET_INDEXES = {
    "horarios": [[("userId", ASCENDING), ("esActivo", ASCENDING)]],
    "eventos": [[("uid", ASCENDING), ("fecha", ASCENDING)]],
    "widget_preferences": [],
}


class DatabaseManager:
    """Lazily opened MongoDB handle shared by the remote source and the preference store"""

    def __init__(self, url: Optional[str] = None, database_name: Optional[str] = None,
                 max_retries: int = 3, retry_delay: float = 1.0):
        self.url = url or settings.MONGODB_URL
        self.database_name = database_name or settings.MONGODB_DATABASE
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.client: Optional[MongoClient] = None
        self.database: Optional[Database] = None
        self.failed_attempts = 0
        self._lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return self.database is not None

    def _open(self) -> MongoClient:
        # tz_aware so event timestamps come back comparable with the widget clock
        client = MongoClient(
            self.url,
            maxPoolSize=20,
            connectTimeoutMS=10000,
            serverSelectionTimeoutMS=5000,
            retryReads=True,
            tz_aware=True
        )
        client.admin.command('ping')
        return client

    def connect(self) -> bool:
        """Open the client, retrying with exponential backoff"""
        with self._lock:
            if self.connected:
                return True

            for attempt in range(1, self.max_retries + 1):
                try:
                    logger.info(f"Connecting to MongoDB {self.database_name} ({attempt}/{self.max_retries})")
                    self.client = self._open()
                    self.database = self.client[self.database_name]
                    self.failed_attempts = 0
                    logger.info(f"✅ Widget database ready: {self.database_name}")
                    return True
                except (ConnectionFailure, ServerSelectionTimeoutError, OperationFailure) as e:
                    self.failed_attempts += 1
                    logger.error(f"❌ MongoDB connection attempt {attempt} failed: {e}")
                    if attempt < self.max_retries:
                        delay = self.retry_delay * (2 ** (attempt - 1))
                        logger.info(f"Retrying in {delay}s")
                        time.sleep(delay)

            logger.error(f"❌ Giving up on MongoDB after {self.max_retries} attempts")
            return False

    def disconnect(self):
        with self._lock:
            if self.client is not None:
                self.client.close()
                logger.info("MongoDB connection closed")
            self.client = None
            self.database = None

    def get_database(self) -> Database:
        """Connected database handle; raises ConnectionError when MongoDB is unreachable"""
        if not self.connected and not self.connect():
            raise ConnectionError("Failed to connect to MongoDB")
        return self.database

    def ensure_indexes(self) -> None:
        db = self.get_database()
        existing = set(db.list_collection_names())
        for name, indexes in WIDGET_INDEXES.items():
            if name not in existing:
                db.create_collection(name)
            for keys in indexes:
                db[name].create_index(keys)
        logger.info("Widget collection indexes ensured")

    def check_health(self) -> Dict[str, Any]:
        """Ping the server and count documents in the widget collections"""
        if not self.connected:
            return {
                "status": "disconnected",
                "database_name": self.database_name,
                "failed_attempts": self.failed_attempts
            }

        try:
            started = time.perf_counter()
            self.database.command('ping')
            return {
                "status": "healthy",
                "database_name": self.database_name,
                "ping_time_ms": round((time.perf_counter() - started) * 1000, 2),
                "collections": {
                    name: self.database[name].estimated_document_count() for name in WIDGET_INDEXES
                }
            }
        except PyMongoError as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return {
                "status": "unhealthy",
                "database_name": self.database_name,
                "error": str(e)
            }


# Global database manager instance
db_manager = DatabaseManager()

def connect_to_mongo() -> bool:
    return db_manager.connect()

def close_mongo_connection():
    db_manager.disconnect()

def get_database() -> Database:
    return db_manager.get_database()

def check_database_health() -> Dict[str, Any]:
    return db_manager.check_health()

def is_database_connected() -> bool:
    return db_manager.connected
