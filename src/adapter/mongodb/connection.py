import logging
import threading

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Suppress verbose PyMongo logs
logging.getLogger('pymongo').setLevel(logging.WARNING)


class MongoConnection:
    """Owns a MongoClient for the lifetime of the application context.

    Connection strategy:
    1. Return cached client if healthy (ping succeeds)
    2. If cached client fails, attempt reconnection
    3. If initial connection failed (config issue), don't retry
    """

    def __init__(self, url: str | None, database_name: str):
        self.url = url
        self.database_name = database_name
        self._client: MongoClient | None = None
        self._connected_once = False
        self._config_failed = False
        self._lock = threading.Lock()

    def _connect(self) -> MongoClient:
        client = MongoClient(
            self.url,
            tz_aware=True,  # return created_at/updated_at as aware UTC datetimes
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            maxPoolSize=10,
            minPoolSize=0,
            maxIdleTimeMS=30000,
            waitQueueTimeoutMS=10000,
            retryWrites=True,
            retryReads=True,
        )
        client.admin.command('ping')
        return client

    def get_client(self) -> MongoClient | None:
        """Get MongoDB client, reconnecting if the cached one stopped answering.

        Safe to call from several threadpool workers at once; the ping,
        reconnect and swap of the cached client happen under one lock.

        Returns:
            MongoDB client or None if connection fails
        """
        with self._lock:
            return self._get_client_locked()

    def _get_client_locked(self) -> MongoClient | None:
        if self._client is not None:
            try:
                self._client.admin.command('ping')
                return self._client
            except PyMongoError:
                logger.debug("[MONGODB] Cached client failed ping, attempting reconnection...")
                stale, self._client = self._client, None
                stale.close()

        if self._config_failed:
            return None

        if not self.url:
            logger.error("[MONGODB] MONGO_URL not configured.")
            self._config_failed = True
            return None

        try:
            client = self._connect()
        except (ConnectionFailure, PyMongoError) as e:
            if not self._connected_once:
                logger.error("[MONGODB] Initial connection failed", extra={"error": str(e)[:200]})
                self._config_failed = True
            else:
                logger.warning("[MONGODB] Reconnection failed", extra={"error": str(e)[:200]})
            return None

        if not self._connected_once:
            logger.info("[MONGODB] Connected successfully", extra={"database": self.database_name})
        self._connected_once = True
        self._client = client
        return client

    def get_database(self) -> Database | None:
        client = self.get_client()
        if client is None:
            return None
        return client[self.database_name]

    def ping(self) -> bool:
        return self.get_client() is not None

    def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()
            logger.info("[MONGODB] Connection closed")
