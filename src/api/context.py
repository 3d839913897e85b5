"""Application context: the resources a running service (or admin script) holds.

Built once at startup by open_context() and released when the block exits.
Nothing here lives in module globals.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from adapter.hashing.bcrypt_hasher import BcryptPasswordHasher
from adapter.mongodb.connection import MongoConnection
from adapter.mongodb.user_repository import MongoUserRepository
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from utils.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    mongo: MongoConnection
    password_hasher: PasswordHasher

    def user_repo(self) -> UserRepository | None:
        """Repository bound to the current database, or None if MongoDB is unreachable."""
        db = self.mongo.get_database()
        if db is None:
            return None
        return MongoUserRepository(db)


@contextmanager
def open_context(settings: Settings) -> Iterator[AppContext]:
    """Connect to MongoDB, verify indexes, and close the client on exit."""
    password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    mongo = MongoConnection(settings.mongo_url, settings.database_name)

    try:
        db = mongo.get_database()
        if db is not None:
            if MongoUserRepository(db).ensure_indexes():
                logger.info("MongoDB indexes verified/created successfully")
            else:
                logger.warning("Failed to create some MongoDB indexes")
        else:
            logger.warning("MongoDB unavailable, skipping index creation")

        yield AppContext(settings=settings, mongo=mongo, password_hasher=password_hasher)
    finally:
        mongo.close()
