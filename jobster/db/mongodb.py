"""
MongoDB Connection Utility

MongoDB stores:
- users: account profiles with bcrypt password hashes
- jobs: job applications, each owned by exactly one user (createdBy)

The client is owned by a MongoDatabase instance that the application
constructs explicitly, connects on startup and closes on shutdown.
Route handlers receive it through FastAPI dependencies.
"""
import logging
from typing import Optional

from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from jobster.core.config import Settings

logger = logging.getLogger(__name__)

# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "jobs": "jobs",
}


class MongoDatabase:
    """
    Explicit lifecycle wrapper around a MongoClient.

    Usage:
        database = MongoDatabase(settings.mongodb_uri, settings.mongodb_db)
        database.connect()
        jobs = database.get_collection(COLLECTIONS["jobs"])
        ...
        database.close()
    """

    def __init__(self, uri: str, db_name: str, timeout_ms: int = 5000, client: Optional[MongoClient] = None):
        self.uri = uri
        self.db_name = db_name
        self.timeout_ms = timeout_ms
        self._client: Optional[MongoClient] = client
        self._db: Optional[Database] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoDatabase":
        return cls(settings.mongodb_uri, settings.mongodb_db, timeout_ms=settings.mongodb_timeout_ms)

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    def connect(self) -> Database:
        """Create the client (connection pooling handled internally by pymongo)."""
        if self._client is None:
            self._client = MongoClient(self.uri, serverSelectionTimeoutMS=self.timeout_ms)
        self._db = self._client[self.db_name]
        logger.info("MongoDB client ready for database '%s'", self.db_name)
        return self._db

    def close(self):
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB client closed")
        self._client = None
        self._db = None

    @property
    def db(self) -> Database:
        if self._db is None:
            raise RuntimeError("MongoDatabase.connect() has not been called")
        return self._db

    def get_collection(self, name: str) -> Collection:
        return self.db[name]

    def ping(self) -> bool:
        """
        Test if MongoDB is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            self._client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB connection failed: %s", e)
            return False

    def init_indexes(self):
        """
        Create indexes for the queries the API runs.
        Call this once during app startup.
        """
        # Email is the login key
        self.get_collection(COLLECTIONS["users"]).create_index("email", unique=True)

        # Every job query filters on the owner, listings sort by creation time
        self.get_collection(COLLECTIONS["jobs"]).create_index([
            ("createdBy", ASCENDING),
            ("createdAt", DESCENDING)
        ])

        logger.info("MongoDB indexes created successfully")


def get_database(request: Request) -> MongoDatabase:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/jobs")
        def list_jobs(database: MongoDatabase = Depends(get_database)):
            ...
    """
    return request.app.state.database
