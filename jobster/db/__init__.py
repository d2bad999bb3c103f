"""
Database module - MongoDB connection lifecycle.
"""
from jobster.db.mongodb import MongoDatabase, get_database, COLLECTIONS

__all__ = [
    "MongoDatabase",
    "get_database",
    "COLLECTIONS"
]
