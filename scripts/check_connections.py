#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the MongoDB connection is working.
Usage: python scripts/check_connections.py
"""
import sys

from jobster.core.config import get_settings
from jobster.db.mongodb import MongoDatabase, COLLECTIONS


def main() -> int:
    settings = get_settings()
    print("=" * 50)
    print("JOBSTER API - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    database = MongoDatabase.from_settings(settings)
    database.connect()
    try:
        if not database.ping():
            print("    ❌ MongoDB: FAILED")
            return 1
        print("    ✅ MongoDB: CONNECTED")

        print("\n[2] Collections...")
        for name in COLLECTIONS.values():
            count = database.get_collection(name).estimated_document_count()
            print(f"    {name}: {count} documents")
    finally:
        database.close()

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
