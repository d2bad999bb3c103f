#!/usr/bin/env python3
"""
Populate Script

Seeds the jobs collection from a JSON array of job objects, all owned by one
existing user. Entries may carry ISO-8601 "createdAt" values so the stats
dashboard has history to show.

Usage:
    python scripts/populate.py --file MOCK_DATA.json --email demo@example.com
"""
import argparse
import json
import logging
import sys
from datetime import datetime

from jobster.core.config import get_settings
from jobster.core.logging_config import configure_logging
from jobster.db.mongodb import MongoDatabase
from jobster.schemas.schemas import JobCreate
from jobster.services.mongo_service import JobService, UserService

logger = logging.getLogger("populate")


def load_jobs(path: str) -> list:
    """Read and validate job entries. Invalid entries abort the run."""
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON array")

    jobs = []
    for entry in raw:
        job = JobCreate(**{k: v for k, v in entry.items() if k in JobCreate.model_fields}).model_dump(mode="json")
        if entry.get("createdAt"):
            created = datetime.fromisoformat(entry["createdAt"].replace("Z", "+00:00"))
            job["createdAt"] = created.replace(tzinfo=None)
            job["updatedAt"] = job["createdAt"]
        jobs.append(job)
    return jobs


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the jobs collection")
    parser.add_argument("--file", required=True, help="JSON array of jobs")
    parser.add_argument("--email", required=True, help="Email of the user who will own the jobs")
    parser.add_argument("--replace", action="store_true", help="Delete the user's existing jobs first")
    args = parser.parse_args(argv)

    configure_logging()
    settings = get_settings()
    database = MongoDatabase.from_settings(settings)
    database.connect()
    try:
        user = UserService(database).get_by_email(args.email)
        if not user:
            logger.error("No user registered with email %s", args.email)
            return 1

        jobs = load_jobs(args.file)
        service = JobService(database)
        if args.replace:
            removed = service.collection.delete_many({"createdBy": user["_id"]}).deleted_count
            logger.info("Removed %d existing jobs", removed)
        inserted = service.insert_many(user["_id"], jobs)
        logger.info("DB populated successfully: %d jobs for %s", inserted, args.email)
        return 0
    finally:
        database.close()


if __name__ == "__main__":
    sys.exit(main())
