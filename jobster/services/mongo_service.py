"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. users - account profiles; the password field only ever holds a bcrypt hash
2. jobs  - job applications; every read and write is scoped by createdBy

Hashing happens in exactly two places: UserService.create and
UserService.update_password. Profile updates never touch the password field,
so a stored hash is never hashed a second time.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any
from pymongo import ReturnDocument
from pymongo.collection import Collection

from jobster.core.auth import hash_password, verify_password
from jobster.db.mongodb import MongoDatabase, COLLECTIONS
from jobster.services.query_builder import (
    JobListQuery,
    to_object_id,
    status_stats_pipeline,
    monthly_applications_pipeline,
    format_status_stats,
    format_monthly_applications,
)

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> Optional[dict]:
    """Return a JSON-serializable copy of a MongoDB document. The input is left untouched."""
    if doc is None:
        return None
    serialized = dict(doc)
    if "_id" in serialized:
        serialized["_id"] = str(serialized["_id"])
    if "createdBy" in serialized:
        serialized["createdBy"] = str(serialized["createdBy"])
    return serialized


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """
    Handles user accounts.
    Documents: {name, lastname, location, email, password}
    """

    def __init__(self, database: MongoDatabase):
        self.collection: Collection = database.get_collection(COLLECTIONS["users"])

    def create(self, name: str, email: str, password: str,
               lastname: str = "lastname", location: str = "my city") -> dict:
        """
        Insert a new user with a hashed password.

        Returns:
            The stored document (password is the hash, never the plaintext)
        """
        doc = {
            "name": name,
            "lastname": lastname,
            "location": location,
            "email": email,
            "password": hash_password(password),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Registered user %s", result.inserted_id)
        return doc

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email})

    def get_by_id(self, user_id) -> Optional[dict]:
        return self.collection.find_one({"_id": to_object_id(user_id)})

    def email_taken(self, email: str, exclude_user_id=None) -> bool:
        query: Dict[str, Any] = {"email": email}
        if exclude_user_id is not None:
            query["_id"] = {"$ne": to_object_id(exclude_user_id)}
        return self.collection.count_documents(query, limit=1) > 0

    def authenticate(self, email: str, password: str) -> Optional[dict]:
        """Return the user when email and password match, else None."""
        user = self.get_by_email(email)
        if not user or not verify_password(password, user["password"]):
            return None
        return user

    def update_profile(self, user_id, email: str, name: str, lastname: str, location: str) -> Optional[dict]:
        """Update profile fields only. The password hash is left as stored."""
        return self.collection.find_one_and_update(
            {"_id": to_object_id(user_id)},
            {"$set": {"email": email, "name": name, "lastname": lastname, "location": location}},
            return_document=ReturnDocument.AFTER,
        )

    def update_password(self, user_id, old_password: str, new_password: str) -> bool:
        """
        Replace the password after checking the current one.

        Returns:
            False if the user is missing or old_password does not match
        """
        user = self.get_by_id(user_id)
        if not user or not verify_password(old_password, user["password"]):
            return False
        self.collection.update_one(
            {"_id": user["_id"]},
            {"$set": {"password": hash_password(new_password)}}
        )
        logger.info("Password changed for user %s", user["_id"])
        return True


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobService:
    """
    Handles job applications owned by a user.
    Every method takes owner_id and includes it in the filter.
    """

    def __init__(self, database: MongoDatabase):
        self.collection: Collection = database.get_collection(COLLECTIONS["jobs"])

    def list(self, query: JobListQuery) -> List[dict]:
        """Fetch one page of jobs for a built listing query."""
        cursor = self.collection.find(query.filter)
        if query.sort:
            cursor = cursor.sort(query.sort)
        cursor = cursor.skip(query.skip).limit(query.limit)
        return serialize_docs(list(cursor))

    def count(self, query: JobListQuery) -> int:
        return self.collection.count_documents(query.filter)

    def get(self, job_id, owner_id) -> Optional[dict]:
        doc = self.collection.find_one({"_id": to_object_id(job_id), "createdBy": to_object_id(owner_id)})
        return serialize_doc(doc)

    def create(self, owner_id, fields: Dict[str, Any]) -> dict:
        """Insert a job with the owner injected from the session."""
        now = datetime.utcnow()
        doc = {
            **fields,
            "createdBy": to_object_id(owner_id),
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def update(self, job_id, owner_id, fields: Dict[str, Any]) -> Optional[dict]:
        """Partial update scoped to (id, owner). Returns the updated job or None."""
        doc = self.collection.find_one_and_update(
            {"_id": to_object_id(job_id), "createdBy": to_object_id(owner_id)},
            {"$set": {**fields, "updatedAt": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_doc(doc)

    def delete(self, job_id, owner_id) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(job_id), "createdBy": to_object_id(owner_id)})
        return result.deleted_count > 0

    def insert_many(self, owner_id, jobs: List[Dict[str, Any]]) -> int:
        """Bulk insert for seeding. Missing timestamps default to now."""
        now = datetime.utcnow()
        docs = [
            {
                **job,
                "createdBy": to_object_id(owner_id),
                "createdAt": job.get("createdAt", now),
                "updatedAt": job.get("updatedAt", now),
            }
            for job in jobs
        ]
        if not docs:
            return 0
        return len(self.collection.insert_many(docs).inserted_ids)

    def status_stats(self, owner_id) -> Dict[str, int]:
        rows = list(self.collection.aggregate(status_stats_pipeline(owner_id)))
        return format_status_stats(rows)

    def monthly_applications(self, owner_id) -> List[Dict[str, Any]]:
        rows = list(self.collection.aggregate(monthly_applications_pipeline(owner_id)))
        return format_monthly_applications(rows)

