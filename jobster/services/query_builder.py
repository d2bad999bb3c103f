"""
Job Query Builder - filter, sort and pagination assembly for job listings,
plus the two aggregation pipelines behind the stats dashboard.

Nothing here talks to MongoDB. The functions return plain filter documents,
sort specs and pipelines that JobService hands to pymongo, so each piece can
be tested on its own.

Example:
    query = build_job_list_query(user_id, search="dev", status="all", sort="a-z")
    query.filter  -> {"createdBy": ObjectId(...), "position": {"$regex": "dev", "$options": "i"}}
    query.sort    -> [("position", 1)]
    query.skip, query.limit -> 0, 10
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

DEFAULT_PAGE_LIMIT = 10
# Upper bounds keep skip/limit inside a 64-bit BSON integer
MAX_PAGE_LIMIT = 1000
MAX_PAGE = 10 ** 9
MONTHLY_TREND_MONTHS = 6

# Value meaning "no filter" for status/jobType selects
ALL = "all"

SORT_OPTIONS: Dict[str, List[Tuple[str, int]]] = {
    "latest": [("createdAt", DESCENDING)],
    "oldest": [("createdAt", ASCENDING)],
    "a-z": [("position", ASCENDING)],
    "z-a": [("position", DESCENDING)],
}

STATUS_KEYS = ("pending", "interview", "declined")


def to_object_id(value) -> ObjectId:
    """Coerce a user/job id to ObjectId. Raises bson.errors.InvalidId on garbage."""
    return value if isinstance(value, ObjectId) else ObjectId(value)


# ============================================================
# FILTER BUILDER
# ============================================================

class JobQueryBuilder:
    """
    Accumulates named filter clauses for the jobs collection.

    The owner clause is set in the constructor so a built filter is never
    cross-user. Each other clause is optional and skipped when the input
    says "no filter".
    """

    def __init__(self, owner_id):
        self.clauses: Dict[str, Dict[str, Any]] = {}
        self.owned_by(owner_id)

    def owned_by(self, owner_id) -> "JobQueryBuilder":
        self.clauses["owner"] = {"createdBy": to_object_id(owner_id)}
        return self

    def search_position(self, search: Optional[str]) -> "JobQueryBuilder":
        """Case-insensitive substring match on position. Input is matched literally."""
        if search:
            self.clauses["search"] = {"position": {"$regex": re.escape(search), "$options": "i"}}
        return self

    def with_status(self, status: Optional[str]) -> "JobQueryBuilder":
        if status and status != ALL:
            self.clauses["status"] = {"status": status}
        return self

    def with_job_type(self, job_type: Optional[str]) -> "JobQueryBuilder":
        if job_type and job_type != ALL:
            self.clauses["jobType"] = {"jobType": job_type}
        return self

    def build(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        for clause in self.clauses.values():
            query.update(clause)
        return query


# ============================================================
# SORT + PAGINATION
# ============================================================

def resolve_sort(sort: Optional[str]) -> Optional[List[Tuple[str, int]]]:
    """Map a sort option to a pymongo sort spec. Unknown values mean storage order."""
    if not sort:
        return None
    return SORT_OPTIONS.get(sort)


def _parse_int(value) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def resolve_pagination(page=None, limit=None) -> Tuple[int, int]:
    """
    Return (skip, limit).

    limit falls back to 10 when missing, non-numeric or below 1.
    page falls back to the first page the same way.
    Larger values are clamped to MAX_PAGE_LIMIT and MAX_PAGE.
    """
    per_page = _parse_int(limit)
    if per_page is None or per_page < 1:
        per_page = DEFAULT_PAGE_LIMIT
    per_page = min(per_page, MAX_PAGE_LIMIT)

    page_number = _parse_int(page)
    if page_number is None or page_number < 1:
        return 0, per_page
    page_number = min(page_number, MAX_PAGE)
    return (page_number - 1) * per_page, per_page


def count_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


@dataclass
class JobListQuery:
    filter: Dict[str, Any]
    sort: Optional[List[Tuple[str, int]]] = None
    skip: int = 0
    limit: int = DEFAULT_PAGE_LIMIT
    clauses: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def num_of_pages(self, total: int) -> int:
        return count_pages(total, self.limit)


def build_job_list_query(
    owner_id,
    search: Optional[str] = None,
    status: Optional[str] = None,
    job_type: Optional[str] = None,
    sort: Optional[str] = None,
    page=None,
    limit=None,
) -> JobListQuery:
    """Translate raw listing query parameters into a JobListQuery."""
    builder = (
        JobQueryBuilder(owner_id)
        .search_position(search)
        .with_status(status)
        .with_job_type(job_type)
    )
    skip, per_page = resolve_pagination(page, limit)
    return JobListQuery(
        filter=builder.build(),
        sort=resolve_sort(sort),
        skip=skip,
        limit=per_page,
        clauses=dict(builder.clauses),
    )


# ============================================================
# STATS PIPELINES
# ============================================================

def status_stats_pipeline(owner_id) -> List[Dict[str, Any]]:
    """Count a user's jobs per status."""
    return [
        {"$match": {"createdBy": to_object_id(owner_id)}},
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
    ]


def monthly_applications_pipeline(owner_id, months: int = MONTHLY_TREND_MONTHS) -> List[Dict[str, Any]]:
    """Count a user's jobs per (year, month) of creation, newest months first."""
    return [
        {"$match": {"createdBy": to_object_id(owner_id)}},
        {"$group": {
            "_id": {
                "year": {"$year": "$createdAt"},
                "month": {"$month": "$createdAt"},
            },
            "count": {"$sum": 1},
        }},
        {"$sort": {"_id.year": -1, "_id.month": -1}},
        {"$limit": months},
    ]


def format_status_stats(rows: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Reshape [{"_id": "pending", "count": 3}, ...] into
    {"pending": 3, "interview": 0, "declined": 0}.
    """
    counts = {row["_id"]: row["count"] for row in rows}
    return {key: counts.get(key, 0) for key in STATUS_KEYS}


def format_month_label(year: int, month: int) -> str:
    """(2023, 1) -> "Jan 2023"."""
    return date(year, month, 1).strftime("%b %Y")


def format_monthly_applications(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Turn newest-first pipeline rows into oldest-first chart points."""
    points = [
        {"date": format_month_label(row["_id"]["year"], row["_id"]["month"]), "count": row["count"]}
        for row in rows
    ]
    points.reverse()
    return points
