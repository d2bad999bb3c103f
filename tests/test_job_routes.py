"""
Unit tests for jobster/api/routes/job_routes.py

Tests the job endpoints end to end down to the (mocked) collection:
- GET /api/v1/jobs
- GET /api/v1/jobs/stats
- GET /api/v1/jobs/{id}
- POST /api/v1/jobs
- PATCH /api/v1/jobs/{id}
- DELETE /api/v1/jobs/{id}
"""

import asyncio
import time
from datetime import datetime
from unittest.mock import MagicMock

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from conftest import make_cursor

JOBS_URL = "/api/v1/jobs"


def job_doc(owner_id, **overrides):
    """A job document as pymongo returns it."""
    doc = {
        "_id": ObjectId(),
        "company": "Acme",
        "position": "Backend Developer",
        "status": "pending",
        "jobType": "full-time",
        "createdBy": ObjectId(owner_id),
        "createdAt": datetime(2023, 1, 15, 10, 0, 0),
        "updatedAt": datetime(2023, 1, 15, 10, 0, 0),
    }
    doc.update(overrides)
    return doc


# =============================================================================
# LIST
# =============================================================================


def test_list_jobs(client: TestClient, jobs_collection, auth_headers, user_id):
    docs = [job_doc(user_id), job_doc(user_id, position="Frontend Developer")]
    jobs_collection.find.return_value = make_cursor(docs)
    jobs_collection.count_documents.return_value = 2

    response = client.get(JOBS_URL, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["totalJobs"] == 2
    assert data["numOfPages"] == 1
    assert [job["position"] for job in data["jobs"]] == ["Backend Developer", "Frontend Developer"]
    assert all(job["createdBy"] == user_id for job in data["jobs"])
    assert "_id" in data["jobs"][0]


def test_list_jobs_filter_is_owner_scoped(client: TestClient, jobs_collection, auth_headers, user_id):
    client.get(JOBS_URL, headers=auth_headers, params={
        "search": "dev", "status": "interview", "jobType": "all", "sort": "z-a"
    })

    query = jobs_collection.find.call_args[0][0]
    assert query == {
        "createdBy": ObjectId(user_id),
        "position": {"$regex": "dev", "$options": "i"},
        "status": "interview",
    }
    assert jobs_collection.count_documents.call_args[0][0] == query
    jobs_collection.find.return_value.sort.assert_called_once_with([("position", -1)])


def test_list_jobs_no_declined(client: TestClient, jobs_collection, auth_headers):
    response = client.get(JOBS_URL, headers=auth_headers, params={"status": "declined", "limit": "5", "page": "1"})

    assert response.status_code == 200
    assert response.json() == {"jobs": [], "totalJobs": 0, "numOfPages": 0}


def test_list_jobs_page_past_end_is_empty(client: TestClient, jobs_collection, auth_headers):
    jobs_collection.count_documents.return_value = 12

    response = client.get(JOBS_URL, headers=auth_headers, params={"page": "9", "limit": "5"})

    assert response.status_code == 200
    assert response.json() == {"jobs": [], "totalJobs": 12, "numOfPages": 3}
    jobs_collection.find.assert_not_called()


def test_list_jobs_huge_page_is_empty(client: TestClient, jobs_collection, auth_headers):
    jobs_collection.count_documents.return_value = 3

    response = client.get(JOBS_URL, headers=auth_headers, params={"page": "100000000000000000000", "limit": "10"})

    assert response.status_code == 200
    assert response.json() == {"jobs": [], "totalJobs": 3, "numOfPages": 1}
    jobs_collection.find.assert_not_called()


def test_list_jobs_huge_limit_is_clamped(client: TestClient, jobs_collection, auth_headers):
    response = client.get(JOBS_URL, headers=auth_headers, params={"limit": "99999999999999999999"})

    assert response.status_code == 200
    jobs_collection.find.return_value.limit.assert_called_once_with(1000)


def test_list_jobs_junk_pagination_uses_defaults(client: TestClient, jobs_collection, auth_headers):
    response = client.get(JOBS_URL, headers=auth_headers, params={"page": "abc", "limit": "xyz"})

    assert response.status_code == 200
    cursor = jobs_collection.find.return_value
    cursor.skip.assert_called_once_with(0)
    cursor.limit.assert_called_once_with(10)


# =============================================================================
# STATS
# =============================================================================


def test_stats(client: TestClient, jobs_collection, auth_headers, user_id):
    jobs_collection.aggregate.side_effect = [
        iter([{"_id": "pending", "count": 3}, {"_id": "interview", "count": 2}]),
        iter([
            {"_id": {"year": 2023, "month": 1}, "count": 4},
            {"_id": {"year": 2022, "month": 12}, "count": 1},
        ]),
    ]

    response = client.get(f"{JOBS_URL}/stats", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "defaultStats": {"pending": 3, "interview": 2, "declined": 0},
        "monthlyApplications": [
            {"date": "Dec 2022", "count": 1},
            {"date": "Jan 2023", "count": 4},
        ],
    }
    for call in jobs_collection.aggregate.call_args_list:
        assert call[0][0][0] == {"$match": {"createdBy": ObjectId(user_id)}}


def test_stats_allowed_for_demo_account(client: TestClient, demo_headers):
    response = client.get(f"{JOBS_URL}/stats", headers=demo_headers)
    assert response.status_code == 200
    assert response.json()["defaultStats"] == {"pending": 0, "interview": 0, "declined": 0}


# =============================================================================
# GET ONE
# =============================================================================


def test_get_job(client: TestClient, jobs_collection, auth_headers, user_id):
    doc = job_doc(user_id)
    jobs_collection.find_one.return_value = doc

    response = client.get(f"{JOBS_URL}/{doc['_id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["job"]["company"] == "Acme"
    jobs_collection.find_one.assert_called_once_with({"_id": doc["_id"], "createdBy": ObjectId(user_id)})


def test_get_job_of_other_user_is_not_found(client: TestClient, jobs_collection, auth_headers):
    jobs_collection.find_one.return_value = None
    job_id = str(ObjectId())

    response = client.get(f"{JOBS_URL}/{job_id}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"msg": f"No job with id {job_id}"}


def test_get_job_malformed_id(client: TestClient, auth_headers):
    response = client.get(f"{JOBS_URL}/not-an-id", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"msg": "No item found with id : not-an-id"}


# =============================================================================
# CREATE
# =============================================================================


def test_create_job_injects_owner(client: TestClient, jobs_collection, auth_headers, user_id):
    jobs_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())

    response = client.post(JOBS_URL, headers=auth_headers, json={
        "company": "Acme", "position": "Dev", "createdBy": str(ObjectId())
    })

    assert response.status_code == 201
    job = response.json()["job"]
    assert job["createdBy"] == user_id
    assert job["status"] == "pending"
    assert job["jobType"] == "full-time"
    stored = jobs_collection.insert_one.call_args[0][0]
    assert stored["createdBy"] == ObjectId(user_id)


@pytest.mark.parametrize("body", [
    {"position": "Dev"},
    {"company": "Acme"},
    {"company": "Acme", "position": "Dev", "status": "hired"},
    {"company": "Acme", "position": "Dev", "jobType": "gig"},
])
def test_create_job_validation(client: TestClient, jobs_collection, auth_headers, body):
    response = client.post(JOBS_URL, headers=auth_headers, json=body)
    assert response.status_code == 400
    jobs_collection.insert_one.assert_not_called()


# =============================================================================
# UPDATE
# =============================================================================


def test_update_job(client: TestClient, jobs_collection, auth_headers, user_id):
    doc = job_doc(user_id, status="interview")
    jobs_collection.find_one_and_update.return_value = doc

    response = client.patch(f"{JOBS_URL}/{doc['_id']}", headers=auth_headers, json={"status": "interview"})

    assert response.status_code == 200
    assert response.json()["job"]["status"] == "interview"
    query, update = jobs_collection.find_one_and_update.call_args[0][:2]
    assert query == {"_id": doc["_id"], "createdBy": ObjectId(user_id)}
    assert update["$set"]["status"] == "interview"
    assert "company" not in update["$set"]


@pytest.mark.parametrize("body", [{"company": ""}, {"position": ""}, {"company": "", "position": "Dev"}])
def test_update_job_empty_company_or_position(client: TestClient, jobs_collection, auth_headers, body):
    response = client.patch(f"{JOBS_URL}/{ObjectId()}", headers=auth_headers, json=body)

    assert response.status_code == 400
    assert response.json() == {"msg": "Company or Position fields cannot be empty"}
    jobs_collection.find_one_and_update.assert_not_called()


def test_update_job_invalid_status(client: TestClient, jobs_collection, auth_headers):
    response = client.patch(f"{JOBS_URL}/{ObjectId()}", headers=auth_headers, json={"status": "hired"})
    assert response.status_code == 400
    jobs_collection.find_one_and_update.assert_not_called()


def test_update_job_not_found(client: TestClient, jobs_collection, auth_headers):
    jobs_collection.find_one_and_update.return_value = None
    response = client.patch(f"{JOBS_URL}/{ObjectId()}", headers=auth_headers, json={"status": "declined"})
    assert response.status_code == 404


@pytest.mark.parametrize("body", [{"status": "declined"}, {"company": ""}, {"status": "hired"}])
def test_update_job_rejected_for_demo_account(client: TestClient, jobs_collection, demo_headers, body):
    response = client.patch(f"{JOBS_URL}/{ObjectId()}", headers=demo_headers, json=body)

    assert response.status_code == 400
    assert response.json() == {"msg": "Test User. Read only."}
    jobs_collection.find_one_and_update.assert_not_called()


# =============================================================================
# DELETE
# =============================================================================


def test_delete_job(client: TestClient, jobs_collection, auth_headers, user_id):
    job_id = ObjectId()
    jobs_collection.delete_one.return_value = MagicMock(deleted_count=1)

    response = client.delete(f"{JOBS_URL}/{job_id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.content == b""
    jobs_collection.delete_one.assert_called_once_with({"_id": job_id, "createdBy": ObjectId(user_id)})


def test_delete_job_not_found(client: TestClient, jobs_collection, auth_headers):
    jobs_collection.delete_one.return_value = MagicMock(deleted_count=0)
    response = client.delete(f"{JOBS_URL}/{ObjectId()}", headers=auth_headers)
    assert response.status_code == 404


def test_delete_job_rejected_for_demo_account(client: TestClient, jobs_collection, demo_headers):
    response = client.delete(f"{JOBS_URL}/{ObjectId()}", headers=demo_headers)

    assert response.status_code == 400
    assert response.json() == {"msg": "Test User. Read only."}
    jobs_collection.delete_one.assert_not_called()


# =============================================================================
# MISC
# =============================================================================


def test_unknown_route(client: TestClient):
    response = client.get("/api/v1/nope")
    assert response.status_code == 404
    assert response.json() == {"msg": "Route does not exist"}


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "mongodb": "connected"}


def test_slow_queries_do_not_block_other_requests(app, jobs_collection, auth_headers):
    """Handlers run in the threadpool, so blocking pymongo calls overlap."""

    def slow_find(*args, **kwargs):
        time.sleep(0.4)
        return make_cursor([])

    jobs_collection.find.side_effect = slow_find

    async def fire():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as async_client:
            started = time.perf_counter()
            responses = await asyncio.gather(*[
                async_client.get(JOBS_URL, headers=auth_headers) for _ in range(4)
            ])
            return responses, time.perf_counter() - started

    responses, elapsed = asyncio.run(fire())

    assert all(response.status_code == 200 for response in responses)
    assert elapsed < 1.2
