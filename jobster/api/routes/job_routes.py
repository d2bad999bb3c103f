"""
Job Routes (all require a bearer token, all scoped to the token's user)

GET /jobs - List own jobs with search, filters, sort and pagination
GET /jobs/stats - Status counts and monthly application trend
GET /jobs/{job_id} - Get one job
POST /jobs - Create job
PATCH /jobs/{job_id} - Update job (not for the demo account)
DELETE /jobs/{job_id} - Delete job (not for the demo account)
"""

from fastapi import APIRouter, Depends, Query, Response
from typing import Optional

from jobster.api.deps import get_job_service
from jobster.core.auth import get_current_user, require_write_access, CurrentUser
from jobster.core.errors import BadRequestError, NotFoundError
from jobster.services.mongo_service import JobService
from jobster.services.query_builder import build_job_list_query
from jobster.schemas.schemas import (
    JobCreate, JobUpdate, JobResponse, JobListResponse, StatsResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse)
def list_jobs(
    search: Optional[str] = Query(None, description="Search in position"),
    status: Optional[str] = Query(None, description="pending | interview | declined | all"),
    jobType: Optional[str] = Query(None, description="full-time | part-time | internship | contract | all"),
    sort: Optional[str] = Query(None, description="latest | oldest | a-z | z-a"),
    # Kept as strings: junk values fall back to defaults instead of failing validation
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service)
):
    """List the current user's jobs with filters and pagination."""
    query = build_job_list_query(
        user.user_id,
        search=search,
        status=status,
        job_type=jobType,
        sort=sort,
        page=page,
        limit=limit,
    )
    total = jobs.count(query)
    # Past the last page there is nothing to fetch
    results = [] if query.skip and query.skip >= total else jobs.list(query)
    return {"jobs": results, "totalJobs": total, "numOfPages": query.num_of_pages(total)}


@router.get("/stats", response_model=StatsResponse)
def show_stats(user: CurrentUser = Depends(get_current_user), jobs: JobService = Depends(get_job_service)):
    """Dashboard stats: counts per status and the last six months of applications."""
    return {
        "defaultStats": jobs.status_stats(user.user_id),
        "monthlyApplications": jobs.monthly_applications(user.user_id),
    }


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, user: CurrentUser = Depends(get_current_user), jobs: JobService = Depends(get_job_service)):
    """Get details of one of the current user's jobs."""
    job = jobs.get(job_id, user.user_id)
    if not job:
        raise NotFoundError(f"No job with id {job_id}")
    return {"job": job}


@router.post("", response_model=JobResponse, status_code=201)
def create_job(job: JobCreate, user: CurrentUser = Depends(get_current_user), jobs: JobService = Depends(get_job_service)):
    """Create a job. The owner always comes from the token, never the body."""
    created = jobs.create(user.user_id, job.model_dump(mode="json"))
    return {"job": created}


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: str,
    update: JobUpdate,
    user: CurrentUser = Depends(require_write_access),
    jobs: JobService = Depends(get_job_service)
):
    """Update a job. Only fields present in the body are changed."""
    if update.company == "" or update.position == "":
        raise BadRequestError("Company or Position fields cannot be empty")

    fields = update.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    job = jobs.update(job_id, user.user_id, fields)
    if not job:
        raise NotFoundError(f"No job with id {job_id}")
    return {"job": job}


@router.delete("/{job_id}")
def delete_job(
    job_id: str,
    user: CurrentUser = Depends(require_write_access),
    jobs: JobService = Depends(get_job_service)
):
    """Delete a job. Responds 200 with an empty body."""
    if not jobs.delete(job_id, user.user_id):
        raise NotFoundError(f"No job with id {job_id}")
    return Response(status_code=200)
