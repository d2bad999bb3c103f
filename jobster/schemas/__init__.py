"""
Schemas module - Request/Response schemas for API endpoints.

All schemas live in jobster.schemas.schemas and are re-exported here.
"""

from jobster.schemas.schemas import (
    JobStatus, JobType,
    RegisterRequest, LoginRequest, UpdateUserRequest, UpdatePasswordRequest,
    UserProfile, UserResponse,
    JobCreate, JobUpdate, Job, JobResponse, JobListResponse,
    StatusStats, MonthlyApplication, StatsResponse, MessageResponse
)
