"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Field names follow the JSON contract the frontend expects (camelCase).
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class JobStatus(str, Enum):
    pending = "pending"
    interview = "interview"
    declined = "declined"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"
    contract = "contract"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    lastName: str = Field("lastname", min_length=5, max_length=50)
    location: str = Field("my city", min_length=5, max_length=50)

class LoginRequest(BaseModel):
    # Optional so a missing field gets the "Please provide ..." message
    email: Optional[str] = None
    password: Optional[str] = None

class UpdateUserRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    lastName: Optional[str] = Field(None, min_length=5, max_length=50)
    location: Optional[str] = Field(None, min_length=5, max_length=50)

class UpdatePasswordRequest(BaseModel):
    oldPassword: str
    newPassword: str = Field(..., min_length=6)

class UserProfile(BaseModel):
    email: str
    lastName: str
    location: str
    name: str
    token: str

class UserResponse(BaseModel):
    user: UserProfile


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    company: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    status: JobStatus = JobStatus.pending
    jobType: JobType = JobType.full_time

class JobUpdate(BaseModel):
    # Empty strings are let through here and rejected by the route
    company: Optional[str] = None
    position: Optional[str] = None
    status: Optional[JobStatus] = None
    jobType: Optional[JobType] = None

class Job(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    company: str
    position: str
    status: JobStatus
    jobType: JobType
    createdBy: str
    createdAt: datetime
    updatedAt: datetime

class JobResponse(BaseModel):
    job: Job

class JobListResponse(BaseModel):
    jobs: List[Job]
    totalJobs: int
    numOfPages: int


# ============================================================
# STATS SCHEMAS
# ============================================================

class StatusStats(BaseModel):
    pending: int = 0
    interview: int = 0
    declined: int = 0

class MonthlyApplication(BaseModel):
    date: str
    count: int

class StatsResponse(BaseModel):
    defaultStats: StatusStats
    monthlyApplications: List[MonthlyApplication]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    msg: str
