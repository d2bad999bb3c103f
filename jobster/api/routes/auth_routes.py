"""
Authentication Routes

POST /auth/register - Register new user (rate-limited)
POST /auth/login - Login and get JWT token (rate-limited)
PATCH /auth/updateUser - Update profile, returns a fresh token
PATCH /auth/updatePassword - Change password
"""

import logging

from fastapi import APIRouter, Depends

from jobster.api.deps import get_user_service
from jobster.core.auth import create_access_token, require_write_access, CurrentUser
from jobster.core.config import Settings, get_app_settings
from jobster.core.errors import BadRequestError, UnauthenticatedError, NotFoundError
from jobster.core.rate_limit import auth_rate_limit
from jobster.services.mongo_service import UserService
from jobster.schemas.schemas import (
    RegisterRequest, LoginRequest, UpdateUserRequest, UpdatePasswordRequest,
    UserResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _user_payload(user: dict, settings: Settings) -> dict:
    """Profile envelope returned by register, login and updateUser."""
    return {
        "user": {
            "email": user["email"],
            "lastName": user["lastname"],
            "location": user["location"],
            "name": user["name"],
            "token": create_access_token(user["_id"], user["name"], settings=settings),
        }
    }


@router.post("/register", response_model=UserResponse, status_code=201, dependencies=[Depends(auth_rate_limit)])
def register(
    request: RegisterRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings)
):
    """Register a new user account and log it in."""
    if users.email_taken(request.email):
        raise BadRequestError("Email already registered")

    user = users.create(
        name=request.name,
        email=request.email,
        password=request.password,
        lastname=request.lastName,
        location=request.location,
    )
    return _user_payload(user, settings)


@router.post("/login", response_model=UserResponse, dependencies=[Depends(auth_rate_limit)])
def login(
    request: LoginRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings)
):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    if not request.email or not request.password:
        raise BadRequestError("Please provide email and password")

    user = users.authenticate(request.email, request.password)
    if not user:
        logger.info("Failed login for %s", request.email)
        raise UnauthenticatedError("Invalid Credentials")

    return _user_payload(user, settings)


@router.patch("/updateUser", response_model=UserResponse)
def update_user(
    request: UpdateUserRequest,
    current: CurrentUser = Depends(require_write_access),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings)
):
    """
    Update profile fields. All four fields are required.

    A new token is issued because the token carries the user's name.
    """
    if not request.email or not request.lastName or not request.location or not request.name:
        raise BadRequestError("Please provide email, lastname, location, name")

    if users.email_taken(request.email, exclude_user_id=current.user_id):
        raise BadRequestError("Email already registered")

    user = users.update_profile(
        current.user_id,
        email=request.email,
        name=request.name,
        lastname=request.lastName,
        location=request.location,
    )
    if not user:
        raise NotFoundError(f"No user with id {current.user_id}")

    return _user_payload(user, settings)


@router.patch("/updatePassword", response_model=MessageResponse)
def update_password(
    request: UpdatePasswordRequest,
    current: CurrentUser = Depends(require_write_access),
    users: UserService = Depends(get_user_service)
):
    """Change the password. The current password must be supplied."""
    if not users.update_password(current.user_id, request.oldPassword, request.newPassword):
        raise UnauthenticatedError("Invalid Credentials")
    return MessageResponse(msg="Password updated")
