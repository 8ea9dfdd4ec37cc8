"""API router for user accounts.

Endpoints:
    POST /signup - Create an account
    POST /signin - Check credentials

Signin only verifies the password and returns the user; no session or token
is issued.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from campus_events.core.dependencies.database import DbSession
from campus_events.features.users.schemas import (
    UserAuthResponse,
    UserCreate,
    UserCredentials,
    UserResponse,
)
from campus_events.features.users.service import UserService

router = APIRouter(tags=["users"])


@router.post(
    "/signup",
    response_model=UserAuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={409: {"description": "User already exists"}},
)
async def signup(payload: UserCreate, session: DbSession) -> UserAuthResponse:
    user = await UserService(session).signup(payload)
    return UserAuthResponse(message="Signup successful", user=UserResponse.model_validate(user))


@router.post(
    "/signin",
    response_model=UserAuthResponse,
    summary="Sign in",
    responses={401: {"description": "Invalid credentials"}},
)
async def signin(credentials: UserCredentials, session: DbSession) -> UserAuthResponse:
    user = await UserService(session).signin(credentials)
    return UserAuthResponse(message="Login successful", user=UserResponse.model_validate(user))
