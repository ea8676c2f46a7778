"""
Auth API routes — register, login, me.

Route prefix: /api/auth
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from auth.dependencies import get_auth_service, get_current_user_id
from auth.schemas import ApiResponse, ErrorResponse, LoginRequest, RegisterRequest
from auth.service import AuthOutcome, AuthService

router = APIRouter(tags=["auth"])

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _respond(outcome: AuthOutcome) -> JSONResponse:
    return JSONResponse(status_code=outcome.status_code, content=outcome.to_body())


@router.post(
    "/register",
    response_model=ApiResponse,
    status_code=201,
    responses={
        200: {"model": ApiResponse, "description": "Existing patient recognized"},
        409: {
            "model": ErrorResponse,
            "description": "Another registration for the same email committed first. "
            "Added on top of the 201 / 200 / 400 / 500 responses so clients can "
            "tell this race apart from an ordinary duplicate.",
        },
        **_ERRORS,
    },
)
async def register(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Register a new user, or recognise an existing one with the same password."""
    return _respond(await service.register(req))


@router.post("/login", response_model=ApiResponse, responses=_ERRORS)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Login with email + password."""
    return _respond(await service.login(req))


@router.get("/me", response_model=ApiResponse, responses={404: {"model": ErrorResponse}, **_ERRORS})
async def me(
    user_id: str = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Return the profile of the authenticated user."""
    return _respond(await service.current_user(user_id))
