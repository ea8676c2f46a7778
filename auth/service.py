"""
Auth flow — register, login, current user.

``AuthService`` is framework-free: it talks to a ``UserRepository`` and a
``TokenIssuer`` and either returns an ``AuthOutcome`` or raises an
``AuthError``.  The routes turn outcomes into the JSON envelope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from auth import errors
from auth.errors import AuthError, DuplicateEmail, ErrorKind
from auth.jwt import TokenIssuer
from auth.repository import NewUser, UserRecord, UserRepository
from auth.schemas import (
    ApiResponse,
    AuthData,
    LoginRequest,
    ProfileView,
    RegisterRequest,
    UserView,
)

logger = logging.getLogger(__name__)

REGISTERED = "User registered successfully"
RECOGNIZED = "Existing patient recognized. Logged in successfully."
LOGGED_IN = "Login successful"


@dataclass
class AuthOutcome:
    status_code: int
    user: Union[UserView, ProfileView]
    message: Optional[str] = None
    token: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        body = ApiResponse(
            success=True,
            message=self.message,
            data=AuthData(user=self.user, token=self.token),
        )
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)


def user_view(user: UserRecord) -> UserView:
    return UserView(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        phone=user.phone,
    )


def profile_view(user: UserRecord) -> ProfileView:
    return ProfileView(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
    )


class AuthService:
    def __init__(self, repository: UserRepository, token_issuer: TokenIssuer):
        self._users = repository
        self._tokens = token_issuer

    async def register(self, req: RegisterRequest) -> AuthOutcome:
        """
        Create an account, or recognise a returning registrant.

        An existing email with the matching password logs the user in and
        backfills any missing phone / age / gender.  An existing email with
        no password or the wrong one is refused without touching the record.
        """
        existing = await self._users.find_credentials_by_email(req.email)

        if existing is not None:
            if not req.password:
                raise AuthError(ErrorKind.DUPLICATE_ACCOUNT, errors.ACCOUNT_EXISTS_LOGIN)
            if not existing.compare_password(req.password):
                raise AuthError(
                    ErrorKind.DUPLICATE_ACCOUNT, errors.ACCOUNT_EXISTS_ORIGINAL_PASSWORD
                )

            user, updated = await self._users.backfill_contact(
                existing, phone=req.phone, age=req.age, gender=req.gender
            )
            token = self._tokens.issue(user.id)
            logger.info(
                "Registration for existing user %s authenticated (profile updated: %s)",
                user.id,
                updated,
            )
            return AuthOutcome(200, user_view(user), RECOGNIZED, token)

        if not req.name or not req.password:
            raise AuthError(
                ErrorKind.VALIDATION, "Please provide name, email and password"
            )

        try:
            user = await self._users.create(
                NewUser(
                    name=req.name,
                    email=req.email,
                    password=req.password,
                    phone=req.phone,
                    age=req.age,
                    gender=req.gender,
                )
            )
        except DuplicateEmail:
            logger.warning("Lost registration race for %s", req.email)
            raise AuthError(ErrorKind.CONFLICT, errors.REGISTRATION_CONFLICT)

        token = self._tokens.issue(user.id)
        logger.info("Registered user %s (%s)", user.name, user.id)
        return AuthOutcome(201, user_view(user), REGISTERED, token)

    async def login(self, req: LoginRequest) -> AuthOutcome:
        """Login with email + password."""
        if not req.email or not req.password:
            raise AuthError(ErrorKind.VALIDATION, errors.MISSING_LOGIN_FIELDS)

        user = await self._users.find_credentials_by_email(req.email)
        if user is None or not user.compare_password(req.password):
            logger.warning("Failed login for %s", req.email)
            raise AuthError(ErrorKind.INVALID_CREDENTIALS, errors.INVALID_CREDENTIALS)

        token = self._tokens.issue(user.id)
        logger.info("Login: %s (%s)", user.name, user.id)
        return AuthOutcome(200, user_view(user.public()), LOGGED_IN, token)

    async def current_user(self, user_id: str) -> AuthOutcome:
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise AuthError(ErrorKind.NOT_FOUND, errors.USER_NOT_FOUND)
        return AuthOutcome(200, profile_view(user))
