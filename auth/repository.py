"""
User store access for the auth flow.

Two record types come out of the store:

* ``UserRecord`` — the public projection, no password material at all.
* ``CredentialRecord`` — returned only by ``find_credentials_by_email``;
  carries the bcrypt hash and knows how to check a plaintext against it.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import DuplicateEmail
from auth.password import hash_password, verify_password
from config.settings import config
from database.models import ROLES, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str
    email: str
    role: str
    created_at: datetime
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None


@dataclass(frozen=True)
class CredentialRecord(UserRecord):
    password_hash: str = ""

    def compare_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    def public(self) -> UserRecord:
        return UserRecord(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            created_at=self.created_at,
            phone=self.phone,
            age=self.age,
            gender=self.gender,
        )


@dataclass(frozen=True)
class NewUser:
    name: str
    email: str
    password: str
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    role: Optional[str] = None


def _present(value) -> bool:
    return value is not None and value != ""


def _to_record(row: User) -> UserRecord:
    return UserRecord(
        id=str(row.user_id),
        name=row.name,
        email=row.email,
        role=row.role,
        created_at=row.created_at,
        phone=row.phone,
        age=row.age,
        gender=row.gender,
    )


def _to_credentials(row: User) -> CredentialRecord:
    return CredentialRecord(
        id=str(row.user_id),
        name=row.name,
        email=row.email,
        role=row.role,
        created_at=row.created_at,
        phone=row.phone,
        age=row.age,
        gender=row.gender,
        password_hash=row.password_hash,
    )


class UserRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _row_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        try:
            uid = uuid.UUID(str(user_id))
        except ValueError:
            return None
        row = await self._session.get(User, uid)
        return _to_record(row) if row is not None else None

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        row = await self._row_by_email(email)
        return _to_record(row) if row is not None else None

    async def find_credentials_by_email(self, email: str) -> Optional[CredentialRecord]:
        row = await self._row_by_email(email)
        return _to_credentials(row) if row is not None else None

    async def create(self, new_user: NewUser) -> UserRecord:
        """
        Insert a user, hashing the password first.

        Raises ``DuplicateEmail`` when the unique index on ``email``
        rejects the row (e.g. a concurrent registration won the race), and
        ``ValueError`` for a role outside ``ROLES``.
        """
        role = new_user.role or config.default_role
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role!r}")
        row = User(
            user_id=uuid.uuid4(),
            name=new_user.name,
            email=new_user.email,
            password_hash=hash_password(new_user.password),
            phone=new_user.phone,
            age=new_user.age,
            gender=new_user.gender,
            role=role,
        )
        self._session.add(row)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateEmail(new_user.email) from exc
        return _to_record(row)

    async def backfill_contact(
        self,
        user: UserRecord,
        phone: Optional[str] = None,
        age: Optional[int] = None,
        gender: Optional[str] = None,
    ) -> Tuple[UserRecord, bool]:
        """
        Fill phone / age / gender only where the stored value is absent.

        Existing values are never overwritten.  Nothing is written when no
        field changes.  Returns the (possibly updated) public record and
        whether a write happened.
        """
        updates = {}
        for field, value in (("phone", phone), ("age", age), ("gender", gender)):
            if _present(value) and not _present(getattr(user, field)):
                updates[field] = value

        public = user.public() if isinstance(user, CredentialRecord) else user
        if not updates:
            return public, False

        row = await self._session.get(User, uuid.UUID(user.id))
        if row is None:
            return public, False
        for field, value in updates.items():
            # row may have changed since the credentials were read
            if not _present(getattr(row, field)):
                setattr(row, field, value)
        await self._session.commit()
        logger.debug("Backfilled %s for user %s", sorted(updates), user.id)
        return _to_record(row), True
