"""Base repository: generic reads, savepoint-guarded create, and conflict translation."""

import re
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import ConflictException
from app.domain.roles import FIELD_LABELS
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import unique_constraint_name

ModelType = TypeVar("ModelType", bound=Base)

_CONSTRAINT_RE = re.compile(r"uq_[a-z0-9_]+")
_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: (\w+)\.(\w+)$")


def _constraint_name(exc: IntegrityError) -> str | None:
    """Return the violated constraint name from a driver error, if it can be found.

    asyncpg exposes constraint_name on the wrapped exception; other drivers only
    mention it in the message. SQLite names the table and column instead, which
    maps back to the uq_<table>_<column> convention.
    """
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return str(name)
    message = str(orig)
    match = _CONSTRAINT_RE.search(message)
    if match:
        return match.group(0)
    sqlite_match = _SQLITE_UNIQUE_RE.search(message.strip())
    if sqlite_match:
        return unique_constraint_name(*sqlite_match.groups())
    return None


def conflict_from_integrity_error(exc: IntegrityError, table: str) -> ConflictException:
    """Translate a unique-constraint violation into ConflictException(field).

    Constraints follow uq_<table>_<column>; the column is mapped to its
    client-facing field name.
    """
    name = _constraint_name(exc) or ""
    prefix = f"uq_{table}_"
    column = name[len(prefix):] if name.startswith(prefix) else ""
    field = FIELD_LABELS.get(column, column) or "resource"
    return ConflictException(field)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, get_all, create and delete.

    create runs inside a savepoint so a unique violation rolls back only that
    insert and the request transaction stays usable (compensation, retries).
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    @property
    def table_name(self) -> str:
        return str(self.model.__tablename__)

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Return records with pagination."""
        result = await self.db.execute(select(self.model).offset(skip).limit(limit))
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record; ConflictException on unique violations."""
        try:
            async with self.db.begin_nested():
                self.db.add(obj)
                await self.db.flush()
        except IntegrityError as e:
            raise conflict_from_integrity_error(e, self.table_name) from e
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record."""
        await self.db.delete(obj)
        await self.db.flush()
