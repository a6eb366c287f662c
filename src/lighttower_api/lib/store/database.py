"""SQLAlchemy-backed entity store.

Every operation runs inside a unit of work: one session with one
transaction. A call made outside ``transaction()`` gets its own unit and
commits before returning; calls made inside share the enclosing unit, which
commits when the block exits and rolls back if it raises. Rows are converted
to the shared dataclass records so callers never see ORM instances.

Tables use ``sqlite_autoincrement`` so SQLite never hands out an id again
after the row holding it is deleted. Ids consumed by a rolled-back tower
insert are reserved explicitly, keeping ``LT-{id:03d}`` codes moving forward.
"""

import dataclasses
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lighttower_api import models as orm
from lighttower_api.core.exceptions import DuplicateTowerIdError
from lighttower_api.lib.store.base import BaseStore, Predicate
from lighttower_api.lib.store.types import (
    IMMUTABLE_FIELDS,
    ActivityLog,
    LightTower,
    MaintenanceReport,
    MaintenanceTask,
    User,
    format_tower_code,
)

R = TypeVar("R")


class _SynthesizedCodeTaken(DuplicateTowerIdError):
    """The code derived from a new tower's id already belongs to another tower."""

    def __init__(self, tower_id: str, tower_pk: int) -> None:
        self.tower_pk = tower_pk
        super().__init__(tower_id)


def _as_utc(value: Any) -> Any:
    """SQLite drops tzinfo on round-trip; stored values are always UTC."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_record(row: Any, record_type: type[R]) -> R:
    """Copy mapped column values from an ORM row into a dataclass record."""
    values = {f.name: _as_utc(getattr(row, f.name)) for f in dataclasses.fields(record_type)}  # type: ignore[arg-type]
    return record_type(**values)


def _column_values(model: type, fields: dict[str, Any], *, drop_none: bool) -> dict[str, Any]:
    columns = set(model.__table__.columns.keys())  # type: ignore[attr-defined]
    return {k: v for k, v in fields.items() if k in columns and not (drop_none and v is None)}


class DatabaseStore(BaseStore):
    """Store backend over the ORM models in ``lighttower_api.models``.

    Args:
        session_factory: Async session factory bound to an initialized engine.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._active: ContextVar[AsyncSession | None] = ContextVar(f"database_store_session_{id(self)}", default=None)

    @property
    def backend_name(self) -> str:
        return "database"

    @asynccontextmanager
    async def _unit(self) -> AsyncGenerator[AsyncSession]:
        """Yield the enclosing unit's session, or open and own a new unit."""
        active = self._active.get()
        if active is not None:
            yield active
            return
        async with self._session_factory() as session:
            token = self._active.set(session)
            try:
                async with session.begin():
                    yield session
            except _SynthesizedCodeTaken as exc:
                await self._reserve_tower_pk(exc.tower_pk)
                raise
            finally:
                self._active.reset(token)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[None]:
        async with self._unit():
            yield

    async def _reserve_tower_pk(self, tower_pk: int) -> None:
        """Consume a tower id whose insert was rolled back.

        Inserting and deleting a row with that explicit id moves SQLite's
        autoincrement counter past it. Sequence-backed databases have already
        consumed it, so the round trip is harmless there.
        """
        async with self._session_factory() as session, session.begin():
            row = orm.LightTower(
                id=tower_pk,
                tower_id=f"reserved-{uuid.uuid4().hex}",
                location="",
                constituency="",
                ward="",
                created_at=datetime.now(UTC),
            )
            session.add(row)
            await session.flush()
            await session.delete(row)
        logger.warning(f"Tower id {tower_pk} skipped: its code {format_tower_code(tower_pk)} is already taken")

    async def _get(self, model: type, pk: int, record_type: type[R]) -> R | None:
        async with self._unit() as session:
            row = await session.get(model, pk)
            return _to_record(row, record_type) if row is not None else None

    async def _first(self, model: type, record_type: type[R], *criteria: Any) -> R | None:
        async with self._unit() as session:
            result = await session.execute(select(model).where(*criteria))
            row = result.scalar_one_or_none()
            return _to_record(row, record_type) if row is not None else None

    async def _scan(self, model: type, record_type: type[R], predicate: Predicate | None, *criteria: Any) -> list[R]:
        async with self._unit() as session:
            result = await session.execute(select(model).where(*criteria).order_by(model.id))  # type: ignore[attr-defined]
            records = [_to_record(row, record_type) for row in result.scalars().all()]
        return [r for r in records if predicate is None or predicate(r)]

    async def _insert(self, model: type, record_type: type[R], fields: dict[str, Any], stamp: str | None) -> R:
        values = _column_values(model, fields, drop_none=True)
        values.pop("id", None)
        if stamp is not None:
            values[stamp] = datetime.now(UTC)
        async with self._unit() as session:
            row = model(**values)
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return _to_record(row, record_type)

    async def _merge(self, model: type, record_type: type[R], pk: int, fields: dict[str, Any]) -> R | None:
        protected = IMMUTABLE_FIELDS[record_type]
        changes = {k: v for k, v in _column_values(model, fields, drop_none=False).items() if k not in protected}
        async with self._unit() as session:
            row = await session.get(model, pk)
            if row is None:
                return None
            for name, value in changes.items():
                setattr(row, name, value)
            await session.flush()
            await session.refresh(row)
            return _to_record(row, record_type)

    # Users

    async def get_user(self, user_id: int) -> User | None:
        return await self._get(orm.User, user_id, User)

    async def get_user_by_username(self, username: str) -> User | None:
        return await self._first(orm.User, User, orm.User.username == username)

    async def list_users(self, predicate: Predicate | None = None) -> list[User]:
        return await self._scan(orm.User, User, predicate)

    async def create_user(self, fields: dict[str, Any]) -> User:
        if await self.get_user_by_username(fields.get("username", "")) is not None:
            msg = f"Username {fields.get('username')!r} already exists"
            raise ValueError(msg)
        return await self._insert(orm.User, User, fields, None)

    # Light towers

    async def get_tower(self, tower_pk: int) -> LightTower | None:
        return await self._get(orm.LightTower, tower_pk, LightTower)

    async def get_tower_by_code(self, tower_id: str) -> LightTower | None:
        return await self._first(orm.LightTower, LightTower, orm.LightTower.tower_id == tower_id)

    async def list_towers(self, predicate: Predicate | None = None) -> list[LightTower]:
        return await self._scan(orm.LightTower, LightTower, predicate)

    async def list_towers_by_status(self, status: str) -> list[LightTower]:
        return await self._scan(orm.LightTower, LightTower, None, orm.LightTower.status == status)

    async def create_tower(self, fields: dict[str, Any]) -> LightTower:
        requested = fields.get("tower_id")
        values = _column_values(orm.LightTower, fields, drop_none=True)
        values.pop("id", None)
        # Placeholder keeps the NOT NULL/unique constraint satisfied until the id is known.
        values["tower_id"] = requested or f"pending-{uuid.uuid4().hex}"
        values["created_at"] = datetime.now(UTC)

        async with self._unit() as session:
            if requested and await self.get_tower_by_code(requested) is not None:
                raise DuplicateTowerIdError(requested)
            row = orm.LightTower(**values)
            session.add(row)
            try:
                await session.flush()
            except IntegrityError:
                raise DuplicateTowerIdError(requested or values["tower_id"]) from None
            if not requested:
                code = format_tower_code(row.id)
                if await self.get_tower_by_code(code) is not None:
                    raise _SynthesizedCodeTaken(code, row.id)
                row.tower_id = code
                await session.flush()
            await session.refresh(row)
            return _to_record(row, LightTower)

    async def update_tower(self, tower_pk: int, fields: dict[str, Any]) -> LightTower | None:
        new_code = fields.get("tower_id")
        async with self._unit():
            if new_code:
                holder = await self.get_tower_by_code(new_code)
                if holder is not None and holder.id != tower_pk:
                    raise DuplicateTowerIdError(new_code)
            return await self._merge(orm.LightTower, LightTower, tower_pk, fields)

    # Maintenance reports

    async def get_report(self, report_id: int) -> MaintenanceReport | None:
        return await self._get(orm.MaintenanceReport, report_id, MaintenanceReport)

    async def list_reports(self, predicate: Predicate | None = None) -> list[MaintenanceReport]:
        return await self._scan(orm.MaintenanceReport, MaintenanceReport, predicate)

    async def list_reports_for_tower(self, tower_pk: int) -> list[MaintenanceReport]:
        return await self._scan(
            orm.MaintenanceReport, MaintenanceReport, None, orm.MaintenanceReport.tower_id == tower_pk
        )

    async def create_report(self, fields: dict[str, Any]) -> MaintenanceReport:
        return await self._insert(orm.MaintenanceReport, MaintenanceReport, fields, "reported_at")

    # Activity logs

    async def get_activity_log(self, log_id: int) -> ActivityLog | None:
        return await self._get(orm.ActivityLog, log_id, ActivityLog)

    async def list_activity_logs(self, predicate: Predicate | None = None) -> list[ActivityLog]:
        return await self._scan(orm.ActivityLog, ActivityLog, predicate)

    async def list_activity_for_tower(self, tower_pk: int) -> list[ActivityLog]:
        return await self._scan(orm.ActivityLog, ActivityLog, None, orm.ActivityLog.tower_id == tower_pk)

    async def recent_activity(self, limit: int) -> list[ActivityLog]:
        async with self._unit() as session:
            result = await session.execute(
                select(orm.ActivityLog)
                .order_by(orm.ActivityLog.performed_at.desc(), orm.ActivityLog.id.desc())
                .limit(limit)
            )
            return [_to_record(row, ActivityLog) for row in result.scalars().all()]

    async def create_activity_log(self, fields: dict[str, Any]) -> ActivityLog:
        return await self._insert(orm.ActivityLog, ActivityLog, fields, "performed_at")

    # Maintenance tasks

    async def get_task(self, task_id: int) -> MaintenanceTask | None:
        return await self._get(orm.MaintenanceTask, task_id, MaintenanceTask)

    async def list_tasks(self, predicate: Predicate | None = None) -> list[MaintenanceTask]:
        return await self._scan(orm.MaintenanceTask, MaintenanceTask, predicate)

    async def create_task(self, fields: dict[str, Any]) -> MaintenanceTask:
        return await self._insert(orm.MaintenanceTask, MaintenanceTask, fields, "created_at")

    async def update_task(self, task_id: int, fields: dict[str, Any]) -> MaintenanceTask | None:
        return await self._merge(orm.MaintenanceTask, MaintenanceTask, task_id, fields)
