"""Volatile in-process entity store.

Each entity type lives in its own insertion-ordered dict with a private id
counter. Mutating methods contain no await points, so each call is atomic
with respect to other coroutines on the event loop. Records are copied on
the way in and out; callers never hold a reference into the store.

A transaction snapshots every table and restores the snapshot if the block
fails. Id counters are not restored, so ids given out inside a failed
block are never handed out again.
"""

import copy
import dataclasses
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

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

T = TypeVar("T")


class _Table(Generic[T]):
    """One entity map plus its id sequence."""

    def __init__(self, record_type: type[T], timestamp_field: str | None) -> None:
        self.record_type = record_type
        self.timestamp_field = timestamp_field
        self.rows: dict[int, T] = {}
        self.next_id = 1
        self._field_names = {f.name for f in dataclasses.fields(record_type)}  # type: ignore[arg-type]

    def allocate_id(self) -> int:
        pk = self.next_id
        self.next_id += 1
        return pk

    def build(self, pk: int, fields: dict[str, Any]) -> T:
        values = {k: v for k, v in fields.items() if v is not None and k in self._field_names}
        values["id"] = pk
        if self.timestamp_field is not None:
            values[self.timestamp_field] = datetime.now(UTC)
        return self.record_type(**values)

    def get(self, pk: int) -> T | None:
        row = self.rows.get(pk)
        return copy.copy(row) if row is not None else None

    def scan(self, predicate: Predicate | None) -> list[T]:
        return [copy.copy(row) for row in self.rows.values() if predicate is None or predicate(row)]

    def merge(self, pk: int, fields: dict[str, Any]) -> T | None:
        existing = self.rows.get(pk)
        if existing is None:
            return None
        protected = IMMUTABLE_FIELDS[self.record_type]
        changes = {k: v for k, v in fields.items() if k in self._field_names and k not in protected}
        updated = dataclasses.replace(existing, **changes)  # type: ignore[type-var]
        self.rows[pk] = updated
        return copy.copy(updated)


class MemoryStore(BaseStore):
    """Default store backend. All data is lost when the process exits."""

    def __init__(self) -> None:
        self._users: _Table[User] = _Table(User, None)
        self._towers: _Table[LightTower] = _Table(LightTower, "created_at")
        self._reports: _Table[MaintenanceReport] = _Table(MaintenanceReport, "reported_at")
        self._logs: _Table[ActivityLog] = _Table(ActivityLog, "performed_at")
        self._tasks: _Table[MaintenanceTask] = _Table(MaintenanceTask, "created_at")
        self._in_transaction: ContextVar[bool] = ContextVar(f"memory_store_tx_{id(self)}", default=False)

    @property
    def backend_name(self) -> str:
        return "memory"

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[None]:
        if self._in_transaction.get():
            yield
            return
        tables = (self._users, self._towers, self._reports, self._logs, self._tasks)
        snapshot = [dict(table.rows) for table in tables]
        token = self._in_transaction.set(True)
        try:
            yield
        except BaseException:
            for table, rows in zip(tables, snapshot, strict=True):
                table.rows = rows
            raise
        finally:
            self._in_transaction.reset(token)

    # Users

    async def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        matches = self._users.scan(lambda u: u.username == username)
        return matches[0] if matches else None

    async def list_users(self, predicate: Predicate | None = None) -> list[User]:
        return self._users.scan(predicate)

    async def create_user(self, fields: dict[str, Any]) -> User:
        if self._users.scan(lambda u: u.username == fields.get("username")):
            msg = f"Username {fields.get('username')!r} already exists"
            raise ValueError(msg)
        user = self._users.build(self._users.allocate_id(), fields)
        self._users.rows[user.id] = user
        return copy.copy(user)

    # Light towers

    def _code_taken(self, tower_id: str, exclude_pk: int | None = None) -> bool:
        return any(t.tower_id == tower_id and t.id != exclude_pk for t in self._towers.rows.values())

    async def get_tower(self, tower_pk: int) -> LightTower | None:
        return self._towers.get(tower_pk)

    async def get_tower_by_code(self, tower_id: str) -> LightTower | None:
        matches = self._towers.scan(lambda t: t.tower_id == tower_id)
        return matches[0] if matches else None

    async def list_towers(self, predicate: Predicate | None = None) -> list[LightTower]:
        return self._towers.scan(predicate)

    async def create_tower(self, fields: dict[str, Any]) -> LightTower:
        requested = fields.get("tower_id")
        if requested and self._code_taken(requested):
            raise DuplicateTowerIdError(requested)
        pk = self._towers.allocate_id()
        tower_id = requested or format_tower_code(pk)
        if not requested and self._code_taken(tower_id):
            raise DuplicateTowerIdError(tower_id)
        tower = self._towers.build(pk, {**fields, "tower_id": tower_id})
        self._towers.rows[pk] = tower
        return copy.copy(tower)

    async def update_tower(self, tower_pk: int, fields: dict[str, Any]) -> LightTower | None:
        new_code = fields.get("tower_id")
        if new_code and self._code_taken(new_code, exclude_pk=tower_pk):
            raise DuplicateTowerIdError(new_code)
        return self._towers.merge(tower_pk, fields)

    # Maintenance reports

    async def get_report(self, report_id: int) -> MaintenanceReport | None:
        return self._reports.get(report_id)

    async def list_reports(self, predicate: Predicate | None = None) -> list[MaintenanceReport]:
        return self._reports.scan(predicate)

    async def create_report(self, fields: dict[str, Any]) -> MaintenanceReport:
        report = self._reports.build(self._reports.allocate_id(), fields)
        self._reports.rows[report.id] = report
        return copy.copy(report)

    # Activity logs

    async def get_activity_log(self, log_id: int) -> ActivityLog | None:
        return self._logs.get(log_id)

    async def list_activity_logs(self, predicate: Predicate | None = None) -> list[ActivityLog]:
        return self._logs.scan(predicate)

    async def create_activity_log(self, fields: dict[str, Any]) -> ActivityLog:
        log = self._logs.build(self._logs.allocate_id(), fields)
        self._logs.rows[log.id] = log
        return copy.copy(log)

    # Maintenance tasks

    async def get_task(self, task_id: int) -> MaintenanceTask | None:
        return self._tasks.get(task_id)

    async def list_tasks(self, predicate: Predicate | None = None) -> list[MaintenanceTask]:
        return self._tasks.scan(predicate)

    async def create_task(self, fields: dict[str, Any]) -> MaintenanceTask:
        task = self._tasks.build(self._tasks.allocate_id(), fields)
        self._tasks.rows[task.id] = task
        return copy.copy(task)

    async def update_task(self, task_id: int, fields: dict[str, Any]) -> MaintenanceTask | None:
        return self._tasks.merge(task_id, fields)
