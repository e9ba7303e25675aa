"""Interfaces of the collaborators the dashboard backend is wired with."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Any, Protocol

from taskboard.models import Category, Project, ProjectTask


class ProjectRepositoryLike(Protocol):
    async def list(self) -> list[Project]: ...


class CategoryRepositoryLike(Protocol):
    async def list(self) -> list[Category]: ...


class TaskRepositoryLike(Protocol):
    async def list(self) -> list[ProjectTask]: ...

    async def save(self, task: ProjectTask) -> ProjectTask: ...

    async def delete(self, task: ProjectTask) -> None: ...


class SeedService(Protocol):
    async def load_seed_data(self) -> None: ...


class SeedMarker(Protocol):
    @property
    def is_seeded(self) -> bool: ...

    def mark_seeded(self) -> None: ...


class ErrorHandler(Protocol):
    def handle(self, error: BaseException) -> None: ...


class Alerts(Protocol):
    def display_alert(self, title: str, message: str, cancel: str) -> None: ...

    def display_toast(self, message: str) -> None: ...


class Navigator(Protocol):
    async def go_to(self, route: str, params: Mapping[str, Any] | None = None) -> None: ...


class BluetoothScanner(Protocol):
    def scan(self) -> AsyncIterator[Any]: ...
