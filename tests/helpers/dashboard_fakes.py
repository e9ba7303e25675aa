"""Test doubles for the dashboard backend collaborators."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from taskboard.models import Category, Project, ProjectTask


class FakeProjects:
    def __init__(self, projects: list[Project] | None = None) -> None:
        self.projects = list(projects or [])
        self.calls = 0
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def list(self) -> list[Project]:
        self.calls += 1
        snapshot = list(self.projects)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return snapshot


class FakeCategories:
    def __init__(self, categories: list[Category] | None = None) -> None:
        self.categories = list(categories or [])
        self.error: Exception | None = None

    async def list(self) -> list[Category]:
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return list(self.categories)


class FakeTasks:
    def __init__(self, tasks: list[ProjectTask] | None = None) -> None:
        self.tasks = list(tasks or [])
        self.saved: list[tuple[int, bool]] = []
        self.deleted: list[int] = []
        self.fail_save = False
        self.fail_delete_ids: set[int] = set()
        self.delete_gate: asyncio.Event | None = None

    async def list(self) -> list[ProjectTask]:
        await asyncio.sleep(0)
        return list(self.tasks)

    async def save(self, task: ProjectTask) -> ProjectTask:
        await asyncio.sleep(0)
        if self.fail_save:
            raise OSError("disk full")
        self.saved.append((task.id, task.is_completed))
        return task

    async def delete(self, task: ProjectTask) -> None:
        await asyncio.sleep(0)
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        if task.id in self.fail_delete_ids:
            raise OSError(f"cannot delete {task.id}")
        self.deleted.append(task.id)
        self.tasks = [t for t in self.tasks if t.id != task.id]


class FakeSeedService:
    def __init__(self) -> None:
        self.calls = 0
        self.error: Exception | None = None

    async def load_seed_data(self) -> None:
        self.calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error


class FakeSeedMarker:
    def __init__(self, seeded: bool = False) -> None:
        self.is_seeded = seeded

    def mark_seeded(self) -> None:
        self.is_seeded = True


class RecordingErrorHandler:
    def __init__(self) -> None:
        self.errors: list[BaseException] = []

    def handle(self, error: BaseException) -> None:
        self.errors.append(error)


class RecordingAlerts:
    def __init__(self) -> None:
        self.alerts: list[tuple[str, str, str]] = []
        self.toasts: list[str] = []

    def display_alert(self, title: str, message: str, cancel: str) -> None:
        self.alerts.append((title, message, cancel))

    def display_toast(self, message: str) -> None:
        self.toasts.append(message)


class RecordingNavigator:
    def __init__(self) -> None:
        self.routes: list[tuple[str, dict[str, Any]]] = []

    async def go_to(self, route: str, params: Mapping[str, Any] | None = None) -> None:
        self.routes.append((route, dict(params or {})))


def sample_data() -> tuple[list[Category], list[Project], list[ProjectTask]]:
    work = Category(1, "Work", "#2196F3")
    home = Category(2, "Home", "#4CAF50")
    t1 = ProjectTask(1, "Draft slides", False, 10)
    t2 = ProjectTask(2, "Book venue", True, 10)
    t3 = ProjectTask(3, "Prune roses", False, 20)
    t4 = ProjectTask(4, "Orphan task", False, 30)
    projects = [
        Project(10, "Report", category_id=1, tasks=[t1, t2]),
        Project(20, "Garden", category_id=2, tasks=[t3]),
        Project(30, "Misc", category_id=99, tasks=[t4]),
    ]
    return [work, home], projects, [t1, t2, t3, t4]
