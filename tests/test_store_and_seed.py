from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

pytest.importorskip("PySide6")

from taskboard.data import CategoryRepository, ProjectRepository, SeedDataService, TaskboardStore, TaskRepository
from taskboard.errors import RepositoryError, SeedDataError
from taskboard.models import Category, Project, ProjectTask
from taskboard.ops.chart_data import build_category_chart


def test_bundled_seed_loads_projects_categories_and_tasks() -> None:
    store = TaskboardStore()

    async def scenario():
        await SeedDataService(store).load_seed_data()
        return (
            await CategoryRepository(store).list(),
            await ProjectRepository(store).list(),
            await TaskRepository(store).list(),
        )

    categories, projects, tasks = asyncio.run(scenario())

    assert [c.title for c in categories] == ["Home", "Work", "Health"]
    assert [p.title for p in projects] == ["Garden Refresh", "Quarterly Report", "Team Offsite", "Half Marathon"]
    assert len(tasks) == 10
    assert sum(1 for t in tasks if t.is_completed) == 3
    assert [t.title for t in projects[0].tags] == ["Outdoor"]
    assert projects[3].tags[0].id == projects[0].tags[0].id

    data, _ = build_category_chart(categories, projects)
    assert [(d.title, d.count) for d in data] == [("Home", 3), ("Work", 4), ("Health", 3)]


def test_project_list_picks_up_tasks_saved_later() -> None:
    store = TaskboardStore()
    projects = ProjectRepository(store)
    tasks = TaskRepository(store)

    async def scenario():
        project = await projects.save(Project(0, "Solo", category_id=1))
        await tasks.save(ProjectTask(0, "new", project_id=project.id))
        await tasks.save(ProjectTask(0, "other"))
        return await projects.list()

    listed = asyncio.run(scenario())

    assert [t.title for t in listed[0].tasks] == ["new"]
    assert listed[0].task_count == 1


def test_store_persists_to_json_file(tmp_path: Path) -> None:
    path = tmp_path / "board.json"
    store = TaskboardStore(str(path))

    async def scenario() -> None:
        await CategoryRepository(store).save(Category(0, "Work", "#2196F3"))
        task = await TaskRepository(store).save(ProjectTask(0, "a", True))
        await TaskRepository(store).delete(task)
        await TaskRepository(store).save(ProjectTask(0, "b"))

    asyncio.run(scenario())

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert [c["title"] for c in raw["categories"]] == ["Work"]
    assert [t["title"] for t in raw["tasks"]] == ["b"]

    reopened = asyncio.run(TaskRepository(TaskboardStore(str(path))).list())
    assert [t.title for t in reopened] == ["b"]


def test_deleting_a_missing_task_raises() -> None:
    repo = TaskRepository(TaskboardStore())

    with pytest.raises(RepositoryError):
        asyncio.run(repo.delete(ProjectTask(5, "ghost")))


def test_unreadable_store_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "board.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(RepositoryError):
        TaskboardStore(str(path))


def test_missing_seed_file_raises_seed_error(tmp_path: Path) -> None:
    service = SeedDataService(TaskboardStore(), seed_path=tmp_path / "nope.json")

    with pytest.raises(SeedDataError):
        asyncio.run(service.load_seed_data())


def test_seed_file_without_projects_is_rejected(tmp_path: Path) -> None:
    seed = tmp_path / "seed.json"
    seed.write_text(json.dumps({"projects": "none"}), encoding="utf-8")

    with pytest.raises(SeedDataError):
        asyncio.run(SeedDataService(TaskboardStore(), seed_path=seed).load_seed_data())
