from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from taskboard.data.repositories import CategoryRepository, ProjectRepository, TagRepository, TaskRepository
from taskboard.data.store import TaskboardStore
from taskboard.errors import SeedDataError
from taskboard.logger import get_logger
from taskboard.models import Category, Project, ProjectTask, Tag

_logger = get_logger("seed")

SEED_PATH = Path(__file__).resolve().parent / "seed_data.json"


class SeedDataService:
    """Loads the bundled demo projects into an empty store.

    Seed JSON shape::

        {"projects": [{"name": ..., "description": ..., "icon": ...,
                       "category": {"title": ..., "color": ...},
                       "tags": [{"title": ..., "color": ...}],
                       "tasks": [{"title": ..., "isCompleted": false}]}]}

    Categories and tags are shared by title.
    """

    def __init__(self, store: TaskboardStore, seed_path: str | Path | None = None) -> None:
        self._categories = CategoryRepository(store)
        self._tags = TagRepository(store)
        self._projects = ProjectRepository(store)
        self._tasks = TaskRepository(store)
        self._seed_path = Path(seed_path) if seed_path else SEED_PATH

    async def load_seed_data(self) -> None:
        payload = await asyncio.to_thread(self._read_payload)
        projects = payload.get("projects")
        if not isinstance(projects, list):
            raise SeedDataError(f"seed file has no project list: {self._seed_path}")

        categories: dict[str, Category] = {}
        tags: dict[str, Tag] = {}
        task_count = 0
        for item in projects:
            if not isinstance(item, dict):
                continue
            category = await self._category_for(item.get("category"), categories)
            project = Project(
                id=0,
                title=str(item.get("name") or item.get("title") or ""),
                category_id=category.id if category else None,
                description=str(item.get("description") or ""),
                icon=str(item.get("icon") or ""),
            )
            for tag_data in item.get("tags") or []:
                tag = await self._tag_for(tag_data, tags)
                if tag is not None:
                    project.tags.append(tag)
            await self._projects.save(project)

            for task_data in item.get("tasks") or []:
                task = ProjectTask.from_dict({**task_data, "id": 0, "project_id": project.id})
                await self._tasks.save(task)
                task_count += 1

        _logger.info(
            "seed data loaded: %d projects, %d categories, %d tasks",
            len(projects),
            len(categories),
            task_count,
        )

    def _read_payload(self) -> dict[str, Any]:
        try:
            with open(self._seed_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise SeedDataError(f"cannot read seed file {self._seed_path}: {e}") from e
        if not isinstance(data, dict):
            raise SeedDataError(f"seed file is not a JSON object: {self._seed_path}")
        return data

    async def _category_for(self, data: Any, seen: dict[str, Category]) -> Category | None:
        if not isinstance(data, dict) or not data.get("title"):
            return None
        title = str(data["title"])
        if title not in seen:
            seen[title] = await self._categories.save(Category.from_dict({**data, "id": 0}))
        return seen[title]

    async def _tag_for(self, data: Any, seen: dict[str, Tag]) -> Tag | None:
        if not isinstance(data, dict) or not data.get("title"):
            return None
        title = str(data["title"])
        if title not in seen:
            seen[title] = await self._tags.save(Tag.from_dict({**data, "id": 0}))
        return seen[title]
