from __future__ import annotations

from taskboard.data.store import TaskboardStore
from taskboard.logger import get_logger
from taskboard.models import Category, Project, ProjectTask, Tag

_logger = get_logger("repository")


class CategoryRepository:
    def __init__(self, store: TaskboardStore) -> None:
        self._store = store

    async def list(self) -> list[Category]:
        rows = sorted(self._store.rows("categories"), key=lambda r: r["id"])
        return [Category.from_dict(r) for r in rows]

    async def save(self, category: Category) -> Category:
        row = await self._store.upsert("categories", category.to_dict())
        category.id = row["id"]
        return category


class TagRepository:
    def __init__(self, store: TaskboardStore) -> None:
        self._store = store

    async def list(self) -> list[Tag]:
        rows = sorted(self._store.rows("tags"), key=lambda r: r["id"])
        return [Tag.from_dict(r) for r in rows]

    async def save(self, tag: Tag) -> Tag:
        row = await self._store.upsert("tags", tag.to_dict())
        tag.id = row["id"]
        return tag


class TaskRepository:
    def __init__(self, store: TaskboardStore) -> None:
        self._store = store

    async def list(self) -> list[ProjectTask]:
        rows = sorted(self._store.rows("tasks"), key=lambda r: r["id"])
        return [ProjectTask.from_dict(r) for r in rows]

    async def save(self, task: ProjectTask) -> ProjectTask:
        row = await self._store.upsert("tasks", task.to_dict())
        task.id = row["id"]
        _logger.debug("task saved: %s (completed=%s)", task.id, task.is_completed)
        return task

    async def delete(self, task: ProjectTask) -> None:
        await self._store.remove("tasks", task.id)
        _logger.debug("task deleted: %s", task.id)


class ProjectRepository:
    """Projects come back with their task list read from the task table,
    so counts include tasks created after the project was stored."""

    def __init__(self, store: TaskboardStore) -> None:
        self._store = store

    async def list(self) -> list[Project]:
        tasks = [ProjectTask.from_dict(r) for r in sorted(self._store.rows("tasks"), key=lambda r: r["id"])]
        projects = []
        for row in sorted(self._store.rows("projects"), key=lambda r: r["id"]):
            project = Project.from_dict({k: v for k, v in row.items() if k not in ("tasks", "tags")})
            project.tasks = [t for t in tasks if t.project_id == project.id]
            project.tags = self._tags_for(row.get("tag_ids") or [])
            projects.append(project)
        return projects

    async def save(self, project: Project) -> Project:
        row = await self._store.upsert("projects", project.to_dict())
        project.id = row["id"]
        return project

    def _tags_for(self, tag_ids: list[int]) -> list[Tag]:
        tags = []
        for tag_id in tag_ids:
            row = self._store.get("tags", tag_id)
            if row is not None:
                tags.append(Tag.from_dict(row))
        return tags
