"""Domain models for projects, tasks, categories and tags.

Records are created and owned by the data layer; the dashboard only reads
them and writes task changes back through the repositories.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class Category:
    """A project category with a display color (``#RRGGBB``)."""

    id: int
    title: str
    color: str = "#FF0000"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(
            id=int(data.get("id", 0)),
            title=str(data.get("title", "")),
            color=str(data.get("color") or "#FF0000"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Tag:
    id: int
    title: str
    color: str = "#FF0000"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tag:
        return cls(
            id=int(data.get("id", 0)),
            title=str(data.get("title", "")),
            color=str(data.get("color") or "#FF0000"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ProjectTask:
    """A single task. Owned by a project but addressable on its own."""

    id: int
    title: str
    is_completed: bool = False
    project_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectTask:
        project_id = data.get("project_id")
        return cls(
            id=int(data.get("id", 0)),
            title=str(data.get("title", "")),
            is_completed=bool(data.get("is_completed", data.get("isCompleted", False))),
            project_id=int(project_id) if project_id is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Project:
    """A project. ``category_id`` is a plain reference, not ownership."""

    id: int
    title: str
    category_id: int | None = None
    description: str = ""
    icon: str = ""
    tasks: list[ProjectTask] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)

    @property
    def task_count(self) -> int:
        return len(self.tasks)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        category_id = data.get("category_id")
        return cls(
            id=int(data.get("id", 0)),
            title=str(data.get("title", data.get("name", ""))),
            category_id=int(category_id) if category_id is not None else None,
            description=str(data.get("description") or ""),
            icon=str(data.get("icon") or ""),
            tasks=[ProjectTask.from_dict(t) for t in data.get("tasks") or []],
            tags=[Tag.from_dict(t) for t in data.get("tags") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        """Row form; tasks live in their own table and are not embedded."""
        return {
            "id": self.id,
            "title": self.title,
            "category_id": self.category_id,
            "description": self.description,
            "icon": self.icon,
            "tag_ids": [t.id for t in self.tags],
        }


@dataclass(frozen=True)
class CategoryChartDatum:
    """Derived (category title, task count) pair. Never persisted."""

    title: str
    count: int
