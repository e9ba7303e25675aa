"""Storage-side collaborators: document store, repositories, seed data."""

from taskboard.data.repositories import CategoryRepository, ProjectRepository, TaskRepository
from taskboard.data.seed_data import SeedDataService
from taskboard.data.store import TaskboardStore

__all__ = [
    "CategoryRepository",
    "ProjectRepository",
    "SeedDataService",
    "TaskRepository",
    "TaskboardStore",
]
