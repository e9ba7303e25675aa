from __future__ import annotations

import asyncio
import json
import os
from typing import Any

from taskboard.errors import RepositoryError
from taskboard.logger import get_logger

_logger = get_logger("store")

TABLES = ("categories", "tags", "projects", "tasks")


class TaskboardStore:
    """Row tables kept in memory, optionally mirrored to one JSON file.

    Rows are plain dicts keyed by ``id``. All mutation happens on the event
    loop thread; only the file write is pushed to a worker thread.
    """

    def __init__(self, path: str | None = None) -> None:
        self.path = path
        self._tables: dict[str, dict[int, dict[str, Any]]] = {t: {} for t in TABLES}
        self._write_lock = asyncio.Lock()
        self.load()

    def load(self) -> None:
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise RepositoryError(f"cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise RepositoryError(f"store {self.path} is not a JSON object")
        for table in TABLES:
            rows = data.get(table) or []
            self._tables[table] = {int(r["id"]): dict(r) for r in rows if isinstance(r, dict) and "id" in r}
        _logger.debug("store loaded: %s", self.path)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return [dict(r) for r in self._table(table).values()]

    def get(self, table: str, row_id: int) -> dict[str, Any] | None:
        row = self._table(table).get(int(row_id))
        return dict(row) if row is not None else None

    def next_id(self, table: str) -> int:
        ids = self._table(table).keys()
        return max(ids, default=0) + 1

    async def upsert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        row = dict(row)
        if not row.get("id"):
            row["id"] = self.next_id(table)
        self._table(table)[int(row["id"])] = row
        await self.flush()
        return dict(row)

    async def remove(self, table: str, row_id: int) -> None:
        if self._table(table).pop(int(row_id), None) is None:
            raise RepositoryError(f"{table} row {row_id} not found")
        await self.flush()

    async def flush(self) -> None:
        if not self.path:
            return
        payload = json.dumps(
            {t: list(self._tables[t].values()) for t in TABLES},
            ensure_ascii=False,
            indent=2,
        )
        async with self._write_lock:
            try:
                await asyncio.to_thread(self._write_file, self.path, payload)
            except OSError as e:
                raise RepositoryError(f"cannot write store {self.path}: {e}") from e

    @staticmethod
    def _write_file(path: str, payload: str) -> None:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        tmp = f"{path}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp, path)

    def _table(self, table: str) -> dict[int, dict[str, Any]]:
        try:
            return self._tables[table]
        except KeyError:
            raise RepositoryError(f"unknown table: {table}") from None
