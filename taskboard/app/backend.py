from __future__ import annotations

import asyncio
import contextlib
import inspect
from typing import Any

from PySide6.QtCore import Property, QObject, Signal, Slot

from taskboard.app.load_cycle import LoadCycle
from taskboard.app.state.dashboard_state import DashboardState
from taskboard.devices import NfcAdapter
from taskboard.errors import LoggingErrorHandler
from taskboard.logger import get_logger
from taskboard.models import Project, ProjectTask
from taskboard.ops.collaborators import (
    Alerts,
    BluetoothScanner,
    CategoryRepositoryLike,
    ErrorHandler,
    Navigator,
    ProjectRepositoryLike,
    SeedService,
    TaskRepositoryLike,
)
from taskboard.ops.device_events import DeviceEventSink
from taskboard.settings_manager import SettingsManager

_logger = get_logger("backend")

CLEANED_UP_TOAST = "All cleaned up!"
ROUTE_TASK = "task"
ROUTE_PROJECT = "project"


class DashboardBackend(QObject):
    """Dashboard facade for the UI layer.

    UI → Python: backend.dispatch(cmd, payload)
    Python → UI: backend.event(dict), bindings on backend.state

    ``dispatch`` schedules the command on the running loop and returns the
    task; ``execute`` is the awaitable form.
    """

    # QObject already has an .event() handler method, so we must not shadow it.
    event_ = Signal(object, name="event")

    def __init__(
        self,
        *,
        projects: ProjectRepositoryLike,
        tasks: TaskRepositoryLike,
        categories: CategoryRepositoryLike,
        seed_service: SeedService,
        settings: SettingsManager,
        navigator: Navigator,
        alerts: Alerts,
        error_handler: ErrorHandler | None = None,
        bluetooth: BluetoothScanner | None = None,
        nfc: NfcAdapter | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)

        self._settings_mgr = settings
        self._tasks_repo = tasks
        self._navigator = navigator
        self._alerts = alerts
        self._error_handler = error_handler or LoggingErrorHandler(alerts)

        self._state = DashboardState(self)
        self._load_cycle = LoadCycle(
            self._state,
            projects=projects,
            tasks=tasks,
            categories=categories,
            seed_service=seed_service,
            seed_marker=settings,
            error_handler=self._error_handler,
        )
        self._devices = DeviceEventSink(self._state, alerts, bluetooth, nfc, self)
        self._pending: set[asyncio.Task] = set()

    # ---- expose state to the UI ----
    def _get_state(self) -> QObject:
        return self._state

    state = Property(QObject, _get_state, constant=True)  # type: ignore[arg-type]

    @property
    def load_cycle(self) -> LoadCycle:
        return self._load_cycle

    @property
    def devices(self) -> DeviceEventSink:
        return self._devices

    # ---- command entry ----
    @Slot(str, "QVariant")  # type: ignore[call-overload]
    def dispatch(self, cmd: str, payload: object | None = None) -> asyncio.Task | None:
        """Schedule a command on the running event loop."""
        command = str(cmd or "").strip()
        if not command:
            self._emit_error("Empty cmd")
            return None

        task = asyncio.get_running_loop().create_task(self.execute(command, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        task.add_done_callback(self._on_command_done)
        return task

    def _on_command_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        _logger.error("command failed: %s", error, exc_info=(type(error), error, error.__traceback__))
        self._error_handler.handle(error)
        self._emit_error(str(error) or type(error).__name__)

    async def execute(self, cmd: str, payload: object | None = None) -> None:  # noqa: PLR0911
        command = str(cmd or "").strip()
        if not command:
            self._emit_error("Empty cmd")
            return

        if command == "refresh":
            await self._load_cycle.refresh()
            return

        if command == "navigatedTo":
            self._load_cycle.is_navigated_to = True
            return

        if command == "navigatedFrom":
            self._load_cycle.is_navigated_to = False
            return

        if command == "appearing":
            await self._cmd_appearing()
            return

        if command == "disappearing":
            self._devices.unsubscribe()
            return

        if command == "taskCompleted":
            await self._cmd_task_completed(payload)
            return

        if command == "addTask":
            await self._go_to(ROUTE_TASK)
            return

        if command == "navigateToProject":
            await self._cmd_navigate_to_project(payload)
            return

        if command == "navigateToTask":
            await self._cmd_navigate_to_task(payload)
            return

        if command == "cleanTasks":
            await self._cmd_clean_tasks()
            return

        self._emit_error(f"Unknown cmd: {command}", level="warning")

    async def shutdown(self) -> None:
        """Tear down device subscriptions and wait for in-flight commands."""
        await self._devices.aclose()
        pending = [t for t in self._pending if not t.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # ---- command handlers ----
    async def _cmd_appearing(self) -> None:
        await self._load_cycle.activate()
        self._devices.subscribe(
            nfc=self._settings_mgr.nfc_enabled,
            bluetooth=self._settings_mgr.scan_enabled,
        )

    async def _cmd_task_completed(self, payload: object | None) -> None:
        task = self._resolve_task(payload, listed_only=True)
        if task is None:
            return
        completed = self._state._toggle_task_completed(task)
        _logger.debug("task %s completed=%s", task.id, completed)
        try:
            await self._tasks_repo.save(task)
        except Exception as e:
            # Optimistic: the flag stays flipped even though the save failed.
            _logger.error("saving task %s failed: %s", task.id, e)
            self._error_handler.handle(e)

    async def _cmd_navigate_to_project(self, payload: object | None) -> None:
        project = self._resolve_project(payload)
        if project is None:
            return
        await self._go_to(ROUTE_PROJECT, {"id": project.id})

    async def _cmd_navigate_to_task(self, payload: object | None) -> None:
        task = self._resolve_task(payload)
        if task is None:
            return
        await self._go_to(ROUTE_TASK, {"id": task.id})

    async def _cmd_clean_tasks(self) -> None:
        completed = [t for t in self._state._get_tasks() if t.is_completed]
        deleted_ids: set[int] = set()
        try:
            for task in completed:
                await self._tasks_repo.delete(task)
                deleted_ids.add(task.id)
        except Exception as e:
            # Stop at the first failure; deleted tasks stay deleted.
            _logger.error("clean tasks stopped at a failed delete: %s", e)
            self._error_handler.handle(e)
            return
        finally:
            # Filter the current list; a refresh may have replaced it meanwhile.
            self._state._replace_tasks(t for t in self._state._get_tasks() if t.id not in deleted_ids)

        _logger.info("cleaned %d completed tasks", len(completed))
        self._alerts.display_toast(CLEANED_UP_TOAST)

    # ---- helpers ----
    async def _go_to(self, route: str, params: dict[str, Any] | None = None) -> None:
        result = self._navigator.go_to(route, params or {})
        if inspect.isawaitable(result):
            await result

    def _resolve_task(self, payload: object | None, *, listed_only: bool = False) -> ProjectTask | None:
        """Find the task a payload refers to, preferring the listed instance."""
        candidate = _get_payload_value(payload, "task", default=payload)
        if isinstance(candidate, ProjectTask):
            task_id: int | None = candidate.id
        else:
            task_id = _coerce_id(_get_payload_value(payload, "id", default=candidate))
        if task_id is not None:
            for task in self._state._get_tasks():
                if task.id == task_id:
                    return task
        if isinstance(candidate, ProjectTask) and not listed_only:
            return candidate
        self._emit_error(f"Task not found: {task_id if task_id is not None else payload!r}", level="warning")
        return None

    def _resolve_project(self, payload: object | None) -> Project | None:
        candidate = _get_payload_value(payload, "project", default=payload)
        if isinstance(candidate, Project):
            return candidate
        project_id = _coerce_id(_get_payload_value(payload, "id", default=candidate))
        if project_id is not None:
            for project in self._state._get_projects():
                if project.id == project_id:
                    return project
        self._emit_error(
            f"Project not found: {project_id if project_id is not None else payload!r}",
            level="warning",
        )
        return None

    def _emit_error(self, message: str, *, level: str = "error") -> None:
        _logger.warning(message)
        self.event_.emit({"type": "event", "name": "error", "level": level, "message": message})


def _coerce_id(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _get_payload_value(payload: object | None, key: str, *, default: Any) -> Any:
    """Extract a value from a UI payload.

    Supports:
    - dict-like payloads (Python dict)
    - None
    - otherwise returns default
    """

    if payload is None:
        return default

    # QML often passes a JS object which arrives as QJSValue/QVariant.
    if payload.__class__.__name__ == "QJSValue" and hasattr(payload, "toVariant"):
        with contextlib.suppress(Exception):
            payload = payload.toVariant()  # type: ignore[assignment, attr-defined]

    if isinstance(payload, dict):
        return payload.get(key, default)

    return default
