from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from PySide6.QtCore import Property, QObject, Signal
from PySide6.QtGui import QColor

from taskboard.models import CategoryChartDatum, Project, ProjectTask


def format_today(day: date | None = None) -> str:
    """Header label like ``Monday, Jan 5``."""
    d = day or date.today()
    return f"{d:%A, %b} {d.day}"


class DashboardState(QObject):
    """State bound by the dashboard UI.

    Lists are only ever swapped whole (``_replace_*``), so a reader never sees
    a half-built snapshot. ``hasCompletedTasks`` is derived from ``tasks``
    and recomputed by every helper that can change it.
    """

    busyChanged = Signal(bool)
    refreshingChanged = Signal(bool)
    tasksChanged = Signal()
    projectsChanged = Signal()
    chartDataChanged = Signal()
    hasCompletedTasksChanged = Signal(bool)
    taskChanged = Signal(object)
    discoveredDevicesChanged = Signal()
    deviceDiscovered = Signal(str)
    todayChanged = Signal(str)

    def __init__(self, parent: QObject | None = None, *, today: date | None = None) -> None:
        super().__init__(parent)
        self._busy = False
        self._refreshing = False
        self._tasks: list[ProjectTask] = []
        self._projects: list[Project] = []
        self._chart_data: list[CategoryChartDatum] = []
        self._chart_colors: list[QColor] = []
        self._has_completed_tasks = False
        self._discovered_devices: list[str] = []
        self._today = format_today(today)

    # ---- read-only properties (mutate via backend) ----
    def _get_busy(self) -> bool:
        return bool(self._busy)

    isBusy = Property(bool, _get_busy, notify=busyChanged)  # type: ignore[arg-type]

    def _get_refreshing(self) -> bool:
        return bool(self._refreshing)

    isRefreshing = Property(bool, _get_refreshing, notify=refreshingChanged)  # type: ignore[arg-type]

    def _get_tasks(self) -> list[ProjectTask]:
        return list(self._tasks)

    tasks = Property(list, _get_tasks, notify=tasksChanged)  # type: ignore[arg-type]

    def _get_projects(self) -> list[Project]:
        return list(self._projects)

    projects = Property(list, _get_projects, notify=projectsChanged)  # type: ignore[arg-type]

    def _get_chart_data(self) -> list[CategoryChartDatum]:
        return list(self._chart_data)

    chartData = Property(list, _get_chart_data, notify=chartDataChanged)  # type: ignore[arg-type]

    def _get_chart_colors(self) -> list[QColor]:
        return list(self._chart_colors)

    chartColors = Property(list, _get_chart_colors, notify=chartDataChanged)  # type: ignore[arg-type]

    def _get_has_completed_tasks(self) -> bool:
        return bool(self._has_completed_tasks)

    hasCompletedTasks = Property(bool, _get_has_completed_tasks, notify=hasCompletedTasksChanged)  # type: ignore[arg-type]

    def _get_discovered_devices(self) -> list[str]:
        return list(self._discovered_devices)

    discoveredDevices = Property(list, _get_discovered_devices, notify=discoveredDevicesChanged)  # type: ignore[arg-type]

    def _get_today(self) -> str:
        return str(self._today)

    today = Property(str, _get_today, notify=todayChanged)  # type: ignore[arg-type]

    # ---- internal mutation helpers (called by backend) ----
    def _set_busy(self, value: bool) -> None:
        v = bool(value)
        if v == self._busy:
            return
        self._busy = v
        self.busyChanged.emit(v)

    def _set_refreshing(self, value: bool) -> None:
        v = bool(value)
        if v == self._refreshing:
            return
        self._refreshing = v
        self.refreshingChanged.emit(v)

    def _replace_tasks(self, tasks: Iterable[ProjectTask]) -> None:
        self._tasks = list(tasks)
        self.tasksChanged.emit()
        self._recompute_has_completed()

    def _replace_projects(self, projects: Iterable[Project]) -> None:
        self._projects = list(projects)
        self.projectsChanged.emit()

    def _replace_chart_data(self, data: Iterable[CategoryChartDatum], colors: Iterable[QColor]) -> None:
        self._chart_data = list(data)
        self._chart_colors = list(colors)
        self.chartDataChanged.emit()

    def _toggle_task_completed(self, task: ProjectTask) -> bool:
        task.is_completed = not task.is_completed
        self.taskChanged.emit(task)
        self._recompute_has_completed()
        return task.is_completed

    def _record_device_seen(self, name: str) -> bool:
        """Append ``name`` unless already listed. Returns True if it was added."""
        if name in self._discovered_devices:
            return False
        self._discovered_devices = [*self._discovered_devices, name]
        self.discoveredDevicesChanged.emit()
        self.deviceDiscovered.emit(name)
        return True

    def _set_today(self, day: date | None = None) -> None:
        t = format_today(day)
        if t == self._today:
            return
        self._today = t
        self.todayChanged.emit(t)

    def _recompute_has_completed(self) -> None:
        v = any(t.is_completed for t in self._tasks)
        if v == self._has_completed_tasks:
            return
        self._has_completed_tasks = v
        self.hasCompletedTasksChanged.emit(v)
