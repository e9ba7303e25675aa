from __future__ import annotations

from typing import TYPE_CHECKING

from .logger import get_logger

if TYPE_CHECKING:
    from .ops.collaborators import Alerts

_logger = get_logger("errors")


class TaskboardError(Exception):
    """Base exception for all taskboard errors."""


class RepositoryError(TaskboardError):
    """Store read/write failed or a record is missing."""


class SeedDataError(TaskboardError):
    """Seed file could not be read or parsed."""


class LoggingErrorHandler:
    """Error sink for failures caught at the screen boundary.

    Logs with traceback and, when an alert presenter is wired, shows a
    generic alert. Never raises.
    """

    def __init__(self, alerts: Alerts | None = None, *, title: str = "Error") -> None:
        self._alerts = alerts
        self._title = title
        self.handled: int = 0

    def handle(self, error: BaseException) -> None:
        self.handled += 1
        _logger.error("unhandled error: %s", error, exc_info=(type(error), error, error.__traceback__))
        if self._alerts is None:
            return
        try:
            self._alerts.display_alert(self._title, str(error) or type(error).__name__, "OK")
        except Exception as e:  # pragma: no cover - alert presenter is UI glue
            _logger.warning("error alert failed: %s", e)
