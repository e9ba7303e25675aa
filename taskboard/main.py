import argparse
import asyncio
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from taskboard.app.backend import DashboardBackend
from taskboard.data import CategoryRepository, ProjectRepository, SeedDataService, TaskboardStore, TaskRepository
from taskboard.devices import NfcAdapter, ScanFeed
from taskboard.logger import get_logger
from taskboard.settings_manager import SettingsManager

logger = get_logger("main")
_BASE_DIR = Path.home() / ".taskboard"


class ConsoleAlerts:
    def display_alert(self, title: str, message: str, cancel: str) -> None:
        print(f"[{title}] {message}")

    def display_toast(self, message: str) -> None:
        print(message)


class LoggingNavigator:
    async def go_to(self, route: str, params: Mapping[str, Any] | None = None) -> None:
        logger.info("navigate: %s %s", route, dict(params or {}))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Task dashboard (headless)")
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    parser.add_argument("--settings", default=str(_BASE_DIR / "settings.json"), help="Settings file")
    parser.add_argument("--data", help="Data file (defaults to the settings value)")
    parser.add_argument("--clean", action="store_true", help="Delete completed tasks after loading")
    return parser.parse_args(argv)


def _print_summary(backend: DashboardBackend) -> None:
    state = backend.state
    print(state.today)
    print(f"{len(state.projects)} projects, {len(state.tasks)} tasks")
    for datum in state.chartData:
        print(f"  {datum.title}: {datum.count}")
    if state.hasCompletedTasks:
        print("Some tasks are completed.")


async def _run(args: argparse.Namespace) -> int:
    settings = SettingsManager(args.settings)
    data_path = args.data or settings.data_path or str(_BASE_DIR / "taskboard.json")
    store = TaskboardStore(data_path)

    alerts = ConsoleAlerts()
    backend = DashboardBackend(
        projects=ProjectRepository(store),
        tasks=TaskRepository(store),
        categories=CategoryRepository(store),
        seed_service=SeedDataService(store),
        settings=settings,
        navigator=LoggingNavigator(),
        alerts=alerts,
        bluetooth=ScanFeed(),
        nfc=NfcAdapter(),
    )
    try:
        await backend.execute("navigatedTo")
        await backend.execute("appearing")
        if args.clean:
            await backend.execute("cleanTasks")
        _print_summary(backend)
    finally:
        await backend.shutdown()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.log_level:
        os.environ["TASKBOARD_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["TASKBOARD_LOG_CATS"] = args.log_cats
    # Re-read the env overrides now that the CLI has set them
    get_logger()
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
