from __future__ import annotations

import asyncio
import enum
from typing import TYPE_CHECKING

from taskboard.logger import get_logger
from taskboard.ops.chart_data import build_category_chart

if TYPE_CHECKING:
    from taskboard.app.state.dashboard_state import DashboardState
    from taskboard.ops.collaborators import (
        CategoryRepositoryLike,
        ErrorHandler,
        ProjectRepositoryLike,
        SeedMarker,
        SeedService,
        TaskRepositoryLike,
    )

_logger = get_logger("load_cycle")


class LoadPhase(enum.Enum):
    NOT_INITIALIZED = "not_initialized"
    SEEDING = "seeding"
    LOADING = "loading"
    READY = "ready"
    REFRESHING = "refreshing"


class LoadCycle:
    """Decides when the dashboard loads and publishes each load as one snapshot.

    First activation seeds (once per install, gated by the settings marker)
    and runs a full refresh. Later activations refresh only when the screen
    was not entered through navigation; a focus return from a pushed page
    keeps the current data.

    Busy/refreshing flags are counted per in-flight call: overlapping
    refreshes keep the flag raised until the last one finishes.
    """

    def __init__(
        self,
        state: DashboardState,
        *,
        projects: ProjectRepositoryLike,
        tasks: TaskRepositoryLike,
        categories: CategoryRepositoryLike,
        seed_service: SeedService,
        seed_marker: SeedMarker,
        error_handler: ErrorHandler,
    ) -> None:
        self._state = state
        self._projects = projects
        self._tasks = tasks
        self._categories = categories
        self._seed_service = seed_service
        self._seed_marker = seed_marker
        self._error_handler = error_handler

        self._phase = LoadPhase.NOT_INITIALIZED
        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._busy_count = 0
        self._refresh_count = 0
        self.is_navigated_to = False

    @property
    def phase(self) -> LoadPhase:
        return self._phase

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _set_phase(self, phase: LoadPhase) -> None:
        if phase is self._phase:
            return
        _logger.debug("phase %s -> %s", self._phase.value, phase.value)
        self._phase = phase

    # ---- activation ----
    async def activate(self) -> bool:
        """Run the activation policy. Returns True if a refresh ran.

        Seeding failures propagate; the marker stays unset so the next
        activation tries again.
        """
        if not self._initialized:
            async with self._init_lock:
                if not self._initialized:
                    await self._initialize()
                    return True
            return False

        if self.is_navigated_to:
            # Focus came back from a pushed page; keep current data.
            _logger.debug("activation after navigation: reload skipped")
            return False

        await self.refresh()
        return True

    async def _initialize(self) -> None:
        try:
            self._set_phase(LoadPhase.SEEDING)
            if not self._seed_marker.is_seeded:
                _logger.info("first run: loading seed data")
                await self._seed_service.load_seed_data()
                self._seed_marker.mark_seeded()
        except Exception:
            self._set_phase(LoadPhase.NOT_INITIALIZED)
            raise

        self._set_phase(LoadPhase.LOADING)
        self._initialized = True
        await self.refresh()

    # ---- refresh ----
    async def refresh(self) -> bool:
        """Reload everything. Returns False if the load failed.

        Failures go to the error handler; previously published data stays.
        """
        self._refresh_count += 1
        self._state._set_refreshing(True)
        if self._phase is LoadPhase.READY:
            self._set_phase(LoadPhase.REFRESHING)
        try:
            await self._load()
            return True
        except Exception as e:
            _logger.exception("refresh failed: %s", e)
            self._error_handler.handle(e)
            return False
        finally:
            self._refresh_count -= 1
            if self._refresh_count == 0:
                self._state._set_refreshing(False)
                if self._initialized:
                    self._set_phase(LoadPhase.READY)

    async def _load(self) -> None:
        self._busy_count += 1
        self._state._set_busy(True)
        try:
            projects = await self._projects.list()
            categories = await self._categories.list()
            chart_data, chart_colors = build_category_chart(categories, projects)
            tasks = await self._tasks.list()

            # No awaits past this point: the three lists land together.
            self._state._replace_projects(projects)
            self._state._replace_chart_data(chart_data, chart_colors)
            self._state._replace_tasks(tasks)
        finally:
            self._busy_count -= 1
            if self._busy_count == 0:
                self._state._set_busy(False)

        _logger.debug(
            "loaded %d projects, %d categories, %d tasks",
            len(projects),
            len(categories),
            len(tasks),
        )
