"""Dashboard load orchestration with fixture fallback."""

from typing import Protocol

import structlog

from ibam_dashboard.dashboard.fixtures import FIXTURE_MODULE_PROGRESS, FIXTURE_RECENT_ACTIVITY
from ibam_dashboard.models.curriculum import CurriculumConfig
from ibam_dashboard.models.progress import (
    ContinueSession,
    DashboardSnapshot,
    DataSource,
    RecentActivity,
)
from ibam_dashboard.models.session import CourseSession, ProgressRecord
from ibam_dashboard.progress.aggregator import aggregate_module_progress

logger = structlog.get_logger()


class DashboardBackend(Protocol):
    """External auth and data operations the dashboard depends on."""

    async def get_current_user_id(self) -> str | None: ...

    async def list_sessions(self) -> list[CourseSession]: ...

    async def list_progress(self, user_id: str) -> list[ProgressRecord]: ...

    async def list_recent_activity(self, user_id: str, limit: int = 5) -> list[RecentActivity]: ...

    async def get_last_accessed_session(self, user_id: str) -> ContinueSession | None: ...


class DashboardLoader:
    """Sequences backend calls into a renderable DashboardSnapshot.

    Each call is fault isolated. Only two outcomes stop the sequence: no
    signed-in user (nothing is fetched) and an unavailable session catalogue
    (fixture data is used for progress and activity). ``load`` never raises.

    Args:
        backend: Auth and data collaborator.
        curriculum: Static module catalogue.
        recent_activity_limit: Number of recent activity rows to request.
    """

    def __init__(
        self,
        backend: DashboardBackend,
        curriculum: CurriculumConfig,
        recent_activity_limit: int = 5,
    ):
        self.backend = backend
        self.curriculum = curriculum
        self.recent_activity_limit = recent_activity_limit

    async def load(self) -> DashboardSnapshot:
        """Run one dashboard load."""
        user_id = await self._current_user_id()
        if not user_id:
            logger.info("dashboard_load_skipped", reason="not_authenticated")
            return DashboardSnapshot(authenticated=False)

        snapshot = await self._load_progress(user_id)

        # Runs whatever the catalogue outcome; absence just hides the affordance
        continue_session = await self._continue_session(user_id)
        logger.info(
            "dashboard_loaded",
            user_id=user_id,
            data_source=snapshot.data_source,
            has_continue_session=continue_session is not None,
        )
        return snapshot.model_copy(update={"continue_session": continue_session})

    async def _load_progress(self, user_id: str) -> DashboardSnapshot:
        sessions = await self._sessions()
        if not sessions:
            logger.warning("dashboard_using_fixtures", reason="catalogue_unavailable")
            return DashboardSnapshot(
                module_progress=FIXTURE_MODULE_PROGRESS,
                recent_activity=FIXTURE_RECENT_ACTIVITY,
                data_source=DataSource.FIXTURE,
            )

        progress = await self._progress(user_id)
        module_progress = aggregate_module_progress(self.curriculum, sessions, progress)

        recent_activity = await self._recent_activity(user_id)
        if not recent_activity:
            logger.info("dashboard_recent_activity_fixture", user_id=user_id)
            recent_activity = list(FIXTURE_RECENT_ACTIVITY)

        return DashboardSnapshot(
            module_progress=tuple(module_progress),
            recent_activity=tuple(recent_activity),
            data_source=DataSource.LIVE,
        )

    async def _current_user_id(self) -> str | None:
        try:
            return await self.backend.get_current_user_id()
        except Exception:
            logger.exception("current_user_lookup_failed")
            return None

    async def _sessions(self) -> list[CourseSession]:
        try:
            return await self.backend.list_sessions()
        except Exception:
            logger.exception("sessions_fetch_failed")
            return []

    async def _progress(self, user_id: str) -> list[ProgressRecord]:
        try:
            return await self.backend.list_progress(user_id)
        except Exception:
            logger.warning("progress_fetch_failed", user_id=user_id, exc_info=True)
            return []

    async def _recent_activity(self, user_id: str) -> list[RecentActivity]:
        try:
            return await self.backend.list_recent_activity(
                user_id, limit=self.recent_activity_limit
            )
        except Exception:
            logger.warning("recent_activity_fetch_failed", user_id=user_id, exc_info=True)
            return []

    async def _continue_session(self, user_id: str) -> ContinueSession | None:
        try:
            return await self.backend.get_last_accessed_session(user_id)
        except Exception:
            logger.warning("continue_session_fetch_failed", user_id=user_id, exc_info=True)
            return None
