"""Derived dashboard models: module progress, unlock state and snapshots."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ModuleStatus(StrEnum):
    """Unlock state of a module."""

    LOCKED = "locked"
    AVAILABLE = "available"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def action_label(self) -> str:
        """Call to action shown on the module card."""
        return _ACTION_LABELS[self]


_ACTION_LABELS: dict[ModuleStatus, str] = {
    ModuleStatus.LOCKED: "Complete Previous Module",
    ModuleStatus.AVAILABLE: "Start Module",
    ModuleStatus.IN_PROGRESS: "Continue Learning",
    ModuleStatus.COMPLETED: "Review Module",
}


class DataSource(StrEnum):
    """Where the dashboard data came from."""

    LIVE = "live"
    FIXTURE = "fixture"


class ModuleProgress(BaseModel):
    """Completion statistics for one module."""

    model_config = ConfigDict(frozen=True)

    module_id: int
    total_sessions: int
    completed_sessions: int
    completion_percentage: int


class ActivitySession(BaseModel):
    """Session fields joined onto a recent activity row."""

    model_config = ConfigDict(frozen=True)

    title: str
    module_id: int
    session_number: int


class RecentActivity(BaseModel):
    """A recently accessed session with its progress."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    session_id: int
    completion_percentage: int
    last_accessed_at: datetime
    # PostgREST names the embedded resource after the joined table
    session: ActivitySession = Field(alias="sessions")


class ContinueSession(BaseModel):
    """Most recently accessed session, for "continue where you left off"."""

    model_config = ConfigDict(frozen=True)

    module_id: int
    session_id: int
    last_section: str | None = None
    last_subsection: str | None = None
    completion_percentage: int = 0


class DashboardSnapshot(BaseModel):
    """Read-only result of one dashboard load."""

    model_config = ConfigDict(frozen=True)

    module_progress: tuple[ModuleProgress, ...] = ()
    recent_activity: tuple[RecentActivity, ...] = ()
    data_source: DataSource = DataSource.FIXTURE
    continue_session: ContinueSession | None = None
    authenticated: bool = True


class ModuleCard(BaseModel):
    """Presentation-ready summary of a configured module."""

    model_config = ConfigDict(frozen=True)

    module_id: int
    title: str
    description: str
    color: str
    session_count: int
    completion_percentage: int
    status: ModuleStatus
    action_label: str
    enabled: bool
