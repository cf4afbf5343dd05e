"""Fixed fallback dataset shown when live data is unavailable."""

from datetime import datetime, timezone

from ibam_dashboard.models.progress import ActivitySession, ModuleProgress, RecentActivity

FIXTURE_MODULE_PROGRESS: tuple[ModuleProgress, ...] = (
    ModuleProgress(module_id=1, total_sessions=4, completed_sessions=4, completion_percentage=100),
    ModuleProgress(module_id=2, total_sessions=4, completed_sessions=2, completion_percentage=50),
    ModuleProgress(module_id=3, total_sessions=5, completed_sessions=0, completion_percentage=0),
    ModuleProgress(module_id=4, total_sessions=4, completed_sessions=0, completion_percentage=0),
    ModuleProgress(module_id=5, total_sessions=3, completed_sessions=0, completion_percentage=0),
)

FIXTURE_RECENT_ACTIVITY: tuple[RecentActivity, ...] = (
    RecentActivity(
        session_id=26,
        completion_percentage=75,
        last_accessed_at=datetime(2025, 6, 27, 18, 30, tzinfo=timezone.utc),
        session=ActivitySession(
            title="Reasons for Success - Faith-Driven Principles",
            module_id=2,
            session_number=2,
        ),
    ),
    RecentActivity(
        session_id=25,
        completion_percentage=100,
        last_accessed_at=datetime(2025, 6, 26, 14, 20, tzinfo=timezone.utc),
        session=ActivitySession(
            title="Reasons for Failure - Learning from Mistakes",
            module_id=2,
            session_number=1,
        ),
    ),
    RecentActivity(
        session_id=4,
        completion_percentage=100,
        last_accessed_at=datetime(2025, 6, 25, 16, 45, tzinfo=timezone.utc),
        session=ActivitySession(
            title="Faith-Driven Business - The AVODAH Model",
            module_id=1,
            session_number=4,
        ),
    ),
)
