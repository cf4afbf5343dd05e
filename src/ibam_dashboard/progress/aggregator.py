"""Per-module completion statistics from flat session and progress lists."""

from collections import defaultdict
from collections.abc import Iterable

from ibam_dashboard.models.curriculum import CurriculumConfig
from ibam_dashboard.models.progress import ModuleProgress
from ibam_dashboard.models.session import CourseSession, ProgressRecord


def completion_percentage(completed: int, total: int) -> int:
    """Whole-number completion percentage; 0 when there is nothing to complete."""
    if total <= 0:
        return 0
    return round(completed / total * 100)


def aggregate_module_progress(
    curriculum: CurriculumConfig,
    sessions: Iterable[CourseSession],
    progress: Iterable[ProgressRecord],
) -> list[ModuleProgress]:
    """Derive one ModuleProgress per module, ordered by module id.

    Configured modules always appear. Modules only seen in the session list
    are added as well. The configured session count is the denominator,
    raised to the number of sessions observed when the catalogue holds more.

    A session counts as completed once, if any of its progress records is at
    100. Records for unknown sessions are ignored.

    Args:
        curriculum: Static module catalogue.
        sessions: Session catalogue as fetched.
        progress: The user's progress records.

    Returns:
        List of ModuleProgress sorted by module_id ascending.
    """
    module_of: dict[int, int] = {}
    observed: dict[int, set[int]] = defaultdict(set)
    for session in sessions:
        module_of[session.id] = session.module_id
        observed[session.module_id].add(session.id)

    totals: dict[int, int] = {
        module_id: curriculum.expected_sessions(module_id) for module_id in curriculum.module_ids
    }
    for module_id, session_ids in observed.items():
        totals[module_id] = max(totals.get(module_id, 0), len(session_ids))

    completed: dict[int, set[int]] = defaultdict(set)
    for record in progress:
        module_id = module_of.get(record.session_id)
        if module_id is not None and record.is_complete:
            completed[module_id].add(record.session_id)

    return [
        ModuleProgress(
            module_id=module_id,
            total_sessions=totals[module_id],
            completed_sessions=len(completed[module_id]),
            completion_percentage=completion_percentage(
                len(completed[module_id]), totals[module_id]
            ),
        )
        for module_id in sorted(totals)
    ]
