"""Module unlock state and module cards."""

from collections.abc import Sequence

from ibam_dashboard.models.curriculum import CurriculumConfig
from ibam_dashboard.models.progress import ModuleCard, ModuleProgress, ModuleStatus


def _percentage_of(module_progress: Sequence[ModuleProgress], module_id: int) -> int:
    for entry in module_progress:
        if entry.module_id == module_id:
            return entry.completion_percentage
    return 0


def unlock_order(
    curriculum: CurriculumConfig, module_progress: Sequence[ModuleProgress]
) -> list[int]:
    """Curriculum order, followed by unconfigured modules in id order."""
    order = curriculum.module_ids
    configured = set(order)
    extra = sorted({p.module_id for p in module_progress} - configured)
    return order + extra


def resolve_module_status(
    module_progress: Sequence[ModuleProgress],
    module_id: int,
    order: Sequence[int],
) -> ModuleStatus:
    """Resolve the unlock state of a module.

    Precedence: own completion first (completed, then in-progress), then
    position in ``order`` (first module is available), then the
    predecessor's completion. A partially completed module is in-progress
    even when its predecessor is not complete.

    Args:
        module_progress: Aggregated progress; missing modules count as 0%.
        module_id: Module to resolve.
        order: Module ids in unlock order.
    """
    percentage = _percentage_of(module_progress, module_id)
    if percentage == 100:
        return ModuleStatus.COMPLETED
    if percentage > 0:
        return ModuleStatus.IN_PROGRESS

    position = list(order).index(module_id) if module_id in order else None
    if position == 0:
        return ModuleStatus.AVAILABLE
    if position is not None and _percentage_of(module_progress, order[position - 1]) == 100:
        return ModuleStatus.AVAILABLE
    return ModuleStatus.LOCKED


def build_module_cards(
    curriculum: CurriculumConfig, module_progress: Sequence[ModuleProgress]
) -> list[ModuleCard]:
    """One card per configured module, in curriculum order."""
    order = unlock_order(curriculum, module_progress)
    cards = []
    for module in curriculum.modules:
        status = resolve_module_status(module_progress, module.id, order)
        cards.append(ModuleCard(
            module_id=module.id,
            title=module.title,
            description=module.description,
            color=module.color,
            session_count=module.sessions,
            completion_percentage=_percentage_of(module_progress, module.id),
            status=status,
            action_label=status.action_label,
            enabled=status != ModuleStatus.LOCKED,
        ))
    return cards
