"""Static curriculum catalogue models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ModuleConfig(BaseModel):
    """A configured curriculum module."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    sessions: int = Field(ge=0)  # expected session count
    description: str = ""
    color: str = ""


class CurriculumConfig(BaseModel):
    """Ordered module catalogue. List order is the unlock order."""

    model_config = ConfigDict(frozen=True)

    modules: tuple[ModuleConfig, ...] = ()

    @field_validator("modules")
    @classmethod
    def _unique_ids(cls, modules: tuple[ModuleConfig, ...]) -> tuple[ModuleConfig, ...]:
        seen: set[int] = set()
        for module in modules:
            if module.id in seen:
                raise ValueError(f"Duplicate module id in curriculum: {module.id}")
            seen.add(module.id)
        return modules

    @property
    def module_ids(self) -> list[int]:
        """Module ids in curriculum order."""
        return [m.id for m in self.modules]

    def get(self, module_id: int) -> ModuleConfig | None:
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def expected_sessions(self, module_id: int) -> int:
        """Configured session count, 0 for unknown modules."""
        module = self.get(module_id)
        return module.sessions if module else 0
