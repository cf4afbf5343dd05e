"""Course session and per-session progress models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CourseSession(BaseModel):
    """A single learning session inside a module."""

    model_config = ConfigDict(frozen=True)

    id: int
    module_id: int
    session_number: int  # ordinal within the module
    title: str
    subtitle: str | None = ""


class ProgressRecord(BaseModel):
    """A user's progress on one session."""

    model_config = ConfigDict(frozen=True)

    session_id: int
    completion_percentage: int = Field(ge=0, le=100)
    completed_at: datetime | None = None
    last_accessed_at: datetime
    quiz_score: float | None = None

    @property
    def is_complete(self) -> bool:
        return self.completion_percentage == 100
