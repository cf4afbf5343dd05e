"""Smoke tests for Pydantic models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from ibam_dashboard.dashboard.fixtures import FIXTURE_MODULE_PROGRESS, FIXTURE_RECENT_ACTIVITY
from ibam_dashboard.models.curriculum import CurriculumConfig, ModuleConfig
from ibam_dashboard.models.progress import (
    DashboardSnapshot,
    DataSource,
    RecentActivity,
)
from ibam_dashboard.models.session import CourseSession, ProgressRecord


class TestProgressRecord:
    def test_completion_bounds(self):
        with pytest.raises(ValidationError):
            ProgressRecord(session_id=1, completion_percentage=101,
                           last_accessed_at=datetime.now())
        with pytest.raises(ValidationError):
            ProgressRecord(session_id=1, completion_percentage=-1,
                           last_accessed_at=datetime.now())

    def test_is_complete(self):
        done = ProgressRecord(session_id=1, completion_percentage=100,
                              last_accessed_at=datetime.now())
        assert done.is_complete
        assert done.completed_at is None
        assert done.quiz_score is None

    def test_frozen(self):
        session = CourseSession(id=1, module_id=1, session_number=1, title="Intro")
        with pytest.raises(ValidationError):
            session.title = "Changed"


class TestCurriculumConfig:
    def test_order_and_lookup(self):
        curriculum = CurriculumConfig(modules=[
            ModuleConfig(id=2, title="Second", sessions=3),
            ModuleConfig(id=1, title="First", sessions=4),
        ])
        assert curriculum.module_ids == [2, 1]
        assert curriculum.get(1).title == "First"
        assert curriculum.get(9) is None
        assert curriculum.expected_sessions(2) == 3
        assert curriculum.expected_sessions(9) == 0

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            CurriculumConfig(modules=[
                ModuleConfig(id=1, title="A", sessions=1),
                ModuleConfig(id=1, title="B", sessions=2),
            ])


class TestRecentActivity:
    def test_accepts_joined_sessions_key(self):
        activity = RecentActivity.model_validate({
            "session_id": 4,
            "completion_percentage": 100,
            "last_accessed_at": "2025-06-25T16:45:00Z",
            "sessions": {"title": "The AVODAH Model", "module_id": 1, "session_number": 4},
        })
        assert activity.session.title == "The AVODAH Model"
        assert activity.model_dump()["session"]["module_id"] == 1


class TestDashboardSnapshot:
    def test_defaults(self):
        snapshot = DashboardSnapshot()
        assert snapshot.data_source == DataSource.FIXTURE
        assert snapshot.authenticated is True
        assert snapshot.continue_session is None


class TestFixtures:
    def test_fixture_module_progress(self):
        assert [p.module_id for p in FIXTURE_MODULE_PROGRESS] == [1, 2, 3, 4, 5]
        assert [p.total_sessions for p in FIXTURE_MODULE_PROGRESS] == [4, 4, 5, 4, 3]
        assert [p.completion_percentage for p in FIXTURE_MODULE_PROGRESS] == [100, 50, 0, 0, 0]

    def test_fixture_recent_activity_newest_first(self):
        timestamps = [a.last_accessed_at for a in FIXTURE_RECENT_ACTIVITY]
        assert timestamps == sorted(timestamps, reverse=True)
        assert FIXTURE_RECENT_ACTIVITY[0].session_id == 26
