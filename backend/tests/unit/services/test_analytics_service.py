"""
Unit Tests for Learning Analytics
"""
from datetime import datetime, timedelta

import pytest

from pathforge.core.exceptions import RoadmapNotFoundError
from pathforge.models.error_log import ErrorLog, ErrorType
from pathforge.services.analytics_service import (
    analytics_service,
    distribution_fairness,
    improvement_trend,
    learning_quality_score,
    participation_level,
)
from pathforge.services.execution_service import execution_service


def errors_with(resolved_flags):
    start = datetime(2026, 3, 1, 9, 0)
    return [
        ErrorLog(resolved=flag, created_at=start + timedelta(hours=i))
        for i, flag in enumerate(resolved_flags)
    ]


class TestImprovementTrend:
    """Test resolved-rate comparison between halves"""

    def test_insufficient_data(self):
        assert improvement_trend(errors_with([True, False])) == "INSUFFICIENT_DATA"

    def test_improving(self):
        assert improvement_trend(errors_with([False, False, True, True])) == "IMPROVING"

    def test_declining(self):
        assert improvement_trend(errors_with([True, True, False, False])) == "DECLINING"

    def test_stable(self):
        assert improvement_trend(errors_with([True, False, True, False])) == "STABLE"

    def test_order_follows_created_at(self):
        errors = list(reversed(errors_with([False, False, True, True])))
        assert improvement_trend(errors) == "IMPROVING"


class TestScores:
    """Test participation, quality and fairness formulas"""

    @pytest.mark.parametrize("completed,level", [(0, "LOW"), (1, "LOW"), (2, "MEDIUM"), (4, "MEDIUM"), (5, "HIGH")])
    def test_participation_level(self, completed, level):
        assert participation_level(completed) == level

    def test_quality_score_maximum(self):
        assert learning_quality_score(1.0, 1.0, 1.0, "IMPROVING") == 100.0

    def test_quality_score_without_activity(self):
        assert learning_quality_score(0.0, 0.0, 0.0, "INSUFFICIENT_DATA") == 10.0

    def test_fairness_even_split(self):
        assert distribution_fairness([2, 2, 2]) == 100.0

    def test_fairness_uneven_split(self):
        assert distribution_fairness([3, 1]) == 50.0

    def test_fairness_never_negative(self):
        assert distribution_fairness([9, 0, 0]) == 0.0

    def test_fairness_without_work(self):
        assert distribution_fairness([]) == 0.0
        assert distribution_fairness([0, 0]) == 0.0


@pytest.mark.asyncio
class TestAnalyticsService:
    """Test analytics computed from tracked roadmap data"""

    async def _complete_first_task(self, db, roadmap, leader, member):
        task = roadmap.phases[0].tasks[0]
        await execution_service.assign_task(db, task.id, leader, member.id)
        await execution_service.start_task(db, task.id, member)
        await execution_service.record_prompt_view(db, task.id, member, 1)
        await execution_service.record_prompt_view(db, task.id, member, 2)
        await execution_service.confirm_understanding(db, task.id, member)
        await execution_service.complete_task(db, task.id, member)
        return task

    async def test_user_analytics(self, db_session, roadmap, leader_user, member_user):
        await self._complete_first_task(db_session, roadmap, leader_user, member_user)

        metrics = await analytics_service.get_user_analytics(db_session, roadmap.id, member_user)

        assert metrics["tasks_assigned"] == 1
        assert metrics["total_tasks_completed"] == 1
        assert metrics["prompt_engagement"] == {"score": 0.5, "viewed": 2, "required": 4}
        assert metrics["prompt_adherence_rate"] == 1.0
        assert metrics["error_to_understanding_rate"] == 0.0
        assert metrics["improvement_trend"] == "INSUFFICIENT_DATA"
        assert metrics["learning_quality_score"] == 52.5
        assert metrics["contribution_percentage"] == 100.0
        assert metrics["phase_participation"][0]["task_count"] == 1
        assert len(metrics["phase_participation"]) == 6
        assert metrics["learning_timeline"][0]["tasks_completed"] == 1

    async def test_error_metrics(self, db_session, roadmap, leader_user, member_user):
        task = await self._complete_first_task(db_session, roadmap, leader_user, member_user)
        for resolved in (True, False):
            db_session.add(ErrorLog(
                task_id=task.id,
                user_id=member_user.id,
                build_mode=roadmap.build_mode,
                error_input="TypeError: x is undefined in the loop",
                error_type=ErrorType.RUNTIME,
                analysis={"concept_involved": "**Runtime Behavior**: execution flow"},
                resolved=resolved,
            ))
        await db_session.flush()

        metrics = await analytics_service.get_user_analytics(db_session, roadmap.id, member_user)

        assert metrics["total_errors"] == 2
        assert metrics["error_recovery_count"] == 1
        assert metrics["error_to_understanding_rate"] == 0.5
        assert metrics["concepts_mastered"] == ["Runtime Behavior"]
        assert metrics["concept_repetition"] == [
            {"concept": "Runtime Behavior", "error_count": 2, "resolved": False}
        ]

    async def test_team_analytics(self, db_session, roadmap, leader_user, member_user):
        await self._complete_first_task(db_session, roadmap, leader_user, member_user)

        team = await analytics_service.get_team_analytics(db_session, roadmap.id)

        assert team["members"][0]["user_id"] == member_user.id
        assert [m["task_count"] for m in team["task_distribution"]] == [1, 0]
        assert team["fairness_score"] == 0.0
        assert team["team_summary"]["total_members"] == 2
        assert team["team_summary"]["total_tasks_completed"] == 1

    async def test_unknown_roadmap(self, db_session, member_user):
        with pytest.raises(RoadmapNotFoundError):
            await analytics_service.get_user_analytics(db_session, "00000000-0000-0000-0000-000000000000", member_user)
