"""
Unit Tests for Roadmap Generation
"""
import pytest

from pathforge.core.exceptions import TeamNotFoundError, ValidationError
from pathforge.models.roadmap import BuildMode, PhaseStatus, RoadmapStatus, TaskStatus
from pathforge.services.roadmap_service import generate_roadmap, get_team_roadmap
from pathforge.services.roadmap_templates import PHASE_TEMPLATES, TIMELINES, total_days


class TestTemplates:
    """Test timeline tables"""

    def test_six_phases(self):
        assert len(PHASE_TEMPLATES) == 6

    @pytest.mark.parametrize("mode,days", [
        (BuildMode.AI_FIRST, 45),
        (BuildMode.BALANCED, 90),
        (BuildMode.GUIDED, 120),
    ])
    def test_total_days(self, mode, days):
        assert total_days(mode) == days

    def test_every_phase_has_a_duration(self):
        for mode in BuildMode:
            assert set(TIMELINES[mode]) == {p["name"] for p in PHASE_TEMPLATES}


@pytest.mark.asyncio
class TestGenerateRoadmap:
    """Test roadmap creation for a team"""

    async def test_generated_structure(self, db_session, roadmap, team):
        assert roadmap.team_id == team.id
        assert roadmap.status == RoadmapStatus.GENERATED
        assert roadmap.total_estimated_days == 45
        assert [p.order for p in roadmap.phases] == [1, 2, 3, 4, 5, 6]
        assert roadmap.phases[0].status == PhaseStatus.ACTIVE
        assert all(p.status == PhaseStatus.LOCKED for p in roadmap.phases[1:])
        assert all(t.status == TaskStatus.TODO for p in roadmap.phases for t in p.tasks)
        assert team.roadmap_id == roadmap.id

    async def test_phase_dates_are_chained(self, db_session, roadmap):
        for previous, current in zip(roadmap.phases, roadmap.phases[1:]):
            assert current.start_date == previous.due_date

    async def test_generation_is_idempotent(self, db_session, roadmap, team, project):
        again = await generate_roadmap(db_session, team.id, project.id, BuildMode.GUIDED)

        assert again.id == roadmap.id
        assert again.build_mode == BuildMode.AI_FIRST

    async def test_get_team_roadmap(self, db_session, roadmap, team):
        found = await get_team_roadmap(db_session, team.id)
        assert found.id == roadmap.id

    async def test_unknown_build_mode(self, db_session, team, project):
        with pytest.raises(ValidationError):
            await generate_roadmap(db_session, team.id, project.id, "SPEEDRUN")

    async def test_unknown_team(self, db_session, project):
        with pytest.raises(TeamNotFoundError):
            await generate_roadmap(db_session, "00000000-0000-0000-0000-000000000000", project.id, BuildMode.GUIDED)
