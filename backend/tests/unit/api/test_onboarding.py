"""
Unit Tests for Onboarding API Endpoints

Academic profile -> suggestions -> project selection -> build mode.
"""
import pytest
from httpx import AsyncClient

from pathforge.models.project_suggestion import ProjectSuggestion, ProjectDifficulty


async def add_project(db, title, domain, score, years):
    project = ProjectSuggestion(
        title=title,
        domain=domain,
        problem_statement=f"{title} problem",
        real_world_application=f"{title} application",
        interview_impact_score=score,
        why_interviewers_like=[],
        difficulty=ProjectDifficulty.BEGINNER_FRIENDLY,
        recommended_years=years,
        tech_stack=[],
    )
    db.add(project)
    await db.flush()
    return project


class TestAcademicProfile:
    """Test profile and suggestions"""

    @pytest.mark.asyncio
    async def test_save_profile(self, client: AsyncClient, member_headers):
        response = await client.post('/api/v1/onboarding/profile', headers=member_headers, json={
            'academic_year': '2nd Year',
            'project_field': 'Data Science',
        })

        assert response.status_code == 200
        assert response.json()['academic_year'] == '2nd Year'
        assert response.json()['project_field'] == 'Data Science'

    @pytest.mark.asyncio
    async def test_invalid_year(self, client: AsyncClient, member_headers):
        response = await client.post('/api/v1/onboarding/profile', headers=member_headers, json={
            'academic_year': '5th Year',
            'project_field': 'Data Science',
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_suggestions_require_profile(self, client: AsyncClient, member_headers):
        response = await client.get('/api/v1/onboarding/suggestions', headers=member_headers)

        assert response.status_code == 400
        assert response.json()['detail'] == 'Please complete academic profile first'

    @pytest.mark.asyncio
    async def test_suggestions_filtered_and_sorted(self, client: AsyncClient, db_session, leader_headers, project):
        await add_project(db_session, 'Placement Tracker', 'Web Development', 9, ['3rd Year', '4th Year'])
        await add_project(db_session, 'Portfolio Site', 'Web Development', 5, ['1st Year'])
        await add_project(db_session, 'Churn Model', 'Data Science', 10, ['3rd Year'])

        response = await client.get('/api/v1/onboarding/suggestions', headers=leader_headers)

        assert response.status_code == 200
        assert [p['title'] for p in response.json()] == ['Placement Tracker', 'Campus Event Portal']


class TestProjectAndBuildMode:
    """Test selecting a project and finishing onboarding"""

    @pytest.mark.asyncio
    async def test_select_unknown_project(self, client: AsyncClient, member_headers):
        response = await client.post('/api/v1/onboarding/select-project', headers=member_headers, json={
            'project_id': '00000000-0000-0000-0000-000000000000',
        })

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_status_tracks_progress(self, client: AsyncClient, member_headers, project):
        response = await client.get('/api/v1/onboarding/status', headers=member_headers)
        assert response.json()['has_academic_profile'] is False

        await client.post('/api/v1/onboarding/select-project', headers=member_headers, json={'project_id': project.id})
        response = await client.get('/api/v1/onboarding/status', headers=member_headers)

        data = response.json()
        assert data['has_selected_project'] is True
        assert data['selected_project']['title'] == 'Campus Event Portal'
        assert data['onboarding_completed'] is False

    @pytest.mark.asyncio
    async def test_build_mode_completes_onboarding(self, client: AsyncClient, member_headers):
        response = await client.post('/api/v1/onboarding/build-mode', headers=member_headers, json={
            'build_mode': 'GUIDED',
        })

        assert response.status_code == 200
        data = response.json()
        assert data['onboarding_completed'] is True
        assert data['build_mode'] == 'GUIDED'
        assert data['roadmap_generated'] is False

    @pytest.mark.asyncio
    async def test_leader_flow_generates_team_roadmap(self, client: AsyncClient, leader_headers, project):
        await client.post('/api/v1/onboarding/select-project', headers=leader_headers, json={'project_id': project.id})
        team = await client.post('/api/v1/team/create', headers=leader_headers, json={'name': 'Byte Builders'})
        assert team.status_code == 201
        assert team.json()['project_title'] == 'Campus Event Portal'

        response = await client.post('/api/v1/onboarding/build-mode', headers=leader_headers, json={
            'build_mode': 'BALANCED',
        })

        data = response.json()
        assert data['roadmap_generated'] is True

        roadmap = await client.get(f"/api/v1/roadmap/{data['roadmap_id']}", headers=leader_headers)
        assert roadmap.status_code == 200
        assert roadmap.json()['build_mode'] == 'BALANCED'
        assert roadmap.json()['total_estimated_days'] == 90

    @pytest.mark.asyncio
    async def test_invalid_build_mode(self, client: AsyncClient, member_headers):
        response = await client.post('/api/v1/onboarding/build-mode', headers=member_headers, json={
            'build_mode': 'TURBO',
        })
        assert response.status_code == 422
