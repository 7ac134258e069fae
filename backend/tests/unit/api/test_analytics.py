"""
Unit Tests for Analytics API Endpoints
"""
import pytest
from httpx import AsyncClient

from pathforge.models.user import UserRole


class TestMyAnalytics:

    @pytest.mark.asyncio
    async def test_fresh_roadmap(self, client: AsyncClient, roadmap, member_user, member_headers):
        response = await client.get(f'/api/v1/analytics/roadmap/{roadmap.id}/me', headers=member_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['user_id'] == member_user.id
        assert data['tasks_assigned'] == 0
        assert data['prompt_engagement'] == {'score': 0.0, 'viewed': 0, 'required': 0}
        assert data['improvement_trend'] == 'INSUFFICIENT_DATA'
        assert data['learning_quality_score'] == 10.0
        assert data['contribution_percentage'] == 0.0
        assert len(data['phase_participation']) == 6
        assert data['learning_timeline'] == []

    @pytest.mark.asyncio
    async def test_counts_viewed_prompts(self, client: AsyncClient, roadmap, member_user, leader_headers, member_headers):
        task = roadmap.phases[0].tasks[0]
        await client.post(f'/api/v1/execution/task/{task.id}/assign', headers=leader_headers, json={'user_id': member_user.id})
        for step in (1, 2):
            await client.post(f'/api/v1/execution/task/{task.id}/prompt-viewed', headers=member_headers, json={'prompt_step': step})

        data = (await client.get(f'/api/v1/analytics/roadmap/{roadmap.id}/me', headers=member_headers)).json()

        assert data['tasks_assigned'] == 1
        assert data['prompt_engagement'] == {'score': 0.5, 'viewed': 2, 'required': 4}
        assert data['learning_timeline'][0]['prompts_viewed'] == 2

    @pytest.mark.asyncio
    async def test_unknown_roadmap(self, client: AsyncClient, member_headers):
        response = await client.get('/api/v1/analytics/roadmap/unknown/me', headers=member_headers)
        assert response.status_code == 404


class TestTeamAnalytics:
    """Test the leader-only team view"""

    @pytest.mark.asyncio
    async def test_leader_view(self, client: AsyncClient, roadmap, leader_headers):
        response = await client.get(f'/api/v1/analytics/roadmap/{roadmap.id}/team', headers=leader_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['team_id'] == roadmap.team_id
        assert len(data['members']) == 2
        assert data['fairness_score'] == 0.0
        assert data['team_summary']['total_members'] == 2
        assert data['team_summary']['total_tasks_completed'] == 0

    @pytest.mark.asyncio
    async def test_member_forbidden(self, client: AsyncClient, roadmap, member_headers):
        response = await client.get(f'/api/v1/analytics/roadmap/{roadmap.id}/team', headers=member_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_other_leader_forbidden(self, client: AsyncClient, roadmap, user_factory, headers_factory):
        outsider = await user_factory(UserRole.LEADER)

        response = await client.get(f'/api/v1/analytics/roadmap/{roadmap.id}/team', headers=headers_factory(outsider))

        assert response.status_code == 403
        assert response.json()['detail'] == 'Only the team leader can view team analytics'


class TestUserAnalytics:

    @pytest.mark.asyncio
    async def test_leader_views_member(self, client: AsyncClient, roadmap, member_user, leader_headers):
        response = await client.get(
            f'/api/v1/analytics/roadmap/{roadmap.id}/user/{member_user.id}', headers=leader_headers
        )

        assert response.status_code == 200
        assert response.json()['user_id'] == member_user.id

    @pytest.mark.asyncio
    async def test_member_views_self(self, client: AsyncClient, roadmap, member_user, member_headers):
        response = await client.get(
            f'/api/v1/analytics/roadmap/{roadmap.id}/user/{member_user.id}', headers=member_headers
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_member_cannot_view_leader(self, client: AsyncClient, roadmap, leader_user, member_headers):
        response = await client.get(
            f'/api/v1/analytics/roadmap/{roadmap.id}/user/{leader_user.id}', headers=member_headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_user_outside_team(self, client: AsyncClient, roadmap, leader_headers, user_factory):
        outsider = await user_factory(UserRole.MEMBER)

        response = await client.get(
            f'/api/v1/analytics/roadmap/{roadmap.id}/user/{outsider.id}', headers=leader_headers
        )

        assert response.status_code == 404
        assert response.json()['detail'] == 'User not found in this team'
