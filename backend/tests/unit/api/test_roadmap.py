"""
Unit Tests for Roadmap API Endpoints
"""
import pytest
from httpx import AsyncClient

from pathforge.models.roadmap import TaskStatus
from pathforge.models.user import UserRole


class TestGenerateRoadmap:
    """Test roadmap generation"""

    @pytest.mark.asyncio
    async def test_requires_onboarding(self, client: AsyncClient, team, project, leader_headers):
        response = await client.post('/api/v1/roadmap/generate', headers=leader_headers, json={
            'team_id': team.id, 'project_id': project.id, 'build_mode': 'GUIDED',
        })

        assert response.status_code == 403
        assert response.json()['detail'] == 'Please complete onboarding first'

    @pytest.mark.asyncio
    async def test_generate(self, client: AsyncClient, db_session, team, project, leader_user, leader_headers):
        leader_user.onboarding_completed = True
        await db_session.flush()

        response = await client.post('/api/v1/roadmap/generate', headers=leader_headers, json={
            'team_id': team.id, 'project_id': project.id, 'build_mode': 'GUIDED',
        })

        assert response.status_code == 201
        data = response.json()
        assert data['build_mode'] == 'GUIDED'
        assert data['total_estimated_days'] == 120
        assert len(data['phases']) == 6
        assert data['phases'][0]['status'] == 'ACTIVE'
        assert data['phases'][1]['status'] == 'LOCKED'

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient, db_session, leader_user, leader_headers):
        leader_user.onboarding_completed = True
        await db_session.flush()

        response = await client.post('/api/v1/roadmap/generate', headers=leader_headers, json={'build_mode': 'GUIDED'})

        assert response.status_code == 400
        assert response.json()['detail'] == 'team_id, project_id and build_mode are required'


class TestGetRoadmap:

    @pytest.mark.asyncio
    async def test_by_team(self, client: AsyncClient, roadmap, team, member_headers):
        response = await client.get(f'/api/v1/roadmap/team/{team.id}', headers=member_headers)

        assert response.status_code == 200
        assert response.json()['id'] == roadmap.id
        assert [len(p['tasks']) for p in response.json()['phases']] == [3] * 6

    @pytest.mark.asyncio
    async def test_team_without_roadmap(self, client: AsyncClient, team, member_headers):
        response = await client.get(f'/api/v1/roadmap/team/{team.id}', headers=member_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_roadmap(self, client: AsyncClient, member_headers):
        response = await client.get('/api/v1/roadmap/00000000-0000-0000-0000-000000000000', headers=member_headers)

        assert response.status_code == 404
        assert response.json()['code'] == 'ROADMAP_NOT_FOUND'


class TestStatusUpdates:
    """Test leader overrides and the unlock cascade"""

    @pytest.mark.asyncio
    async def test_leader_completes_phase(self, client: AsyncClient, roadmap, leader_headers):
        first, second = roadmap.phases[0], roadmap.phases[1]

        response = await client.patch(
            f'/api/v1/roadmap/{roadmap.id}/phase/{first.id}/status',
            headers=leader_headers, json={'status': 'COMPLETED'},
        )

        assert response.status_code == 200
        data = response.json()
        assert data['phase_completed'] is True
        assert data['next_phase_unlocked'] is True
        assert data['next_phase_id'] == second.id
        assert data['roadmap_status'] == 'IN_PROGRESS'

    @pytest.mark.asyncio
    async def test_member_cannot_override_phase(self, client: AsyncClient, roadmap, member_headers):
        response = await client.patch(
            f'/api/v1/roadmap/{roadmap.id}/phase/{roadmap.phases[0].id}/status',
            headers=member_headers, json={'status': 'COMPLETED'},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_leader_of_another_team_rejected(self, client: AsyncClient, roadmap, user_factory, headers_factory):
        outsider = await user_factory(UserRole.LEADER)

        response = await client.patch(
            f'/api/v1/roadmap/{roadmap.id}/phase/{roadmap.phases[0].id}/status',
            headers=headers_factory(outsider), json={'status': 'COMPLETED'},
        )

        assert response.status_code == 403
        assert response.json()['detail'] == 'Only the team leader can perform this action'

    @pytest.mark.asyncio
    async def test_backwards_phase_move_rejected(self, client: AsyncClient, roadmap, leader_headers):
        response = await client.patch(
            f'/api/v1/roadmap/{roadmap.id}/phase/{roadmap.phases[0].id}/status',
            headers=leader_headers, json={'status': 'LOCKED'},
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'WORKFLOW_ERROR'

    @pytest.mark.asyncio
    async def test_task_status_update(self, client: AsyncClient, roadmap, leader_headers):
        task = roadmap.phases[0].tasks[0]

        response = await client.patch(f'/api/v1/roadmap/task/{task.id}/status', headers=leader_headers, json={
            'status': 'IN_PROGRESS',
        })

        assert response.status_code == 200
        assert response.json()['task']['status'] == 'IN_PROGRESS'
        assert response.json()['phase_status'] == 'IN_PROGRESS'

    @pytest.mark.asyncio
    async def test_invalid_task_status(self, client: AsyncClient, roadmap, leader_headers):
        task = roadmap.phases[0].tasks[0]

        response = await client.patch(f'/api/v1/roadmap/task/{task.id}/status', headers=leader_headers, json={
            'status': 'FINISHED',
        })

        assert response.status_code == 400
        assert response.json()['detail'] == 'Invalid status'

    @pytest.mark.asyncio
    async def test_member_cannot_set_task_status(self, client: AsyncClient, roadmap, member_headers):
        task = roadmap.phases[0].tasks[0]

        response = await client.patch(f'/api/v1/roadmap/task/{task.id}/status', headers=member_headers, json={
            'status': 'COMPLETED',
        })

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_task_status_outside_team_rejected(
        self, client: AsyncClient, db_session, roadmap, user_factory, headers_factory
    ):
        task = roadmap.phases[0].tasks[0]
        outsider = await user_factory(UserRole.LEADER)

        response = await client.patch(
            f'/api/v1/roadmap/task/{task.id}/status',
            headers=headers_factory(outsider), json={'status': 'COMPLETED'},
        )

        assert response.status_code == 403
        assert response.json()['detail'] == 'Only the team leader can perform this action'

        await db_session.refresh(task)
        assert task.status == TaskStatus.TODO


class TestAssignTask:

    @pytest.mark.asyncio
    async def test_assign_and_unassign(self, client: AsyncClient, roadmap, member_user, leader_headers):
        task = roadmap.phases[0].tasks[0]

        response = await client.patch(f'/api/v1/roadmap/task/{task.id}/assign', headers=leader_headers, json={
            'user_id': member_user.id,
        })
        assert response.status_code == 200
        assert response.json()['assignee']['id'] == member_user.id

        response = await client.patch(f'/api/v1/roadmap/task/{task.id}/assign', headers=leader_headers, json={
            'user_id': None,
        })
        assert response.status_code == 200
        assert response.json()['assigned_to'] is None

    @pytest.mark.asyncio
    async def test_assign_non_member(self, client: AsyncClient, roadmap, leader_headers, user_factory):
        outsider = await user_factory(UserRole.MEMBER)
        task = roadmap.phases[0].tasks[0]

        response = await client.patch(f'/api/v1/roadmap/task/{task.id}/assign', headers=leader_headers, json={
            'user_id': outsider.id,
        })

        assert response.status_code == 400
