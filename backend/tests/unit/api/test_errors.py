"""
Unit Tests for Error Logging API Endpoints
"""
import pytest
from httpx import AsyncClient

RUNTIME_ERROR = "TypeError: Cannot read property 'map' of undefined in EventList"


async def log_error(client, task_id, headers, text=RUNTIME_ERROR):
    response = await client.post('/api/v1/error/analyze', headers=headers, json={
        'task_id': task_id, 'error_input': text,
    })
    assert response.status_code == 201
    return response.json()


class TestAnalyze:
    """Test POST /error/analyze"""

    @pytest.mark.asyncio
    async def test_analyze_runtime_error(self, client: AsyncClient, roadmap, member_user, member_headers):
        task = roadmap.phases[0].tasks[0]

        data = await log_error(client, task.id, member_headers)

        assert data['error_type'] == 'RUNTIME'
        assert data['task_id'] == task.id
        assert data['user_id'] == member_user.id
        assert data['phase_id'] == roadmap.phases[0].id
        assert data['project_title'] == 'Campus Event Portal'
        assert data['build_mode'] == 'AI_FIRST'
        assert data['resolved'] is False
        assert set(data['analysis']) == {
            'what_went_wrong', 'why_it_happened', 'concept_involved', 'improved_prompt', 'next_steps',
        }

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient, member_headers):
        response = await client.post('/api/v1/error/analyze', headers=member_headers, json={'task_id': 'abc'})

        assert response.status_code == 400
        assert response.json()['detail'] == 'task_id and error_input are required'

    @pytest.mark.asyncio
    async def test_input_too_short(self, client: AsyncClient, roadmap, member_headers):
        response = await client.post('/api/v1/error/analyze', headers=member_headers, json={
            'task_id': roadmap.phases[0].tasks[0].id, 'error_input': 'it broke',
        })

        assert response.status_code == 400
        assert '20 characters' in response.json()['detail']

    @pytest.mark.asyncio
    async def test_unknown_task(self, client: AsyncClient, member_headers):
        response = await client.post('/api/v1/error/analyze', headers=member_headers, json={
            'task_id': '00000000-0000-0000-0000-000000000000', 'error_input': RUNTIME_ERROR,
        })

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post('/api/v1/error/analyze', json={'task_id': 'x', 'error_input': RUNTIME_ERROR})
        assert response.status_code == 401


class TestErrorHistory:

    @pytest.mark.asyncio
    async def test_task_errors_are_per_user(self, client: AsyncClient, roadmap, leader_headers, member_headers):
        task = roadmap.phases[0].tasks[0]
        await log_error(client, task.id, member_headers)
        await log_error(client, task.id, member_headers, 'What is a REST endpoint and why do we need it?')

        mine = await client.get(f'/api/v1/error/task/{task.id}', headers=member_headers)
        theirs = await client.get(f'/api/v1/error/task/{task.id}', headers=leader_headers)

        assert len(mine.json()) == 2
        assert theirs.json() == []

    @pytest.mark.asyncio
    async def test_resolve(self, client: AsyncClient, roadmap, member_headers):
        logged = await log_error(client, roadmap.phases[0].tasks[0].id, member_headers)

        response = await client.patch(f"/api/v1/error/{logged['id']}/resolve", headers=member_headers)

        assert response.status_code == 200
        assert response.json()['resolved'] is True
        assert response.json()['resolved_at'] is not None

    @pytest.mark.asyncio
    async def test_resolve_other_users_error(self, client: AsyncClient, roadmap, leader_headers, member_headers):
        logged = await log_error(client, roadmap.phases[0].tasks[0].id, member_headers)

        response = await client.patch(f"/api/v1/error/{logged['id']}/resolve", headers=leader_headers)

        assert response.status_code == 404
        assert response.json()['detail'] == 'Error log not found'

    @pytest.mark.asyncio
    async def test_concepts(self, client: AsyncClient, roadmap, member_headers):
        task_id = roadmap.phases[0].tasks[0].id
        first = await log_error(client, task_id, member_headers)
        await log_error(client, task_id, member_headers, 'ReferenceError: eventId is not defined anywhere')
        await client.patch(f"/api/v1/error/{first['id']}/resolve", headers=member_headers)

        response = await client.get('/api/v1/error/user/concepts', headers=member_headers)

        assert response.status_code == 200
        concepts = response.json()
        assert len(concepts) == 1
        assert concepts[0]['concept'] == 'Runtime Behavior'
        assert concepts[0]['count'] == 2
        assert concepts[0]['resolved_count'] == 1
        assert concepts[0]['unresolved_count'] == 1
