"""
Unit Tests for Documentation API Endpoints
"""
import pytest
from httpx import AsyncClient


async def complete_phases(client, roadmap, headers, count):
    for phase in roadmap.phases[:count]:
        response = await client.patch(
            f'/api/v1/roadmap/{roadmap.id}/phase/{phase.id}/status', headers=headers, json={'status': 'COMPLETED'},
        )
        assert response.status_code == 200


async def generate(client, roadmap_id, headers):
    return await client.post('/api/v1/documentation/generate', headers=headers, json={'roadmap_id': roadmap_id})


class TestGetDocumentation:

    @pytest.mark.asyncio
    async def test_not_generated(self, client: AsyncClient, roadmap, member_headers):
        response = await client.get(f'/api/v1/documentation/roadmap/{roadmap.id}', headers=member_headers)

        assert response.status_code == 404
        assert response.json() == {
            'detail': 'Documentation not yet generated',
            'can_generate': False,
            'completed_phases': 0,
            'total_phases': 6,
        }

    @pytest.mark.asyncio
    async def test_unknown_roadmap(self, client: AsyncClient, member_headers):
        response = await client.get('/api/v1/documentation/roadmap/does-not-exist', headers=member_headers)

        assert response.status_code == 404
        assert response.json()['code'] == 'ROADMAP_NOT_FOUND'


class TestGenerateDocumentation:
    """Test POST /documentation/generate"""

    @pytest.mark.asyncio
    async def test_requires_completed_phase(self, client: AsyncClient, roadmap, leader_headers):
        response = await generate(client, roadmap.id, leader_headers)

        assert response.status_code == 400
        data = response.json()
        assert data['code'] == 'WORKFLOW_ERROR'
        assert data['details'] == {'completed_phases': 0, 'total_phases': 6}

    @pytest.mark.asyncio
    async def test_missing_roadmap_id(self, client: AsyncClient, leader_headers):
        response = await client.post('/api/v1/documentation/generate', headers=leader_headers, json={})

        assert response.status_code == 400
        assert response.json()['detail'] == 'roadmap_id is required'

    @pytest.mark.asyncio
    async def test_generate_then_regenerate(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 1)

        created = await generate(client, roadmap.id, leader_headers)
        assert created.status_code == 201
        doc = created.json()['documentation']
        assert created.json()['message'] == 'Documentation generated successfully'
        assert doc['generation_version'] == 1
        assert doc['phases_completed'] == 1
        assert doc['can_generate'] is True
        assert doc['is_complete'] is False
        assert len(doc['content']) == 8
        assert doc['content']['abstract']['generated_from'][0] == 'Project: Campus Event Portal'

        again = await generate(client, roadmap.id, leader_headers)
        assert again.status_code == 200
        assert again.json()['documentation']['id'] == doc['id']
        assert again.json()['documentation']['generation_version'] == 2

        fetched = await client.get(f'/api/v1/documentation/roadmap/{roadmap.id}', headers=leader_headers)
        assert fetched.status_code == 200
        assert fetched.json()['generation_version'] == 2

    @pytest.mark.asyncio
    async def test_regenerate_by_document_id(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 2)
        doc = (await generate(client, roadmap.id, leader_headers)).json()['documentation']

        response = await client.post(f"/api/v1/documentation/{doc['id']}/regenerate", headers=leader_headers)

        assert response.status_code == 200
        assert response.json()['message'] == 'Documentation regenerated successfully'
        assert response.json()['documentation']['generation_version'] == 2

    @pytest.mark.asyncio
    async def test_regenerate_unknown_document(self, client: AsyncClient, leader_headers):
        response = await client.post('/api/v1/documentation/missing/regenerate', headers=leader_headers)
        assert response.status_code == 404


class TestEditAndStats:

    @pytest.mark.asyncio
    async def test_edit_section(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 1)
        doc = (await generate(client, roadmap.id, leader_headers)).json()['documentation']

        response = await client.patch(f"/api/v1/documentation/{doc['id']}/edit", headers=leader_headers, json={
            'section': 'abstract', 'edited_text': 'Our own abstract in four words.',
        })

        assert response.status_code == 200
        assert response.json()['edit']['edited_text'] == 'Our own abstract in four words.'

        stats = (await client.get(f'/api/v1/documentation/stats/{roadmap.id}', headers=leader_headers)).json()
        assert stats['has_documentation'] is True
        assert stats['edited_sections'] == ['abstract']
        assert stats['word_counts']['abstract'] == 6

    @pytest.mark.asyncio
    async def test_edit_invalid_section(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 1)
        doc = (await generate(client, roadmap.id, leader_headers)).json()['documentation']

        response = await client.patch(f"/api/v1/documentation/{doc['id']}/edit", headers=leader_headers, json={
            'section': 'appendix', 'edited_text': 'Extra',
        })

        assert response.status_code == 400
        assert response.json()['detail'] == 'Invalid section name'

    @pytest.mark.asyncio
    async def test_stats_without_document(self, client: AsyncClient, roadmap, member_headers):
        response = await client.get(f'/api/v1/documentation/stats/{roadmap.id}', headers=member_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['has_documentation'] is False
        assert data['generation_version'] == 0
        assert data['tasks'] == {'total': 18, 'completed': 0, 'in_progress': 0}
        assert data['error_stats']['total'] == 0
