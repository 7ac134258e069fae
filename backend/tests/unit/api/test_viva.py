"""
Unit Tests for Viva Preparation API Endpoints

Questions are template generated here since no AI key is configured.
"""
import pytest
from httpx import AsyncClient


async def complete_phases(client, roadmap, headers, count):
    for phase in roadmap.phases[:count]:
        await client.patch(
            f'/api/v1/roadmap/{roadmap.id}/phase/{phase.id}/status', headers=headers, json={'status': 'COMPLETED'},
        )


async def overview_questions(client, roadmap_id, headers):
    response = await client.post('/api/v1/viva/questions/generate', headers=headers, json={
        'roadmap_id': roadmap_id, 'category': 'PROJECT_OVERVIEW', 'count': 5,
    })
    assert response.status_code == 201
    return response.json()['questions']


class TestEligibility:

    @pytest.mark.asyncio
    async def test_locked_at_start(self, client: AsyncClient, roadmap, member_headers):
        response = await client.get(f'/api/v1/viva/eligibility/{roadmap.id}', headers=member_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['eligible'] is False
        assert data['completion_percentage'] == 0
        assert data['message'] == 'Complete 5 more phases to unlock Viva Preparation'

    @pytest.mark.asyncio
    async def test_partial_mode(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 5)

        data = (await client.get(f'/api/v1/viva/eligibility/{roadmap.id}', headers=leader_headers)).json()

        assert data['eligible'] is True
        assert data['full_mode_unlocked'] is False
        assert data['completion_percentage'] == 83

    @pytest.mark.asyncio
    async def test_generate_while_locked(self, client: AsyncClient, roadmap, member_headers):
        response = await client.post('/api/v1/viva/questions/generate', headers=member_headers, json={
            'roadmap_id': roadmap.id, 'category': 'CONCEPTUAL',
        })

        assert response.status_code == 403
        data = response.json()
        assert data['detail'] == 'Viva preparation not yet unlocked'
        assert data['details']['eligible'] is False

    @pytest.mark.asyncio
    async def test_list_while_locked(self, client: AsyncClient, roadmap, member_headers):
        response = await client.get(f'/api/v1/viva/questions/{roadmap.id}', headers=member_headers)
        assert response.status_code == 403


class TestQuestions:
    """Test question generation and practice tracking"""

    @pytest.mark.asyncio
    async def test_generate_and_list(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 5)

        questions = await overview_questions(client, roadmap.id, leader_headers)
        assert len(questions) == 2
        assert all(q['category'] == 'PROJECT_OVERVIEW' for q in questions)
        assert questions[0]['prep_data']['confidence_level'] == 'NOT_ATTEMPTED'

        response = await client.get(
            f'/api/v1/viva/questions/{roadmap.id}', headers=leader_headers, params={'category': 'PROJECT_OVERVIEW'},
        )
        assert response.json()['total'] == 2

    @pytest.mark.asyncio
    async def test_generation_reuses_questions(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 5)

        first = await overview_questions(client, roadmap.id, leader_headers)
        second = await overview_questions(client, roadmap.id, leader_headers)

        assert [q['id'] for q in first] == [q['id'] for q in second]

    @pytest.mark.asyncio
    async def test_invalid_category(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 5)

        response = await client.post('/api/v1/viva/questions/generate', headers=leader_headers, json={
            'roadmap_id': roadmap.id, 'category': 'TRIVIA',
        })

        assert response.status_code == 400
        assert response.json()['detail'] == 'Invalid category: TRIVIA'

    @pytest.mark.asyncio
    async def test_questions_are_private(self, client: AsyncClient, roadmap, leader_headers, member_headers):
        await complete_phases(client, roadmap, leader_headers, 5)
        question = (await overview_questions(client, roadmap.id, leader_headers))[0]

        own = await client.get(f"/api/v1/viva/question/{question['id']}", headers=leader_headers)
        other = await client.get(f"/api/v1/viva/question/{question['id']}", headers=member_headers)

        assert own.status_code == 200
        assert other.status_code == 404

    @pytest.mark.asyncio
    async def test_confidence_and_revision_list(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 5)
        first, second = await overview_questions(client, roadmap.id, leader_headers)

        revise = await client.patch(f"/api/v1/viva/confidence/{first['id']}", headers=leader_headers, json={
            'confidence_level': 'NEEDS_REVISION', 'notes': 'Rehearse the problem statement',
        })
        assert revise.status_code == 200
        assert revise.json()['prep_data']['marked_for_revision'] is True
        assert revise.json()['prep_data']['practice_count'] == 1

        await client.patch(f"/api/v1/viva/confidence/{second['id']}", headers=leader_headers, json={
            'confidence_level': 'CONFIDENT',
        })

        revision = (await client.get(f'/api/v1/viva/revision-list/{roadmap.id}', headers=leader_headers)).json()
        assert revision['total'] == 1
        assert revision['questions'][0]['id'] == first['id']
        assert revision['questions'][0]['prep_data']['notes'] == 'Rehearse the problem statement'

        stats = (await client.get(f'/api/v1/viva/stats/{roadmap.id}', headers=leader_headers)).json()
        assert stats['total_questions'] == 2
        assert stats['practiced'] == 2
        assert stats['confident'] == 1
        assert stats['needs_revision'] == 1
        assert stats['not_attempted'] == 0
        assert stats['by_category']['PROJECT_OVERVIEW'] == {'total': 2, 'confident': 1, 'needs_revision': 1}

    @pytest.mark.asyncio
    async def test_confidence_accepts_put(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 5)
        question = (await overview_questions(client, roadmap.id, leader_headers))[0]

        first = await client.put(f"/api/v1/viva/confidence/{question['id']}", headers=leader_headers, json={
            'confidence_level': 'CONFIDENT',
        })
        second = await client.put(f"/api/v1/viva/confidence/{question['id']}", headers=leader_headers, json={
            'confidence_level': 'CONFIDENT',
        })

        assert first.status_code == 200
        assert second.json()['prep_data']['practice_count'] == 2
        assert second.json()['prep_data']['marked_for_revision'] is False

    @pytest.mark.asyncio
    async def test_invalid_confidence(self, client: AsyncClient, roadmap, leader_headers):
        await complete_phases(client, roadmap, leader_headers, 5)
        question = (await overview_questions(client, roadmap.id, leader_headers))[0]

        response = await client.patch(f"/api/v1/viva/confidence/{question['id']}", headers=leader_headers, json={
            'confidence_level': 'SURE',
        })

        assert response.status_code == 400
        assert response.json()['detail'] == 'Invalid confidence level'
