"""
Unit Tests for the health endpoint
"""
import pytest
from httpx import AsyncClient


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get('/health')

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'healthy'
        assert data['app_name'] == 'PathForge'
        assert 'version' in data

    @pytest.mark.asyncio
    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get('/api/v1/nothing-here')
        assert response.status_code == 404
