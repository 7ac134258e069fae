"""
Unit Tests for HTTP Middleware
Tests for: request id correlation, quiet paths, security headers
"""
import pytest
from httpx import AsyncClient

from pathforge.core.logging_config import get_request_id
from pathforge.core.middleware import is_quiet_path


class TestQuietPaths:

    def test_health_and_docs_are_quiet(self):
        assert is_quiet_path('/health')
        assert is_quiet_path('/docs/oauth2-redirect')

    def test_api_routes_are_logged(self):
        assert not is_quiet_path('/api/v1/roadmap/team/abc')


class TestRequestCorrelation:

    @pytest.mark.asyncio
    async def test_caller_request_id_echoed(self, client: AsyncClient):
        response = await client.get('/health', headers={'X-Request-ID': 'viva-demo-42'})

        assert response.headers['X-Request-ID'] == 'viva-demo-42'
        assert response.headers['X-Response-Time'].endswith('ms')

    @pytest.mark.asyncio
    async def test_request_id_issued_when_missing(self, client: AsyncClient):
        response = await client.get('/health')
        assert response.headers['X-Request-ID']

    @pytest.mark.asyncio
    async def test_log_context_cleared_after_request(self, client: AsyncClient, member_headers):
        await client.get('/api/v1/auth/me', headers=member_headers)
        assert get_request_id() == ''


class TestSecurityHeaders:

    @pytest.mark.asyncio
    async def test_api_responses_not_cached(self, client: AsyncClient):
        response = await client.get('/api/v1/nothing-here')

        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['X-Frame-Options'] == 'DENY'
        assert response.headers['Cache-Control'] == 'no-store'

    @pytest.mark.asyncio
    async def test_health_cacheable(self, client: AsyncClient):
        response = await client.get('/health')
        assert 'Cache-Control' not in response.headers
