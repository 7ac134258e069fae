"""
Unit Tests for Rate Limiting
Tests for: limit keys, user id propagation from the auth dependency
"""
import pytest
from fastapi.security import HTTPAuthorizationCredentials
from starlette.requests import Request

from pathforge.core.rate_limiter import get_user_identifier
from pathforge.core.security import create_access_token
from pathforge.models.user import UserRole
from pathforge.modules.auth.dependencies import get_current_user


def make_request() -> Request:
    return Request({
        "type": "http",
        "method": "POST",
        "path": "/api/v1/viva/questions/generate",
        "headers": [],
        "client": ("10.0.0.7", 5050),
    })


class TestUserIdentifier:
    """Test the rate limit key"""

    def test_anonymous_keyed_by_ip(self):
        assert get_user_identifier(make_request()) == "ip:10.0.0.7"

    def test_user_id_takes_precedence(self):
        request = make_request()
        request.state.user_id = "abc"

        assert get_user_identifier(request) == "user:abc"


class TestAuthDependencyKeying:
    """get_current_user leaves the user id for the limiter"""

    @pytest.mark.asyncio
    async def test_authenticated_request_keyed_by_user(self, db_session, user_factory):
        user = await user_factory(UserRole.MEMBER)
        token = create_access_token({'sub': str(user.id), 'email': user.email, 'role': user.role.value})
        request = make_request()

        await get_current_user(
            request, HTTPAuthorizationCredentials(scheme="Bearer", credentials=token), db_session
        )

        assert get_user_identifier(request) == f"user:{user.id}"
