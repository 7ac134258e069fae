"""
Unit Tests for Authentication API Endpoints
"""
import pytest
from httpx import AsyncClient
from faker import Faker

from pathforge.core.security import create_access_token

fake = Faker()


def registration(**overrides):
    data = {
        'name': fake.name(),
        'email': f"{fake.user_name()}{fake.random_int(1000, 9999)}@gmail.com",
        'password': 'securePassword123!',
        'role': 'leader',
    }
    data.update(overrides)
    return data


class TestUserRegistration:
    """Test user registration endpoint"""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient, db_session):
        """Test successful registration returns a token and the user"""
        user_data = registration()

        response = await client.post('/api/v1/auth/register', json=user_data)

        assert response.status_code == 201
        data = response.json()
        assert data['token_type'] == 'bearer'
        assert data['access_token']
        assert data['user']['email'] == user_data['email'].lower()
        assert data['user']['role'] == 'leader'
        assert data['user']['onboarding_completed'] is False
        assert 'hashed_password' not in data['user']

    @pytest.mark.asyncio
    async def test_register_lowercases_email(self, client: AsyncClient, db_session):
        response = await client.post('/api/v1/auth/register', json=registration(email='Priya.Sharma@Gmail.com'))

        assert response.status_code == 201
        assert response.json()['user']['email'] == 'priya.sharma@gmail.com'

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, member_user):
        """Test registration with duplicate email fails"""
        response = await client.post('/api/v1/auth/register', json=registration(email=member_user.email))

        assert response.status_code == 400
        assert response.json()['detail'] == 'Email already registered'

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, client: AsyncClient, db_session):
        response = await client.post('/api/v1/auth/register', json=registration(email='not-an-email'))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_register_invalid_role(self, client: AsyncClient, db_session):
        response = await client.post('/api/v1/auth/register', json=registration(role='admin'))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_register_with_short_password(self, client: AsyncClient, db_session):
        response = await client.post('/api/v1/auth/register', json=registration(password='123'))
        assert response.status_code == 422


class TestUserLogin:
    """Test login endpoint"""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, member_user):
        response = await client.post('/api/v1/auth/login', json={
            'email': member_user.email,
            'password': 'testpassword123',
        })

        assert response.status_code == 200
        data = response.json()
        assert data['user']['id'] == member_user.id
        assert data['access_token']

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, member_user):
        response = await client.post('/api/v1/auth/login', json={
            'email': member_user.email,
            'password': 'wrongpassword',
        })

        assert response.status_code == 401
        assert response.json()['detail'] == 'Invalid email or password'

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient, db_session):
        response = await client.post('/api/v1/auth/login', json={
            'email': 'nobody@gmail.com',
            'password': 'whatever123',
        })

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_inactive_user(self, client: AsyncClient, db_session, member_user):
        member_user.is_active = False
        await db_session.flush()

        response = await client.post('/api/v1/auth/login', json={
            'email': member_user.email,
            'password': 'testpassword123',
        })

        assert response.status_code == 403


class TestCurrentUser:
    """Test /me and token validation"""

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, member_user, member_headers):
        response = await client.get('/api/v1/auth/me', headers=member_headers)

        assert response.status_code == 200
        assert response.json()['email'] == member_user.email

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient, db_session):
        response = await client.get('/api/v1/auth/me')

        assert response.status_code == 401
        assert response.json()['detail'] == 'Not authenticated'

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, client: AsyncClient, db_session):
        response = await client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_with_unknown_user(self, client: AsyncClient, db_session):
        token = create_access_token({'sub': '00000000-0000-0000-0000-000000000000'})

        response = await client.get('/api/v1/auth/me', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
