"""
PathForge - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['ANTHROPIC_API_KEY'] = ''
os.environ['USE_MOCK_CLAUDE'] = 'true'
os.environ['LOG_FILE'] = ''
os.environ['BCRYPT_ROUNDS'] = '4'

from pathforge.main import app
from pathforge.core.database import Base, get_db
from pathforge.core.security import get_password_hash, create_access_token
from pathforge.models.project_suggestion import ProjectSuggestion, ProjectDifficulty
from pathforge.models.roadmap import BuildMode
from pathforge.models.team import Team, generate_invite_code
from pathforge.models.user import User, UserRole, AcademicYear, ProjectField
from pathforge.services.roadmap_service import generate_roadmap

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

TEST_PASSWORD = 'testpassword123'


def make_email() -> str:
    return f"{fake.user_name()}{fake.random_int(1000, 9999)}@gmail.com"


def headers_for(user: User) -> dict:
    """Bearer headers for a user"""
    token = create_access_token({
        'sub': str(user.id),
        'email': user.email,
        'role': user.role.value
    })
    return {'Authorization': f'Bearer {token}'}


async def create_user(db: AsyncSession, role: UserRole, **fields) -> User:
    user = User(
        name=fake.name(),
        email=make_email(),
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role,
        is_active=True,
        **fields
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def project(db_session: AsyncSession) -> ProjectSuggestion:
    """A catalogue entry for 3rd-year web developers"""
    suggestion = ProjectSuggestion(
        title='Campus Event Portal',
        domain='Web Development',
        problem_statement='Students miss campus events because announcements are scattered.',
        real_world_application='Used by universities to centralise event announcements',
        interview_impact_score=7,
        why_interviewers_like=['Full-stack CRUD', 'Authentication'],
        difficulty=ProjectDifficulty.INTERMEDIATE,
        recommended_years=['2nd Year', '3rd Year'],
        tech_stack=['React', 'FastAPI', 'PostgreSQL'],
    )
    db_session.add(suggestion)
    await db_session.commit()
    await db_session.refresh(suggestion)
    return suggestion


@pytest.fixture
def user_factory(db_session: AsyncSession):
    """Create extra users: await user_factory(UserRole.MEMBER)"""
    async def factory(role: UserRole = UserRole.MEMBER, **fields) -> User:
        return await create_user(db_session, role, **fields)
    return factory


@pytest.fixture
def headers_factory():
    return headers_for


@pytest.fixture
async def leader_user(db_session: AsyncSession) -> User:
    return await create_user(
        db_session,
        UserRole.LEADER,
        academic_year=AcademicYear.THIRD,
        project_field=ProjectField.WEB_DEVELOPMENT,
    )


@pytest.fixture
async def member_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.MEMBER)


@pytest.fixture
def leader_headers(leader_user: User) -> dict:
    return headers_for(leader_user)


@pytest.fixture
def member_headers(member_user: User) -> dict:
    return headers_for(member_user)


@pytest.fixture
async def team(db_session: AsyncSession, leader_user: User, member_user: User, project: ProjectSuggestion) -> Team:
    """Leader's team with one member already joined"""
    new_team = Team(
        name='Tech Titans',
        invite_code=generate_invite_code(),
        leader_id=leader_user.id,
        project_title=project.title,
        selected_project_id=project.id,
        build_mode=BuildMode.AI_FIRST,
        max_members=5,
    )
    db_session.add(new_team)
    await db_session.flush()

    leader_user.team_id = new_team.id
    member_user.team_id = new_team.id
    await db_session.commit()
    await db_session.refresh(new_team)
    return new_team


@pytest.fixture
async def roadmap(db_session: AsyncSession, team: Team, project: ProjectSuggestion):
    """AI_FIRST roadmap for the team"""
    generated = await generate_roadmap(db_session, team.id, project.id, BuildMode.AI_FIRST)
    await db_session.commit()
    return generated
