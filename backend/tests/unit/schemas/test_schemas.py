"""
Unit Tests for request schemas
Tests for: validation of registration, onboarding, team and viva input
"""
import pytest
from pydantic import ValidationError

from pathforge.models.roadmap import BuildMode
from pathforge.models.user import AcademicYear, ProjectField, UserRole
from pathforge.schemas.auth import UserRegister, UserLogin
from pathforge.schemas.execution import PromptCopy, TaskComplete
from pathforge.schemas.onboarding import AcademicProfileUpdate, BuildModeSelect
from pathforge.schemas.team import TeamCreate, TeamJoin
from pathforge.schemas.viva import QuestionGenerate


class TestUserRegister:
    """Test UserRegister schema"""

    def test_valid_registration(self):
        user = UserRegister(name='Asha Rao', email='asha@gmail.com', password='secret12', role='leader')

        assert user.role == UserRole.LEADER
        assert user.email == 'asha@gmail.com'

    def test_short_password_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            UserRegister(name='Asha', email='asha@gmail.com', password='12345', role='member')

        assert 'password' in str(exc_info.value)

    def test_unknown_role_fails(self):
        with pytest.raises(ValidationError):
            UserRegister(name='Asha', email='asha@gmail.com', password='secret12', role='faculty')

    def test_invalid_email_fails(self):
        with pytest.raises(ValidationError):
            UserLogin(email='not-an-email', password='secret12')


class TestOnboardingSchemas:

    def test_profile_uses_display_values(self):
        profile = AcademicProfileUpdate(academic_year='2nd Year', project_field='Data Science')

        assert profile.academic_year == AcademicYear.SECOND
        assert profile.project_field == ProjectField.DATA_SCIENCE

    def test_profile_rejects_enum_names(self):
        with pytest.raises(ValidationError):
            AcademicProfileUpdate(academic_year='SECOND', project_field='Data Science')

    def test_build_mode(self):
        assert BuildModeSelect(build_mode='GUIDED').build_mode == BuildMode.GUIDED
        with pytest.raises(ValidationError):
            BuildModeSelect(build_mode='MANUAL')


class TestTeamSchemas:

    def test_name_length(self):
        assert TeamCreate(name='AB').name == 'AB'
        with pytest.raises(ValidationError):
            TeamCreate(name='A')

    def test_invite_code_required(self):
        with pytest.raises(ValidationError):
            TeamJoin(invite_code='')


class TestExecutionSchemas:

    def test_negative_hours_rejected(self):
        with pytest.raises(ValidationError):
            TaskComplete(actual_hours=-1)

    def test_prompt_copy_optional_fields(self):
        copy = PromptCopy(prompt_text='Ask AI: explain REST')

        assert copy.prompt_type is None
        assert copy.prompt_step is None


class TestQuestionGenerate:

    def test_default_count(self):
        assert QuestionGenerate(roadmap_id='r1', category='CONCEPTUAL').count == 5

    @pytest.mark.parametrize('count', [0, 21])
    def test_count_bounds(self, count):
        with pytest.raises(ValidationError):
            QuestionGenerate(roadmap_id='r1', category='CONCEPTUAL', count=count)
