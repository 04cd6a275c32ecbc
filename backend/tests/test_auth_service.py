import pytest
from datetime import date, timedelta

from wall.core import messages
from wall.core.exceptions import ConflictError, UnauthorizedError
from wall.core.security import TokenService
from wall.repositories.profile_repository import ProfileRepository
from wall.services.auth_service import AuthService


@pytest.fixture
def auth_service(db):
    tokens = TokenService(secret_key="test-secret", access_ttl=timedelta(days=10), refresh_ttl=timedelta(days=7))
    return AuthService(ProfileRepository(db), tokens)


class TestRegister:
    def test_register_creates_blank_profile_and_tokens(self, auth_service):
        result = auth_service.register("alice@x.com", "pw123")

        assert result.user.id == 1
        assert result.user.email == "alice@x.com"
        assert result.user.avatar == ""
        assert result.user.first_name == ""
        assert result.user.last_name == ""
        assert result.user.about == ""
        assert result.user.phone == ""
        assert result.user.birth_date == date(1900, 1, 1)
        assert auth_service.validate_token(result.access_token)["id"] == 1
        assert auth_service.validate_token(result.refresh_token)["id"] == 1

    def test_snapshot_never_carries_password_hash(self, auth_service):
        result = auth_service.register("alice@x.com", "pw123")
        dumped = result.user.model_dump(by_alias=True)

        assert "passwordHash" not in dumped
        assert "password_hash" not in dumped
        assert set(dumped) == {"id", "email", "avatar", "about", "birthDate", "phone", "firstName", "lastName"}

    def test_duplicate_email_conflicts_and_keeps_first_record(self, auth_service, db):
        first = auth_service.register("alice@x.com", "pw123")

        with pytest.raises(ConflictError) as exc_info:
            auth_service.register("alice@x.com", "other")

        assert exc_info.value.status_code == 409
        assert exc_info.value.detail == messages.EMAIL_TAKEN
        # First registration's password still works
        assert auth_service.login("alice@x.com", "pw123").user.id == first.user.id

    def test_email_match_is_case_sensitive(self, auth_service):
        auth_service.register("alice@x.com", "pw123")

        result = auth_service.register("Alice@x.com", "pw123")

        assert result.user.id == 2


class TestLogin:
    def test_login_with_correct_password(self, auth_service):
        registered = auth_service.register("alice@x.com", "pw123")

        result = auth_service.login("alice@x.com", "pw123")

        assert result.user == registered.user
        assert auth_service.validate_token(result.access_token)["sub"] == str(registered.user.id)

    @pytest.mark.parametrize(
        "email,password",
        [
            ("alice@x.com", "wrong"),
            ("nobody@x.com", "pw123"),
            ("nobody@x.com", "wrong"),
            ("ALICE@x.com", "pw123"),
        ],
    )
    def test_failures_are_indistinguishable(self, auth_service, email, password):
        auth_service.register("alice@x.com", "pw123")

        with pytest.raises(UnauthorizedError) as exc_info:
            auth_service.login(email, password)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == messages.INVALID_CREDENTIALS


def test_validate_token_collapses_failures_to_none(auth_service):
    assert auth_service.validate_token("garbage") is None
    assert auth_service.validate_token(None) is None
