import pytest
from pydantic import ValidationError

from tripplanner.core.config import Settings
from tripplanner.main import create_app
from conftest import TEST_SECRET, make_settings


def test_missing_secret_fails_startup(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
    with pytest.raises(ValidationError):
        create_app()


@pytest.mark.parametrize("secret", ["your-secret-key", "changeme", "short"])
def test_insecure_secret_is_rejected(secret):
    with pytest.raises(ValidationError):
        make_settings(jwt_secret_key=secret)


def test_secret_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.setenv("TRIP_UPDATE_ATTEMPTS", "5")
    settings = Settings(_env_file=None)
    assert settings.jwt_secret_key == TEST_SECRET
    assert settings.trip_update_attempts == 5
    assert settings.jwt_access_token_expire_days == 7


def test_seed_endpoint_defaults_to_development_only():
    assert make_settings(environment="development", enable_seed_endpoint=None).enable_seed_endpoint is True
    assert make_settings(environment="production", enable_seed_endpoint=None).enable_seed_endpoint is False


def test_unknown_environment_is_rejected():
    with pytest.raises(ValidationError):
        make_settings(environment="staging")


def test_bcrypt_rounds_bounds():
    with pytest.raises(ValidationError):
        make_settings(bcrypt_rounds=3)
