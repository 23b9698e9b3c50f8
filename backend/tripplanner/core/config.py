from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


# Placeholder secrets that must never sign real tokens
INSECURE_SECRETS = {"your-secret-key", "your-secret-key-here", "secret", "changeme"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = "development"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./travel_planner.db"

    # JWT
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_days: int = 7

    # Passwords
    bcrypt_rounds: int = 12

    # CORS
    allowed_origins: list[str] = ["*"]

    # Trips
    share_token_bytes: int = 16
    trip_update_attempts: int = 3
    recommendation_limit: int = 6

    # Development-only reset-and-repopulate endpoint
    enable_seed_endpoint: Optional[bool] = None

    @field_validator("environment")
    @classmethod
    def check_environment(cls, value: str) -> str:
        value = value.lower()
        if value not in ("development", "production", "test"):
            raise ValueError("environment must be development, production or test")
        return value

    @field_validator("jwt_secret_key")
    @classmethod
    def check_jwt_secret(cls, value: str) -> str:
        if value.strip().lower() in INSECURE_SECRETS:
            raise ValueError("jwt_secret_key is a known placeholder; set a real secret")
        if len(value) < 16:
            raise ValueError("jwt_secret_key must be at least 16 characters")
        return value

    @field_validator("bcrypt_rounds")
    @classmethod
    def check_bcrypt_rounds(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return value

    @field_validator("trip_update_attempts", "recommendation_limit", "share_token_bytes")
    @classmethod
    def check_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be a positive integer")
        return value

    @model_validator(mode="after")
    def default_seed_endpoint(self) -> "Settings":
        if self.enable_seed_endpoint is None:
            self.enable_seed_endpoint = self.environment == "development"
        return self
