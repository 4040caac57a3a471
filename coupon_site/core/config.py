from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator
from typing import List


class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "Coupon Site API"
    API_PREFIX: str = "/api"

    # Database
    DATABASE_URL: str

    # Security
    JWT_SECRET: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]
    ALLOWED_HOSTS: List[str] = ["*"]

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Public assets (robots.txt, sitemap.xml)
    PUBLIC_DIR: str = "public"

    # Monitoring (Optional - Add to .env for production)
    SENTRY_DSN: str = ""

    # Admin
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = ""
    # Coupon create/update/delete are public unless this is enabled
    REQUIRE_AUTH_FOR_MUTATIONS: bool = False

    @field_validator("ENVIRONMENT")
    @classmethod
    def normalize_environment(cls, value: str) -> str:
        return value.lower().strip()

    @model_validator(mode="after")
    def validate_production_secret(self):
        if self.ENVIRONMENT == "production":
            normalized_secret = (self.JWT_SECRET or "").strip()
            if len(normalized_secret) < 32 or "change-me" in normalized_secret.lower():
                raise ValueError("JWT_SECRET must be at least 32 chars and not use placeholders in production")
        return self

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


def get_settings() -> Settings:
    return Settings()
