"""
Centralized configuration for the Vellum backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., JWT_*, SMTP_*, SUPABASE_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Vellum API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Token signing. Refresh tokens use their own secret; verify and reset
    # tokens share the access secret and are told apart by their purpose claim.
    jwt_access_secret: str = ""
    jwt_refresh_secret: str = ""
    jwt_algorithm: str = "HS256"

    # Token lifetimes
    access_token_ttl_seconds: int = 15 * 60
    refresh_token_ttl_seconds: int = 7 * 24 * 60 * 60
    verify_token_ttl_seconds: int = 24 * 60 * 60
    reset_token_ttl_seconds: int = 60 * 60

    # Password hashing
    bcrypt_rounds: int = 12

    # Refresh-token registry
    refresh_registry_sweep_seconds: int = 300

    # Deadline for credential store and notification calls
    external_call_timeout_seconds: float = 10.0

    # Supabase (credential store)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    users_table: str = "users"

    # SMTP (notification channel)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    smtp_secure: bool = True
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = "no-reply@localhost"
    from_name: str = "Resume Builder"

    # Frontend URLs (for links in emails)
    frontend_url: str = "http://localhost:5173"

    def validate_secrets(self) -> None:
        """
        Ensure both token families have their own signing secret.

        Raises:
            RuntimeError: If a secret is missing or both secrets are equal
        """
        if not self.jwt_access_secret or not self.jwt_refresh_secret:
            raise RuntimeError(
                "JWT configuration missing. "
                "Set JWT_ACCESS_SECRET and JWT_REFRESH_SECRET environment variables."
            )
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise RuntimeError(
                "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be different."
            )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
