from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./signing.db"

    # Storage
    staging_dir: str = "uploads/staging"
    signed_dir: str = "uploads/signed"
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MB

    # Signing
    signing_timeout_seconds: float = 30.0
    min_signature_chars: int = 100
    min_signature_bytes: int = 67  # smallest well-formed PNG

    # Retention jobs
    cleanup_enabled: bool = True
    cleanup_interval_hours: int = 24
    signed_retention_days: int = 30
    staging_max_age_minutes: int = 60

    # CORS
    # Raw comma-separated string; pydantic-settings would json.loads a list field.
    cors_origins: Optional[str] = "*"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    def get_cors_origins(self) -> List[str]:
        """Return the configured CORS origins, defaulting to every origin."""
        raw = (self.cors_origins or "").strip()
        if not raw:
            return ["*"]
        return [item.strip() for item in raw.split(",") if item.strip()]


settings = Settings()
