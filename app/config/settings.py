"""Application configuration and settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Service Configuration
    service_name: str = "symptom-triage"
    triage_port: int = 8010
    environment: str = "development"

    # Assessment behaviour
    advance_delay_ms: int = 300  # Pause before auto-advancing to the next question
    default_catalog_id: str = "dog"
    catalog_file: Optional[str] = None  # Extra JSON catalog registered at startup
    max_sessions: int = 1000  # Oldest session is evicted beyond this

    # Collaborator handoff
    chat_handoff_include_assessment: bool = False
    chat_route: str = "/chat"
    vet_finder_route: str = "/emergency-vet"

    # CORS
    cors_origins: List[str] = ["http://localhost:5173"]

    # Logging
    log_level: str = "INFO"

    @property
    def advance_delay_seconds(self) -> float:
        """Deferred-advance delay in seconds."""
        return max(self.advance_delay_ms, 0) / 1000.0


# Global settings instance
settings = Settings()
