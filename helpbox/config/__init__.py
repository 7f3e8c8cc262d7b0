"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="helpbox", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/helpbox",
        description="Relational database connection URL (async driver)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Sessions ==========
    session_cookie_name: str = Field(
        default="helpbox_session",
        description="Name of the session cookie"
    )
    session_max_age_seconds: int = Field(
        default=60 * 60 * 24,
        description="Session lifetime in seconds",
        ge=60
    )
    session_cookie_secure: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS"
    )
    bcrypt_rounds: int = Field(
        default=10,
        description="bcrypt cost factor for password hashes",
        ge=4,
        le=31
    )

    # ========== LLM Provider ==========
    llm_provider: str = Field(
        default="zai",
        description="Upstream text generation provider (zai, openai)"
    )
    zai_api_key: Optional[str] = Field(
        default=None,
        description="Z.AI API key"
    )
    openai_api_key: Optional[str] = Field(
        default=None,
        description="API key for an OpenAI-compatible endpoint"
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of an OpenAI-compatible endpoint (None for api.openai.com)"
    )
    mock_llm: bool = Field(
        default=False,
        description="Use mock LLM responses for testing (no API calls)"
    )
    llm_model: str = Field(
        default="glm-4.7",
        description="Model used for ticket triage"
    )
    llm_temperature: float = Field(
        default=0.1,
        description="Sampling temperature for triage (low for deterministic output)",
        ge=0.0,
        le=1.0
    )
    llm_max_tokens: int = Field(
        default=1000,
        description="Max tokens for triage generation",
        ge=1,
        le=8000
    )

    # ========== Triage ==========
    triage_max_attempts: int = Field(
        default=3,
        description="Upstream call attempts per triage (retries only on 503)",
        ge=1,
        le=10
    )
    triage_initial_backoff_ms: int = Field(
        default=1000,
        description="Delay before the first retry, doubled after each retry",
        ge=0
    )
    ai_solution_max_length: int = Field(
        default=3500,
        description="AI solution text is cut beyond this length before storage",
        ge=100
    )

    # ========== Listing ==========
    default_page_size: int = Field(default=5, description="Tickets per page", ge=1, le=100)

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "testing", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("llm_provider")
    @classmethod
    def validate_llm_provider(cls, v: str) -> str:
        """Ensure the provider is one we have a client for."""
        v = v.lower()
        allowed = {"zai", "openai"}
        if v not in allowed:
            raise ValueError(f"llm_provider must be one of {allowed}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class Priority(str, Enum):
    """Triage priority codes."""
    HIGH = "A"      # Alta
    MEDIUM = "M"    # Média
    LOW = "B"       # Baixa


class TicketCategory(str, Enum):
    """Ticket categories."""
    SOFTWARE = "Software"
    HARDWARE = "Hardware"


class Frequency(str, Enum):
    """How often the problem happens."""
    OCCASIONAL = "Occasional"
    CONTINUOUS = "Continuous"


class Impact(str, Enum):
    """How much the problem hurts the requester's work."""
    MINIMAL = "Minimal"
    DELAY = "Delay"
    BLOCKED = "Blocked"


class Scope(str, Enum):
    """Who is affected by the problem."""
    ME = "Me"
    GROUP = "Group"
    ALL = "All"


class TicketStatus(str, Enum):
    """Ticket lifecycle statuses."""
    OPEN = "Aberto"
    IN_PROGRESS = "Em andamento"
    CLOSED = "Fechado"


class AccessLevel(int, Enum):
    """User access tiers."""
    CLIENT = 1
    TECHNICIAN = 2
    ADMIN = 3


# ========== Lists for validation ==========

VALID_PRIORITIES = [p.value for p in Priority]
