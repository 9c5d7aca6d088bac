"""
Settings Module
===============

Environment-driven configuration for the classification service.

Each concern has its own `BaseSettings` class and environment prefix:

- LLM_*, OLLAMA_*, CLAUDE_*  backend used for report enhancement
- ENHANCEMENT_*              whether and how long to wait for it
- AGGREGATION_*              organization summary weights
- CORS_*                     browser access

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LLMProvider(str, Enum):
    """Backends available for report enhancement."""

    CLAUDE = "claude"
    OLLAMA = "ollama"


class ClaudeSettings(BaseSettings):
    """Anthropic Claude backend."""

    model_config = SettingsConfigDict(env_prefix="CLAUDE_")

    api_key: SecretStr = Field(default=SecretStr(""), alias="ANTHROPIC_API_KEY")
    model: str = "claude-sonnet-4-20250514"


class OllamaSettings(BaseSettings):
    """Local Ollama backend."""

    model_config = SettingsConfigDict(env_prefix="OLLAMA_")

    host: str = "http://localhost:11434"
    model: str = "llama2:7b"
    context_window: int = 4096


class LLMSettings(BaseSettings):
    """Backend selection and sampling parameters."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    provider: LLMProvider = LLMProvider.OLLAMA
    temperature: float = Field(default=0.1, ge=0.0, le=1.0)
    max_tokens: int = Field(default=1024, ge=1)

    claude: ClaudeSettings = Field(default_factory=ClaudeSettings)
    ollama: OllamaSettings = Field(default_factory=OllamaSettings)


class EnhancementSettings(BaseSettings):
    """Optional LLM recommendations appended to classification reports."""

    model_config = SettingsConfigDict(env_prefix="ENHANCEMENT_")

    enabled: bool = False
    timeout_seconds: float = Field(default=30.0, gt=0)


class AggregationSettings(BaseSettings):
    """Organization summary over many reports."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATION_")

    # GDPR domains (activity, impact-assessment) vs. the AI Act domain
    gdpr_weight: float = Field(default=0.6, gt=0)
    ai_weight: float = Field(default=0.4, gt=0)

    # Upper bound of one report's contribution to an action's priority
    priority_cap: int = Field(default=10, ge=1)


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Comma-separated origins as a list, blanks dropped."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class Settings(BaseSettings):
    """
    Application settings.

    Loaded from the environment and an optional `.env` file. Use the
    `settings` singleton from `shared.config` or `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO

    service_name: str = "classification"
    service_version: str = "0.1.0"
    service_port: int = Field(default=8010, alias="SERVICE_PORT")

    llm: LLMSettings = Field(default_factory=LLMSettings)
    enhancement: EnhancementSettings = Field(default_factory=EnhancementSettings)
    aggregation: AggregationSettings = Field(default_factory=AggregationSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @model_validator(mode="after")
    def enhancement_backend_configured(self) -> "Settings":
        """Claude enhancement cannot start without an API key."""
        if (
            self.enhancement.enabled
            and self.llm.provider == LLMProvider.CLAUDE
            and not self.llm.claude.api_key.get_secret_value()
        ):
            raise ValueError("ENHANCEMENT_ENABLED with LLM_PROVIDER=claude requires ANTHROPIC_API_KEY")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
