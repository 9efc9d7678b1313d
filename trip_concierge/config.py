"""
Configuration management for the Trip Concierge system.

This module handles loading and managing configuration for the conversation
engine, including environment variables, API keys, model settings and the
search defaults used by the search gateway.
"""

import os
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class LogLevel(str, Enum):
    """Log levels supported by the system."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ModelConfig(BaseModel):
    """Configuration for the reasoning model."""

    name: str = Field(default="gemini-2.5-flash", description="Model name to use")
    temperature: float = Field(default=0.8, description="Model temperature")
    max_tokens: int | None = Field(default=None, description="Max tokens to generate")

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, value: float) -> float:
        """Validate temperature is within reasonable bounds."""
        if not (0.0 <= value <= 1.0):
            raise ValueError(f"Temperature must be between 0.0 and 1.0, got {value}")
        return value

    @classmethod
    def from_env(cls) -> "ModelConfig":
        """Create a ModelConfig from environment variables."""
        return cls(
            name=os.getenv("REASONING_MODEL", "gemini-2.5-flash"),
            temperature=float(os.getenv("REASONING_TEMPERATURE", "0.8")),
            max_tokens=int(os.getenv("REASONING_MAX_TOKENS", "0")) or None,
        )


class SearchSettings(BaseModel):
    """Default settings for search gateway requests."""

    max_results: int = Field(default=10, description="Results per category query")
    search_depth: str = Field(default="advanced", description="'basic' or 'advanced'")
    include_answer: bool = Field(default=True, description="Ask for a summary answer")

    @field_validator("search_depth")
    @classmethod
    def validate_depth(cls, value: str) -> str:
        """Only the two depths the search service understands are allowed."""
        if value not in ("basic", "advanced"):
            raise ValueError(f"search_depth must be 'basic' or 'advanced', got {value}")
        return value

    @classmethod
    def from_env(cls) -> "SearchSettings":
        """Create SearchSettings from environment variables."""
        return cls(
            max_results=int(os.getenv("SEARCH_MAX_RESULTS", "10")),
            search_depth=os.getenv("SEARCH_DEPTH", "advanced"),
            include_answer=os.getenv("SEARCH_INCLUDE_ANSWER", "true").lower()
            == "true",
        )


class APIConfig(BaseModel):
    """Configuration for external APIs."""

    gemini_api_key: str = Field(default="", description="Gemini API key")
    tavily_api_key: str | None = Field(default=None, description="Tavily API key")

    class ValidationError(Exception):
        """Exception raised for API configuration validation errors."""

        def __init__(self, missing_keys: list[str]):
            self.missing_keys = missing_keys
            super().__init__(f"Missing required API keys: {', '.join(missing_keys)}")

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Create an APIConfig from environment variables."""
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            tavily_api_key=os.getenv("TAVILY_API_KEY"),
        )

    def validate(self, raise_error: bool = False) -> bool:
        """
        Validate that the API keys are present.

        Both keys are needed for the full experience, but the conversation
        still runs without them: every gateway call has a local fallback.

        Args:
            raise_error: If True, raise ValidationError instead of returning False

        Returns:
            True if all keys are present, False otherwise

        Raises:
            ValidationError: If raise_error is True and validation fails
        """
        missing_keys = []
        if not self.gemini_api_key:
            missing_keys.append("GEMINI_API_KEY")
        if not self.tavily_api_key:
            missing_keys.append("TAVILY_API_KEY")

        if missing_keys:
            logger.warning(
                f"API keys missing: {', '.join(missing_keys)}. "
                f"Fallback behaviour will be used for the affected gateways."
            )
            if raise_error:
                raise self.ValidationError(missing_keys)
            return False

        return True


class SystemConfig(BaseModel):
    """System-wide configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    environment: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )
    default_budget: float = Field(
        default=1000, description="Budget assumed when none can be parsed"
    )
    gateway_timeout_seconds: float = Field(
        default=30.0, description="Upper bound for a single gateway call"
    )
    reference_date: date | None = Field(
        default=None,
        description="Fixed 'today' for date parsing; defaults to the real date",
    )

    @classmethod
    def from_env(cls) -> "SystemConfig":
        """Create a SystemConfig from environment variables."""
        reference = os.getenv("REFERENCE_DATE")
        return cls(
            log_level=LogLevel(os.getenv("LOG_LEVEL", "INFO")),
            environment=os.getenv("ENVIRONMENT", "development"),
            default_budget=float(os.getenv("DEFAULT_BUDGET", "1000")),
            gateway_timeout_seconds=float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "30")),
            reference_date=date.fromisoformat(reference) if reference else None,
        )

    def today(self) -> date:
        """Return the date the conversation treats as 'today'."""
        return self.reference_date or date.today()


@dataclass
class TripConciergeConfig:
    """Main configuration class for the Trip Concierge system."""

    api: APIConfig = field(default_factory=APIConfig.from_env)
    system: SystemConfig = field(default_factory=SystemConfig.from_env)
    model: ModelConfig = field(default_factory=ModelConfig.from_env)
    search: SearchSettings = field(default_factory=SearchSettings.from_env)

    class ConfigurationError(Exception):
        """Exception raised for configuration validation errors."""

        pass

    def validate(self, raise_error: bool = False) -> bool:
        """
        Validate the entire configuration.

        Args:
            raise_error: If True, raise ConfigurationError instead of returning False

        Returns:
            True if configuration is valid, False otherwise

        Raises:
            ConfigurationError: If raise_error is True and validation fails
        """
        try:
            self.api.validate(raise_error=True)

            if self.system.gateway_timeout_seconds <= 0:
                raise ValueError("Gateway timeout must be positive")
            if self.system.default_budget <= 0:
                raise ValueError("Default budget must be positive")

            return True

        except Exception as e:
            if not isinstance(e, self.api.ValidationError):
                logger.error(f"Configuration validation failed: {e!s}")

            if raise_error:
                raise self.ConfigurationError(
                    f"Configuration validation failed: {e!s}"
                ) from e

            return False


# Global configuration instance
config = TripConciergeConfig()


def initialize_config(
    custom_config_path: str | None = None,
    validate: bool = True,
    raise_on_error: bool = False,
) -> TripConciergeConfig:
    """
    Initialize and validate the configuration.

    Args:
        custom_config_path: Path to a custom .env file to load
        validate: Whether to validate the configuration
        raise_on_error: Whether to raise an exception on validation failure

    Returns:
        Initialized configuration object

    Raises:
        TripConciergeConfig.ConfigurationError: If validation fails and
            raise_on_error is True
        FileNotFoundError: If custom_config_path is provided but does not exist
    """
    if custom_config_path:
        if not os.path.exists(custom_config_path):
            error_msg = f"Custom configuration file not found: {custom_config_path}"
            logger.error(error_msg)
            raise FileNotFoundError(error_msg)

        logger.info(f"Loading custom configuration from {custom_config_path}")
        load_dotenv(custom_config_path, override=True)

        # Reload into the existing global object so importers see the update
        config.api = APIConfig.from_env()
        config.system = SystemConfig.from_env()
        config.model = ModelConfig.from_env()
        config.search = SearchSettings.from_env()

    if validate:
        is_valid = config.validate(raise_error=raise_on_error)
        if not is_valid:
            logger.info(
                "Environment variables: GEMINI_API_KEY (reasoning), "
                "TAVILY_API_KEY (search). Set them in a .env file in the "
                "project root or in your shell."
            )

    return config
