"""
Centralized Configuration Management for Systematics

Provides pydantic-based configuration with:
- Environment variable loading (.env support)
- Type validation
- Default values

Usage:
    from systematics.config import get_config

    config = get_config()
    print(config.default_language)
    print(config.log_level)
"""

from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from systematics.language import Language

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class SystematicsConfig(BaseSettings):
    """
    Central configuration for Systematics

    All settings can be overridden via environment variables with SYSTEMATICS_ prefix.
    For example: SYSTEMATICS_LOG_LEVEL, SYSTEMATICS_DEFAULT_LANGUAGE, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SYSTEMATICS_",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================
    # Application Configuration
    # ============================================

    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    log_format: str = Field(
        default=LOG_FORMAT,
        description="Format string handed to logging.basicConfig by the CLI"
    )

    # ============================================
    # Data Configuration
    # ============================================

    default_language: Optional[Language] = Field(
        default=Language.CANONICAL,
        description="Vocabulary used when a caller names none ('none' builds structure only)"
    )

    registry_path: Optional[Path] = Field(
        default=None,
        description="Order registry YAML (defaults to the packaged registry)"
    )

    vocabulary_dir: Optional[Path] = Field(
        default=None,
        description="Directory of <language>.yaml vocabularies (defaults to packaged data)"
    )

    # ============================================
    # Service Configuration
    # ============================================

    eager_build: bool = Field(
        default=False,
        description="Build all twelve orders when the service starts"
    )

    # ============================================
    # Validators
    # ============================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(
                f"log_level must be one of: {', '.join(valid_levels)}"
            )
        return v.upper()

    @field_validator("default_language", mode="before")
    @classmethod
    def validate_default_language(cls, v):
        """Accept 'none'/'' for structure-only builds; reject representations"""
        if v is None or (isinstance(v, str) and v.strip().lower() in ("", "none")):
            return None
        language = Language(v.strip().lower() if isinstance(v, str) else v)
        if not language.is_vocabulary:
            raise ValueError(
                f"default_language must be a vocabulary, got '{language.value}'"
            )
        return language


# Global config instance
_config: Optional[SystematicsConfig] = None


def get_config(force_reload: bool = False) -> SystematicsConfig:
    """
    Get the global configuration instance

    Args:
        force_reload: Force reload configuration from environment

    Returns:
        SystematicsConfig instance

    Example:
        >>> config = get_config()
        >>> print(config.default_language)
    """
    global _config

    if _config is None or force_reload:
        _config = SystematicsConfig()

    return _config


def validate_config() -> Tuple[bool, List[str]]:
    """
    Validate current configuration

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    try:
        config = get_config()
    except ValueError as e:
        return False, [f"Configuration validation failed: {e}"]

    if config.registry_path is not None and not config.registry_path.is_file():
        errors.append(f"Registry file does not exist: {config.registry_path}")

    if config.vocabulary_dir is not None and not config.vocabulary_dir.is_dir():
        errors.append(f"Vocabulary directory does not exist: {config.vocabulary_dir}")

    return len(errors) == 0, errors
