"""Configuration management for myst2ipynb."""

from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from myst2ipynb import ConfigurationError


class Myst2IpynbConfig(BaseSettings):
    """Application configuration loaded from environment variables.

    Environment variables should be prefixed with MYST2IPYNB_
    Example: MYST2IPYNB_MARKDOWN=commonmark

    Attributes:
        markdown: Default markdown flavour for prose cells
        images: Default image handling mode
        drop_solutions: Drop solution blocks when converting to CommonMark
        source_root: Project source root used to resolve root-relative image URLs
        log_level: Logging level name
    """

    # Export Configuration
    markdown: Literal["myst", "commonmark"] = Field(
        default="myst",
        description="Markdown flavour written into markdown cells",
    )
    images: Literal["reference", "attachment"] = Field(
        default="reference",
        description="Keep image references or embed images as attachments",
    )
    drop_solutions: bool = Field(
        default=False,
        description="Drop solution blocks in CommonMark output",
    )

    # Project Configuration
    source_root: Path = Field(
        default=Path("."),
        description="Project source root for resolving /-prefixed image URLs",
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MYST2IPYNB_",
        case_sensitive=False,
        extra="ignore",
    )


# Global config instance (lazy-loaded)
_config: Myst2IpynbConfig | None = None


def get_config() -> Myst2IpynbConfig:
    """Get or create the global configuration instance.

    Returns:
        Myst2IpynbConfig: The configuration object

    Raises:
        ConfigurationError: If an environment setting is invalid
    """
    global _config
    if _config is None:
        try:
            _config = Myst2IpynbConfig()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
