"""
Pydantic-based configuration management for html2md.

Settings are validated on construction and on assignment, and every field can
be overridden through an environment variable with the HTML2MD_ prefix
(e.g., HTML2MD_UNORDERED_LIST_BULLET=*).
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    """Available log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ListBullet(str, Enum):
    """Markers usable for unordered list items."""

    DASH = "-"
    STAR = "*"
    PLUS = "+"


class ListDelimiter(str, Enum):
    """Delimiters usable after ordered list item numbers."""

    DOT = "."
    PAREN = ")"


class Html2MdSettings(BaseSettings):
    """
    Conversion and logging settings with validation and environment support.
    """

    # === Rendering Settings ===
    include_title: bool = Field(
        default=True,
        description="Render the document <title> as a level-1 heading",
    )

    unordered_list_bullet: ListBullet = Field(
        default=ListBullet.DASH, description="Marker for unordered list items"
    )

    ordered_list_delimiter: ListDelimiter = Field(
        default=ListDelimiter.DOT,
        description="Delimiter written after ordered list item numbers",
    )

    max_blank_lines: int = Field(
        default=2,
        description="Longest run of blank lines kept by the cleanup pass",
        ge=1,
        le=10,
    )

    # === Logging Settings ===
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    log_file: Optional[Path] = Field(
        default=None, description="Log file path (None for console only)"
    )

    structured_logging: bool = Field(
        default=False, description="Enable structured JSON logging"
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    @field_validator("log_file")
    @classmethod
    def ensure_log_dir_exists(cls, v: Optional[Path]) -> Optional[Path]:
        """Ensure log file directory exists."""
        if v is not None:
            try:
                v.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning(f"Cannot create log directory {v.parent}: {e}")
                return None
        return v

    model_config = {
        "env_prefix": "HTML2MD_",
        "case_sensitive": False,
        "populate_by_name": True,
        "use_enum_values": True,
        "validate_assignment": True,
        "extra": "forbid",
    }

    @property
    def bullet(self) -> str:
        return _enum_value(self.unordered_list_bullet)

    @property
    def delimiter(self) -> str:
        return _enum_value(self.ordered_list_delimiter)

    @property
    def level_name(self) -> str:
        return _enum_value(self.log_level)

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Save configuration to a JSON file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump()
        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = str(value)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(config_dict, f, indent=2, default=str)

        logger.info(f"Configuration saved to {file_path}")

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "Html2MdSettings":
        """
        Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the file is not valid JSON or holds
                invalid settings.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
            settings = cls(**config_dict)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Configuration file {file_path} is not valid JSON",
                error_code="CONFIG_UNREADABLE",
                cause=e,
            ) from e
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration file {file_path} holds invalid settings",
                error_code="CONFIG_INVALID",
                context={"errors": e.error_count()},
                cause=e,
            ) from e

        logger.info(f"Configuration loaded from {file_path}")
        return settings


def _enum_value(value: Union[str, Enum]) -> str:
    return value.value if isinstance(value, Enum) else value


# Global settings instance
_settings: Optional[Html2MdSettings] = None


def get_settings() -> Html2MdSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Html2MdSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance."""
    global _settings
    _settings = None
