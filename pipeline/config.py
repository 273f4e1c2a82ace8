"""Configuration loading from the process environment and a .env file."""

from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


DEFAULT_SCAN_PATHS = "./less,./styles"
DEFAULT_OUTPUT_DIR = "./output"
CONFIG_FILE_NAME = "tailwind.config.js"
CSS_FILE_NAME = "tailwind-tokens.css"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Environment variable behind each field, used in error messages.
ENV_NAMES = {
    "scan_paths": "LESS_SCAN_PATHS",
    "output_dir": "OUTPUT_DIR",
    "config_path": "TAILWIND_CONFIG_PATH",
    "database_path": "LESS_DATABASE_PATH",
    "log_level": "LOG_LEVEL",
    "read_workers": "LESS_READ_WORKERS",
}


def _env(field_name: str) -> AliasChoices:
    return AliasChoices(field_name, ENV_NAMES[field_name])


def parse_scan_paths(value: str) -> List[Path]:
    """Split a comma-separated path list, ignoring blank entries."""
    return [Path(part.strip()) for part in value.split(",") if part.strip()]


class Settings(BaseSettings):
    """Run settings; environment first, CLI flags override single fields."""

    scan_paths: List[Path] = Field(
        default_factory=lambda: parse_scan_paths(DEFAULT_SCAN_PATHS),
        validation_alias=_env("scan_paths"),
    )
    output_dir: Path = Field(Path(DEFAULT_OUTPUT_DIR), validation_alias=_env("output_dir"))
    config_path: Optional[Path] = Field(None, validation_alias=_env("config_path"))
    database_path: Optional[Path] = Field(None, validation_alias=_env("database_path"))
    log_level: str = Field("INFO", validation_alias=_env("log_level"))
    read_workers: int = Field(1, ge=1, validation_alias=_env("read_workers"))
    exclude_dirs: List[str] = Field(default_factory=list)
    max_depth: Optional[int] = Field(None, ge=0)

    model_config = SettingsConfigDict(env_file=".env", enable_decoding=False, extra="ignore")

    @field_validator("scan_paths", "exclude_dirs", mode="before")
    @classmethod
    def split_list(cls, value: object) -> object:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("config_path", "database_path", mode="before")
    @classmethod
    def blank_path_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value).strip().upper()
        if level == "WARN":
            level = "WARNING"
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {sorted(LOG_LEVELS)}, got '{level}'")
        return level

    @property
    def tailwind_config_path(self) -> Path:
        """Where the token configuration is written."""
        return self.config_path or self.output_dir / CONFIG_FILE_NAME

    @property
    def css_path(self) -> Path:
        return self.output_dir / CSS_FILE_NAME

    def override(self, **changes) -> "Settings":
        """Return a copy with every non-None change applied."""
        return self.model_copy(update={k: v for k, v in changes.items() if v is not None})


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = Path(".env"),
) -> Settings:
    """
    Load settings from environment variables.

    Recognized variables: LESS_SCAN_PATHS (comma-separated), OUTPUT_DIR,
    TAILWIND_CONFIG_PATH, LESS_DATABASE_PATH, LOG_LEVEL, LESS_READ_WORKERS.
    With no explicit mapping the process environment is read, falling back
    to values from env_file; process variables take precedence.

    Args:
        environ: Variables to use instead of the process environment. The
                 .env file is not consulted when this is given.
        env_file: Dotenv file read alongside the process environment.

    Raises:
        ConfigError: if a value cannot be interpreted.
    """
    try:
        if environ is not None:
            return Settings.model_validate(dict(environ))
        return Settings(_env_file=env_file)
    except ValidationError as e:
        raise ConfigError(_describe(e)) from None


def _describe(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        loc = str(detail["loc"][0]) if detail["loc"] else ""
        name = ENV_NAMES.get(loc, loc.upper() if loc.upper() in ENV_NAMES.values() else loc)
        messages.append(f"{name}: {detail['msg']}")
    return "; ".join(messages)
