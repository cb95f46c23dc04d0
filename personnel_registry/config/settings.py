"""Application settings and configuration management."""

import json
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.employee import DEFAULT_TAX_RATES

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = "config.json"

# Keys accepted in config.json besides the field names themselves.
LEGACY_KEYS: Dict[str, str] = {
    "UseInMemory": "use_in_memory_store",
    "useInMemoryStore": "use_in_memory_store",
    "TaxRates": "tax_rates",
    "taxRates": "tax_rates",
    "SearchLimit": "search_result_limit",
    "searchResultLimit": "search_result_limit",
    "SnapshotPath": "default_snapshot_path",
    "defaultSnapshotPath": "default_snapshot_path",
}


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Storage
    use_in_memory_store: bool = Field(default=True)
    default_snapshot_path: str = Field(default="snapshot.jsonl")

    # Tax
    tax_rates: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_TAX_RATES))

    # Search
    search_result_limit: int = Field(default=200, ge=1)
    suggestion_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    max_suggestions: int = Field(default=5, ge=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    model_config = SettingsConfigDict(
        env_prefix="PERSONNEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("tax_rates")
    @classmethod
    def validate_tax_rates(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Upper-case rate keys and keep rates within [0, 1]."""
        normalized = {}
        for key, rate in v.items():
            if not 0.0 <= rate <= 1.0:
                raise ValueError(f"Tax rate for {key!r} must be between 0 and 1")
            normalized[key.upper()] = rate
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()


class ConfigLoadResult(BaseModel):
    """Settings together with how they were obtained."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    settings: Settings
    status: Literal["loaded", "missing", "invalid"]
    path: str
    error: Optional[str] = None


def _normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {LEGACY_KEYS.get(key, key): value for key, value in raw.items()}


def _default_settings() -> Tuple[Settings, Optional[str]]:
    """Settings from the environment alone, or the built-in defaults if those are invalid."""
    try:
        return Settings(), None
    except ValidationError as e:
        logger.warning("environment_settings_invalid", error=str(e))
        return Settings.model_construct(), str(e)


def load_settings(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> ConfigLoadResult:
    """
    Load settings from a JSON config file.

    Values from the file take priority over environment variables. A missing,
    unreadable or invalid file never blocks startup: the defaults (plus the
    environment) are used and the outcome is reported in ``status``. Invalid
    environment values are dropped in favour of the built-in defaults.

    Args:
        path: Location of the JSON config file

    Returns:
        ConfigLoadResult with the effective settings
    """
    config_path = Path(path)
    if not config_path.exists():
        settings, env_error = _default_settings()
        return ConfigLoadResult(
            settings=settings,
            status="invalid" if env_error else "missing",
            path=str(config_path),
            error=env_error,
        )

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("Config root must be a JSON object")
        settings = Settings(**_normalize_keys(raw))
    except (OSError, ValueError) as e:
        logger.warning("config_invalid", path=str(config_path), error=str(e))
        fallback, _ = _default_settings()
        return ConfigLoadResult(
            settings=fallback, status="invalid", path=str(config_path), error=str(e)
        )

    return ConfigLoadResult(settings=settings, status="loaded", path=str(config_path))
