"""Configuration management for Baseline Sidekick."""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


# Methods that exist on more than one built-in. Syntax alone cannot tell
# which one a call refers to, so these owners are a policy default.
DEFAULT_AMBIGUOUS_METHODS = {
    "includes": "String",
    "at": "Array",
}


class Config(BaseModel):
    """Analysis configuration."""

    # Scheduling
    debounce_delay_ms: int = Field(default=300, gt=0)
    parse_timeout_ms: int = Field(default=5000, gt=0)
    enable_async_processing: bool = Field(default=True)

    # Size limits
    max_file_size: int = Field(default=5 * 1024 * 1024, gt=0)  # 5MB
    large_file_threshold: int = Field(default=100 * 1024, gt=0)  # 100KB
    memory_warning_threshold: int = Field(default=50 * 1024 * 1024, gt=0)  # 50MB

    # Cache
    max_cache_entries: int = Field(default=10_000, gt=0)
    cache_max_age_seconds: float = Field(default=30 * 60, gt=0)

    # Dataset and reporting
    dataset_path: Optional[Path] = Field(default=None)
    report_unknown_features: bool = Field(default=False)
    ambiguous_method_defaults: dict[str, str] = Field(
        default_factory=lambda: DEFAULT_AMBIGUOUS_METHODS.copy()
    )

    log_level: str = Field(default="WARNING")

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        def _parse_int(value: Optional[str], fallback: int) -> int:
            try:
                parsed = int(value) if value is not None else fallback
            except ValueError:
                return fallback
            return parsed if parsed > 0 else fallback

        def _parse_bool(value: Optional[str], fallback: bool) -> bool:
            if value is None:
                return fallback
            lowered = value.strip().lower()
            if lowered in ("1", "true", "yes", "on"):
                return True
            if lowered in ("0", "false", "no", "off"):
                return False
            return fallback

        ambiguous = DEFAULT_AMBIGUOUS_METHODS.copy()
        extra_ambiguous = os.getenv("BASELINE_AMBIGUOUS_METHODS")
        if extra_ambiguous:
            for entry in extra_ambiguous.split(","):
                name, sep, owner = entry.partition(":")
                if sep and name.strip() and owner.strip():
                    ambiguous[name.strip()] = owner.strip()

        dataset_env = os.getenv("BASELINE_DATASET")

        return cls(
            debounce_delay_ms=_parse_int(os.getenv("BASELINE_DEBOUNCE_DELAY_MS"), 300),
            parse_timeout_ms=_parse_int(os.getenv("BASELINE_PARSE_TIMEOUT_MS"), 5000),
            enable_async_processing=_parse_bool(os.getenv("BASELINE_ENABLE_ASYNC_PROCESSING"), True),
            max_file_size=_parse_int(os.getenv("BASELINE_MAX_FILE_SIZE"), 5 * 1024 * 1024),
            large_file_threshold=_parse_int(os.getenv("BASELINE_LARGE_FILE_THRESHOLD"), 100 * 1024),
            memory_warning_threshold=_parse_int(
                os.getenv("BASELINE_MEMORY_WARNING_THRESHOLD"), 50 * 1024 * 1024
            ),
            max_cache_entries=_parse_int(os.getenv("BASELINE_MAX_CACHE_ENTRIES"), 10_000),
            cache_max_age_seconds=_parse_int(os.getenv("BASELINE_CACHE_MAX_AGE"), 30 * 60),
            dataset_path=Path(dataset_env) if dataset_env else None,
            report_unknown_features=_parse_bool(os.getenv("BASELINE_REPORT_UNKNOWN"), False),
            ambiguous_method_defaults=ambiguous,
            log_level=os.getenv("BASELINE_LOG_LEVEL", "WARNING"),
        )
