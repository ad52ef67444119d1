"""Configuration management using Pydantic BaseSettings.

This module provides centralized configuration management with validation,
type safety, and sensible defaults for the scenario duplicate detector.
"""
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


VALID_BACKENDS = ["supabase", "memory"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Config(BaseSettings):
    """Main configuration class combining all settings."""

    # Supabase (PostgREST) Configuration
    supabase_url: str = Field("", description="Supabase project URL")
    supabase_key: str = Field("", description="Supabase API key (service role or anon)")
    supabase_timeout: float = Field(10.0, gt=0.0, le=120.0, description="HTTP timeout in seconds")
    scenarios_table: str = Field("scenarios", description="Table holding scenarios")

    # Repository selection
    scenario_backend: str = Field("supabase", description="Repository backend: supabase, memory")
    scenario_fixture_file: str = Field("", description="JSON file seeding the memory backend")

    # Duplicate detection thresholds (0-100 percentages)
    dedup_inclusion_threshold: int = Field(50, ge=0, le=100, description="Show as similar when score is above this")
    dedup_duplicate_threshold: int = Field(70, ge=0, le=100, description="Flag as duplicate when score reaches this")
    dedup_suggestion_threshold: int = Field(40, ge=0, le=100, description="Suggest while typing when score is above this")

    # Duplicate detection limits
    dedup_max_results: int = Field(5, ge=1, le=50, description="Max similar scenarios / suggestions returned")
    dedup_suggestion_min_length: int = Field(5, ge=0, le=100, description="Min partial title length for suggestions")
    dedup_suggestion_sample_size: int = Field(50, ge=1, le=1000, description="Scenarios sampled for suggestions")
    dedup_title_weight: float = Field(0.7, ge=0.0, le=1.0, description="Title weight in the combined score")
    dedup_description_weight: float = Field(0.3, ge=0.0, le=1.0, description="Description weight in the combined score")
    dedup_fetch_timeout: float = Field(10.0, gt=0.0, le=120.0, description="Timeout for each repository fetch")
    dedup_confirm_exact_match: bool = Field(False, description="Confirm hash hits with a literal comparison")

    # Display fallbacks
    default_scenario_price: int = Field(11, ge=0, description="Price shown when a scenario has none")
    default_holder_label: str = Field("creador", description="Holder shown when a scenario has none")

    # Logging Configuration
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @field_validator('scenario_backend')
    @classmethod
    def validate_backend(cls, v):
        if v.lower() not in VALID_BACKENDS:
            raise ValueError(f'Invalid backend: {v}. Valid options: {VALID_BACKENDS}')
        return v.lower()

    @field_validator('log_level')
    @classmethod
    def validate_level(cls, v):
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f'Invalid log level: {v}. Valid options: {VALID_LOG_LEVELS}')
        return v.upper()

    @field_validator('supabase_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        issues = []

        if self.scenario_backend == "supabase":
            if not self.supabase_url:
                issues.append("SUPABASE_URL is required for the supabase backend")
            elif not self.supabase_url.startswith(("http://", "https://")):
                issues.append("SUPABASE_URL must be an http(s) URL")
            if not self.supabase_key:
                issues.append("SUPABASE_KEY is required for the supabase backend")

        if self.dedup_duplicate_threshold <= self.dedup_inclusion_threshold:
            issues.append(
                "DEDUP_DUPLICATE_THRESHOLD should be above DEDUP_INCLUSION_THRESHOLD, "
                "otherwise every listed scenario counts as a duplicate"
            )

        if self.dedup_suggestion_threshold < 20:
            issues.append("DEDUP_SUGGESTION_THRESHOLD is very low, suggestions will be noisy")

        if self.dedup_title_weight < 0.5:
            issues.append("DEDUP_TITLE_WEIGHT below 0.5 lets descriptions dominate the score")

        if abs(self.dedup_title_weight + self.dedup_description_weight - 1.0) > 1e-9:
            issues.append("DEDUP_TITLE_WEIGHT and DEDUP_DESCRIPTION_WEIGHT should sum to 1")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from apocaliptyx.utils.logger import log_info

        log_info("Configuration loaded",
                backend=self.scenario_backend,
                supabase_url=self.supabase_url,
                scenarios_table=self.scenarios_table,
                inclusion_threshold=self.dedup_inclusion_threshold,
                duplicate_threshold=self.dedup_duplicate_threshold,
                suggestion_threshold=self.dedup_suggestion_threshold,
                title_weight=self.dedup_title_weight,
                description_weight=self.dedup_description_weight,
                confirm_exact_match=self.dedup_confirm_exact_match,
                log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
