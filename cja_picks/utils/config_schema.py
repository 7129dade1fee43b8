"""Pydantic schemas for configuration validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cja_picks.utils.constants import (
    ANONYMOUS_LABEL,
    DEFAULT_PAGE_SIZE,
    DIVISIONS,
    NO_PREDICTION_LABEL,
    SPLITS,
)


class ScoringConfig(BaseModel):
    """Which divisions and splits make up the slot universe."""

    divisions: list[int] = Field(default_factory=lambda: list(DIVISIONS), min_length=1)
    splits: list[str] = Field(default_factory=lambda: list(SPLITS), min_length=1)

    @field_validator("divisions")
    @classmethod
    def validate_divisions(cls, v: list[int]) -> list[int]:
        unknown = [d for d in v if d not in DIVISIONS]
        if unknown:
            raise ValueError(f"Unknown divisions {unknown}, expected a subset of {list(DIVISIONS)}")
        if len(set(v)) != len(v):
            raise ValueError("divisions must not repeat")
        return v

    @field_validator("splits")
    @classmethod
    def validate_splits(cls, v: list[str]) -> list[str]:
        unknown = [s for s in v if s not in SPLITS]
        if unknown:
            raise ValueError(f"Unknown splits {unknown}, expected a subset of {list(SPLITS)}")
        if len(set(v)) != len(v):
            raise ValueError("splits must not repeat")
        return v


class DisplayConfig(BaseModel):
    """Placeholder labels for missing joined data."""

    anonymous_label: str = Field(default=ANONYMOUS_LABEL, min_length=1)
    no_prediction_label: str = Field(default=NO_PREDICTION_LABEL, min_length=1)


class TablesConfig(BaseModel):
    """Supabase table and view names."""

    seasons: str = Field(default="seasons", min_length=1)
    schedules: str = Field(default="schedule", min_length=1)
    predictions: str = Field(default="predictions", min_length=1)
    results: str = Field(default="race_results_public", min_length=1)
    drivers: str = Field(default="drivers_public", min_length=1)
    profiles: str = Field(default="user_profiles_public", min_length=1)


class FetchConfig(BaseModel):
    """Table store read parameters."""

    page_size: int = Field(ge=1, le=DEFAULT_PAGE_SIZE, default=DEFAULT_PAGE_SIZE)


class AppConfig(BaseModel):
    """Top-level application configuration."""

    model_config = ConfigDict(extra="allow")  # Allow extra fields for extensibility

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    tables: TablesConfig = Field(default_factory=TablesConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)


def validate_config(config_dict: dict) -> AppConfig:
    """
    Validate configuration dictionary against schema.

    Args:
        config_dict: Raw configuration dictionary from YAML

    Returns:
        Validated configuration object

    Raises:
        ValidationError: If configuration is invalid
    """
    return AppConfig(**config_dict)
