"""Analytics settings with Pydantic validation.

Settings are stored as JSON and validated using Pydantic models. The
defaults reproduce the dashboard's built-in behaviour, so an unconfigured
pipeline needs no settings file at all.
"""

from pydantic import BaseModel, Field, field_validator


class BreakdownSettings(BaseModel):
    """Category breakdown configuration."""

    top_n: int = Field(default=5, ge=1, le=20)
    others_label: str = Field(default="Others", min_length=1)
    uncategorized_label: str = Field(default="Uncategorized", min_length=1)

    model_config = {"validate_assignment": True}


class ChartSettings(BaseModel):
    """Chart availability thresholds and presentation defaults.

    Area and time-series charts need more than ``trend_min_records``
    filtered records; the heat map needs more than ``heatmap_min_records``.
    """

    trend_min_records: int = Field(default=5, ge=0)
    heatmap_min_records: int = Field(default=10, ge=0)
    palette: list[str] = Field(
        default_factory=lambda: [
            "#FF6384",
            "#36A2EB",
            "#FFCE56",
            "#4BC0C0",
            "#9966FF",
            "#FF9F40",
        ],
        min_length=1,
    )
    label_max_length: int = Field(default=12, ge=4)

    model_config = {"validate_assignment": True}

    @field_validator("palette")
    @classmethod
    def _check_palette(cls, value: list[str]) -> list[str]:
        for color in value:
            if not color.startswith("#") or len(color) != 7:
                raise ValueError("Color must be in hex format (#RRGGBB)")
        return value


class DisplaySettings(BaseModel):
    """Currency display settings."""

    currency: str = "KES"
    decimal_places: int = Field(default=2, ge=0, le=6)

    model_config = {"validate_assignment": True}


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


class AnalyticsSettings(BaseModel):
    """Top-level analytics settings.

    Example:
        >>> settings = AnalyticsSettings()
        >>> settings.breakdown.top_n = 3
        >>> settings.charts.heatmap_min_records = 20
    """

    breakdown: BreakdownSettings = Field(default_factory=BreakdownSettings)
    charts: ChartSettings = Field(default_factory=ChartSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Length of the window a custom period falls back to
    custom_period_default_months: int = Field(default=1, ge=1, le=24)

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
    }
