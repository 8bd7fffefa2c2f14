"""Domain vocabulary and strict schemas for forecast outlooks and alerts.

This module defines the stable contract between the numeric pipeline
(windowing, aggregation, classification, pattern detection) and any
presentation layer: enums, locale constants, and Pydantic models for the
payloads that flow through the system. No interpretation logic lives here.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, List, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class _ValueModel(_StrictBaseModel):
    """Immutable value object produced by one pipeline invocation."""

    model_config = ConfigDict(extra="forbid", frozen=True)


# Normal daily highs (F) for Asheville, NC, January first.
ASHEVILLE_NORMAL_HIGHS_F: Tuple[int, ...] = (47, 51, 59, 68, 75, 82, 85, 84, 79, 69, 59, 50)

MEASURES: Tuple[str, ...] = (
    "time",
    "temperature",
    "dewpoint",
    "precipitation",
    "snowfall",
    "wind_gust",
    "wind_direction",
    "uv_index",
)


class RainType(str, Enum):
    """Rain total buckets, ordered by severity."""
    NONE = "none"
    TRACE = "trace"
    SPOTTY = "spotty"
    LIGHT = "light"
    STEADY = "steady"
    SOAKING = "soaking"
    HEAVY = "heavy"


class SnowType(str, Enum):
    """Snow total buckets, ordered by severity."""
    NONE = "none"
    FLURRIES = "flurries"
    DUSTING = "dusting"
    LIGHT = "light"
    ACCUMULATING = "accumulating"
    PLOWABLE = "plowable"
    SIGNIFICANT = "significant"


class PrecipType(str, Enum):
    """Precipitation phase for an hour or a whole window."""
    NONE = "none"
    RAIN = "rain"
    SNOW = "snow"
    MIX = "mix"
    UNKNOWN = "unknown"


class GoldilocksVariant(str, Enum):
    """Flavors of an ideal day, most ideal first."""
    FULL = "full"
    AFTERNOON = "afternoon"
    VALLEYS = "valleys"
    EARLY_MUGGY_LATE = "earlyMuggyLate"


class OutlookCategory(str, Enum):
    """Dominant condition surfaced as the outlook badge."""
    SNOW = "snow"
    NW_FLOW_SNOW = "nw_flow_snow"
    FREEZING_DRIZZLE = "freezing_drizzle"
    RAIN = "rain"
    STORM = "storm"
    SHOWERS = "showers"
    STRONG_WIND = "strong_wind"
    GUSTY = "gusty"
    HEAT = "heat"
    COLD_AIR_DAMMING = "cold_air_damming"
    COLD = "cold"
    GOLDILOCKS = "goldilocks"
    TYPICAL = "typical"
    NO_DATA = "no_data"


class AlertId(str, Enum):
    """Stable keys for near-term alerts."""
    SNOW = "snow"
    NW_FLOW_SNOW = "nw_flow_snow"
    FREEZING_DRIZZLE = "freezing_drizzle"
    HEAVY_RAIN = "heavy_rain"
    THUNDERSTORMS = "thunderstorms"
    STRONG_WIND = "strong_wind"
    GUSTY_WIND = "gusty_wind"
    HOT_HUMID = "hot_humid"
    BITTER_COLD = "bitter_cold"
    HIGH_UV = "high_uv"


class HourlySeries(BaseModel):
    """Parallel hourly arrays as supplied by a forecast provider.

    Every array is optional and may be shorter than ``time``. Values are kept
    raw; readers go through ``aggregation.safe_num`` so that None, NaN and
    non-numeric samples are treated as absent.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    time: List[Any] | None = None
    temperature: List[Any] | None = Field(
        default=None, validation_alias=AliasChoices("temperature", "temperature_2m")
    )
    dewpoint: List[Any] | None = Field(
        default=None, validation_alias=AliasChoices("dewpoint", "dewpoint_2m", "dew_point_2m")
    )
    precipitation: List[Any] | None = None
    snowfall: List[Any] | None = None
    wind_gust: List[Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("wind_gust", "windGust", "windgusts_10m", "wind_gusts_10m"),
    )
    wind_direction: List[Any] | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "wind_direction", "windDirection", "winddirection_10m", "wind_direction_10m"
        ),
    )
    uv_index: List[Any] | None = Field(
        default=None, validation_alias=AliasChoices("uv_index", "uvIndex")
    )

    @property
    def length(self) -> int:
        """Number of hours, defined by the ``time`` array."""
        return len(self.time or [])

    def values(self, name: str) -> List[Any]:
        """Return the named array, or an empty list when it is absent."""
        return getattr(self, name, None) or []


class Window(_ValueModel):
    """Half-open ``[start, end)`` index range, or an explicit index set."""
    start: int = 0
    end: int = 0
    explicit: Tuple[int, ...] | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "Window":
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid window bounds [{self.start}, {self.end})")
        return self

    @classmethod
    def of(cls, indices: List[int] | Tuple[int, ...]) -> "Window":
        """Build a window over an explicit, ordered index set."""
        idx = tuple(indices)
        if not idx:
            return cls()
        return cls(start=min(idx), end=max(idx) + 1, explicit=idx)

    def indices(self) -> List[int]:
        if self.explicit is not None:
            return list(self.explicit)
        return list(range(self.start, self.end))

    @property
    def is_empty(self) -> bool:
        return not self.indices()


class AggregateSummary(_ValueModel):
    """Scalar summaries of one window. Temperature and dew stay None without samples."""
    hours: int = 0
    min_temp: float | None = None
    max_temp: float | None = None
    avg_temp: float | None = None
    total_precip: float = 0.0
    total_snow: float = 0.0
    max_gust: float = 0.0
    max_dew: float | None = None
    max_uv: float = 0.0


class Classification(_ValueModel):
    """Categorical bucket with an ordinal severity and a display label."""
    dimension: str
    type: str
    label: str
    severity: int = Field(ge=0, le=6)


class PatternFlags(_ValueModel):
    """Compound weather signatures detected across a window."""
    convective: bool = False
    max_spike: float = 0.0
    stratiform: bool = False
    nw_flow_snow: bool = False
    cold_air_damming: bool = False
    cad_wedge: bool = False
    freezing_drizzle: bool = False
    ridge_winds: bool = False
    big_temperature_swing: bool = False
    swing_phrase: str | None = None
    precip_type: PrecipType = PrecipType.NONE
    wet_bulb_min: float | None = None
    wet_bulb_max: float | None = None
    goldilocks: GoldilocksVariant | None = None


class Badge(_StrictBaseModel):
    """Short label and color hint for the dominant condition."""
    text: str
    category: OutlookCategory
    color: str


class Outlook(_StrictBaseModel):
    """Single human-facing recommendation for a day."""
    badge: Badge
    emoji: str
    headline: str
    text: str
    summary: str = ""
    action: str = ""
    actions: List[str] = Field(default_factory=list)
    comfort: str | None = None
    goldilocks: GoldilocksVariant | None = None


class Alert(_StrictBaseModel):
    """Independent near-term hazard notice."""
    id: AlertId
    icon: str
    title: str
    detail: str


class ForecastBriefing(_StrictBaseModel):
    """Outlook plus alerts computed from one hourly series."""
    generated_at: datetime
    locale: str | None = None
    outlook: Outlook
    alerts: List[Alert] = Field(default_factory=list)
