"""
View-level schemas: selection state, derived KPIs and the payload handed to
the presentation layer.
"""

from datetime import date as CalendarDate, datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from .observation import DisplayData, Dimension, Observation
from .records import EvolutionPoint, RecordId


class ViewMode(str, Enum):
    """Which slice of the data is on display."""
    SINGLE = "single"
    BY_TEACHER = "by-teacher"
    INSTITUTION = "institution"


class TrendDirection(str, Enum):
    """Direction of a teacher's evolution series."""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"
    UNAVAILABLE = "unavailable"


class LoadStatus(str, Enum):
    """State of the most recent load cycle."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class Trend(BaseModel):
    """Trend KPI. delta is signed; magnitude is the rounded absolute change."""
    direction: TrendDirection = TrendDirection.UNAVAILABLE
    delta: Optional[float] = None
    magnitude: Optional[int] = None

    class Config:
        frozen = True


class CriticalDimension(BaseModel):
    """Lowest-scoring dimension of the display data."""
    dimension: Dimension
    name: str
    percentage: int

    class Config:
        frozen = True


class KPIReport(BaseModel):
    """Secondary indicators derived from the display data."""
    critical_dimension: Optional[CriticalDimension] = None
    low_indicator_count: int = 0
    trend: Trend = Field(default_factory=Trend)

    class Config:
        frozen = True


class DateRange(BaseModel):
    """Inclusive date window. Either bound may be open."""
    date_from: Optional[CalendarDate] = None
    date_to: Optional[CalendarDate] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self

    @property
    def is_open(self) -> bool:
        return self.date_from is None and self.date_to is None


class Selection(BaseModel):
    """User selection driving the view."""
    view_mode: ViewMode = ViewMode.SINGLE
    observation_id: Optional[RecordId] = None
    teacher_id: Optional[RecordId] = None
    date_range: DateRange = Field(default_factory=DateRange)

    class Config:
        frozen = True


class TeacherOption(BaseModel):
    """A teacher selectable in the by-teacher view."""
    teacher_id: RecordId
    teacher_name: str
    observation_count: int

    class Config:
        frozen = True


class DataSnapshot(BaseModel):
    """One generation of loaded data. Replaced wholesale on every successful load."""
    observations: Tuple[Observation, ...] = ()
    evolution: Tuple[EvolutionPoint, ...] = ()
    loaded_at: Optional[datetime] = None
    generation: int = 0

    class Config:
        frozen = True

    @property
    def is_empty(self) -> bool:
        return not self.observations


class DashboardView(BaseModel):
    """Everything the presentation layer needs for one render."""
    selection: Selection
    display: Optional[DisplayData] = None
    kpis: KPIReport = Field(default_factory=KPIReport)
    ranking: Tuple[Observation, ...] = ()
    observations: Tuple[Observation, ...] = ()
    teacher_options: List[TeacherOption] = []
    caption: Optional[str] = None
    status: LoadStatus = LoadStatus.IDLE
    last_sync: Optional[datetime] = None
    generation: int = 0

    class Config:
        frozen = True
