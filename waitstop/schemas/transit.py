"""
Transit Itinerary Schema

Pydantic models for public transit itineraries as returned by the transit
provider, after mode typing.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TransportMode(str, Enum):
    """Transport modes."""

    WALK = "WALK"
    BUS = "BUS"
    SUBWAY = "SUBWAY"
    TAXI = "TAXI"


TRANSIT_MODES = frozenset({TransportMode.BUS, TransportMode.SUBWAY})


class TransitSegment(BaseModel):
    """A single leg of a transit itinerary."""

    model_config = ConfigDict(frozen=True)

    mode: TransportMode
    line_name: str = Field(default="", description="Subway line name or bus route number")
    start_station_name: str = Field(default="", description="Boarding station or stop")
    station_count: int = Field(default=0, ge=0, description="Stations or stops travelled")
    duration_minutes: int = Field(..., ge=0, description="Duration in minutes")

    @property
    def is_transit(self) -> bool:
        return self.mode in TRANSIT_MODES

    @property
    def display_name(self) -> str:
        if self.mode == TransportMode.SUBWAY:
            return self.line_name or "지하철"
        if self.mode == TransportMode.BUS:
            return f"{self.line_name}번 버스" if self.line_name else "버스"
        return "도보"

    @property
    def description(self) -> str:
        if self.mode == TransportMode.SUBWAY:
            return f"{self.start_station_name}에서 승차 · {self.station_count}개 역 이동"
        if self.mode == TransportMode.BUS:
            return f"{self.start_station_name}에서 승차 · {self.station_count}개 정류장 이동"
        return f"도보 약 {self.duration_minutes}분"


class TransitItinerary(BaseModel):
    """A complete transit journey candidate, ranked by the provider."""

    model_config = ConfigDict(frozen=True)

    segments: List[TransitSegment]
    total_duration_minutes: int = Field(..., ge=0, description="Total duration in minutes")
    total_fare: int = Field(..., ge=0, description="Total fare in won")
    bus_transfer_count: int = Field(default=0, ge=0)
    subway_transfer_count: int = Field(default=0, ge=0)

    @property
    def transfer_count(self) -> int:
        return self.bus_transfer_count + self.subway_transfer_count
