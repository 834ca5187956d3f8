"""
Route Search Request/Response Schemas

Pydantic models for route search API endpoint.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from waitstop.schemas.geo import Coordinates, Place
from waitstop.schemas.options import RouteOption


class Scenario(str, Enum):
    DAY = "day"
    NIGHT = "night"


class RouteSearchRequest(BaseModel):
    """Request schema for route search endpoint."""

    origin: Optional[str] = Field(
        None, description="Origin as free text, or its display name when coordinates are given"
    )
    destination: Optional[str] = Field(
        None,
        description="Destination as free text, or its display name when coordinates are given",
    )
    origin_coordinates: Optional[Coordinates] = Field(
        None, description="Origin coordinates (skips geocoding)"
    )
    destination_coordinates: Optional[Coordinates] = Field(
        None, description="Destination coordinates (skips geocoding)"
    )
    scenario: Scenario = Field(default=Scenario.DAY, description="Day or night framing")


class RouteSearchResponse(BaseModel):
    """Response schema for route search endpoint."""

    origin: Place
    destination: Place
    scenario: Scenario
    options: List[RouteOption] = Field(..., description="Available options: saver, smart, vip")
    message: Optional[str] = Field(None, description="Set when no option could be found")
    search_time: datetime = Field(..., description="Time when the search was performed")
