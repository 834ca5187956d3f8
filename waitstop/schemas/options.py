"""
Route Option Schema

User-facing route options (Saver, Smart, VIP) and their step breakdowns.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from waitstop.schemas.transit import TransportMode


class OptionKind(str, Enum):
    SAVER = "saver"
    SMART = "smart"
    VIP = "vip"


class DisplayStep(BaseModel):
    """One leg of a route option as shown to the rider."""

    mode: TransportMode
    name: str
    description: str
    duration_minutes: int = Field(..., ge=0)
    fare_amount: int = Field(default=0, ge=0, description="Fare attributed to this leg")
    is_transfer_hub: bool = Field(
        default=False, description="Where a Smart rider leaves the taxi and boards transit"
    )


class RouteOption(BaseModel):
    """A priced, timed trip option."""

    kind: OptionKind
    label: str
    tag: str
    badge: Optional[str] = None
    duration_minutes: int = Field(..., ge=0)
    fare_amount: int = Field(..., ge=0)
    summary: str
    detail: str
    steps: List[DisplayStep] = Field(default_factory=list)
