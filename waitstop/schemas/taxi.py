from pydantic import BaseModel, ConfigDict, Field


class TaxiEstimate(BaseModel):
    """Point-to-point taxi time and fare for one origin/destination pair."""

    model_config = ConfigDict(frozen=True)

    duration_minutes: int = Field(..., ge=0, description="Driving time in whole minutes")
    fare_amount: int = Field(default=0, ge=0, description="Estimated taxi fare in won")
    distance_meters: float = Field(default=0.0, ge=0, description="Driving distance in meters")
