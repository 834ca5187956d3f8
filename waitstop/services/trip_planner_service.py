"""
Trip Planner Service

Drives one route search: resolve both endpoints, fetch the taxi estimate and
transit itineraries concurrently, synthesize the transit options and assemble
the final option list.
"""

import asyncio
import logging
from typing import List, NamedTuple, Optional, Tuple

from waitstop.schemas.geo import Coordinates, Place
from waitstop.schemas.options import RouteOption
from waitstop.schemas.taxi import TaxiEstimate
from waitstop.schemas.transit import TransitItinerary
from waitstop.services.geocoding_service import GeocodingService
from waitstop.services.option_assembler import assemble_options
from waitstop.services.synthesis_service import HybridSynthesisEngine
from waitstop.services.taxi_service import TaxiService
from waitstop.services.transit_service import TransitService

logger = logging.getLogger(__name__)


class TripPlannerError(Exception):
    """Base exception for trip planner errors."""


class MissingInputError(TripPlannerError):
    """Raised when origin or destination is not given."""


class LocationNotFoundError(TripPlannerError):
    """Raised when an endpoint cannot be resolved to coordinates."""


class TripPlan(NamedTuple):
    origin: Place
    destination: Place
    options: List[RouteOption]


def _is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


class TripPlannerService:
    """
    Orchestrates the providers and the synthesis engine for a route search.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        geocoding_service: GeocodingService,
        taxi_service: TaxiService,
        transit_service: TransitService,
        engine: Optional[HybridSynthesisEngine] = None,
    ):
        self.geocoding_service = geocoding_service
        self.taxi_service = taxi_service
        self.transit_service = transit_service
        self.engine = engine or HybridSynthesisEngine()

    async def plan(
        self,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        origin_coordinates: Optional[Coordinates] = None,
        destination_coordinates: Optional[Coordinates] = None,
    ) -> TripPlan:
        """
        Plan a trip and return every available option.

        Each endpoint is given as free text, as coordinates, or as both (the
        text is then only its display name).

        Raises:
            MissingInputError: If either endpoint is not given at all
            LocationNotFoundError: If either endpoint cannot be resolved
        """
        if _is_blank(origin) and origin_coordinates is None:
            raise MissingInputError("Missing origin")
        if _is_blank(destination) and destination_coordinates is None:
            raise MissingInputError("Missing destination")

        start, end = await asyncio.gather(
            self._resolve(origin, origin_coordinates),
            self._resolve(destination, destination_coordinates),
        )
        if start is None or end is None:
            raise LocationNotFoundError(
                f"Location not found: {origin if start is None else destination}"
            )

        logger.info("Planning route: %s -> %s", start, end)

        taxi_estimate, itineraries = await self._fetch(start, end)
        logger.info(
            "Provider results: taxi=%s, transit itineraries=%d",
            "ok" if taxi_estimate else "unavailable",
            len(itineraries),
        )

        saver, smart = self.engine.synthesize(itineraries, taxi_estimate)
        options = assemble_options(saver, smart, taxi_estimate)
        if not options:
            logger.warning("No route options for %s -> %s", start.name, end.name)

        return TripPlan(origin=start, destination=end, options=options)

    async def _resolve(
        self, text: Optional[str], coordinates: Optional[Coordinates]
    ) -> Optional[Place]:
        if coordinates is not None:
            if _is_blank(text):
                name = await self.geocoding_service.reverse_geocode(coordinates)
            else:
                name = text.strip()
            return Place(name=name, latitude=coordinates.latitude, longitude=coordinates.longitude)
        return await self.geocoding_service.geocode(text.strip())

    async def _fetch(
        self, start: Place, end: Place
    ) -> Tuple[Optional[TaxiEstimate], List[TransitItinerary]]:
        """Fetch both provider results concurrently; a failure in one never blocks the other."""
        taxi_result, transit_result = await asyncio.gather(
            self.taxi_service.get_estimate(start, end),
            self.transit_service.get_itineraries(start, end),
            return_exceptions=True,
        )

        if isinstance(taxi_result, Exception):
            logger.error("Taxi estimate failed: %s", str(taxi_result))
            taxi_result = None
        if isinstance(transit_result, Exception):
            logger.error("Transit search failed: %s", str(transit_result))
            transit_result = []

        return taxi_result, transit_result

    async def close(self):
        await asyncio.gather(
            self.geocoding_service.close(),
            self.taxi_service.close(),
            self.transit_service.close(),
        )
