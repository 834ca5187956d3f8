"""
Transit Service

This service interfaces with the ODsay public transit path search API to fetch
ranked transit itineraries and types each leg as walk, bus or subway.

API Endpoint: https://api.odsay.com/v1/api/searchPubTransPathT
Documentation: https://lab.odsay.com/guide/releaseReference
"""

import logging
from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError

from waitstop.schemas.geo import Coordinates
from waitstop.schemas.health import ServiceHealth
from waitstop.schemas.transit import TransitItinerary, TransitSegment, TransportMode

logger = logging.getLogger(__name__)

# ODsay subPath.trafficType codes. Anything else (3 = walk) is typed as WALK.
TRAFFIC_TYPE_MODES: Dict[int, TransportMode] = {
    1: TransportMode.SUBWAY,
    2: TransportMode.BUS,
}


def segment_mode(traffic_type) -> TransportMode:
    """Map an ODsay trafficType code to a transport mode."""
    try:
        return TRAFFIC_TYPE_MODES.get(int(traffic_type), TransportMode.WALK)
    except (TypeError, ValueError):
        return TransportMode.WALK


class TransitService:
    """
    Service for public transit itineraries.

    An empty list means no path was found, which is a normal outcome. Provider
    failures are logged and also reported as an empty list.
    """

    def __init__(self, api_url: str, api_key: str, timeout: float = 10.0):
        self._api_url = api_url
        self._api_key = api_key
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._api_url, timeout=self._timeout)
        return self._client

    def health_check(self) -> ServiceHealth:
        if not self._api_key:
            return ServiceHealth(healthy=False, message="ODsay API key is not configured")
        return ServiceHealth(healthy=True, message="ODsay transit search is configured")

    async def get_itineraries(
        self, origin: Coordinates, destination: Coordinates
    ) -> List[TransitItinerary]:
        """
        Fetch transit itineraries between two locations.

        Args:
            origin: Coordinates of the starting point
            destination: Coordinates of the destination point

        Returns:
            Itineraries in provider rank order (index 0 is the recommended path)
        """
        params = {
            "apiKey": self._api_key,
            "SX": origin.longitude,
            "SY": origin.latitude,
            "EX": destination.longitude,
            "EY": destination.latitude,
        }

        try:
            response = await self._get_client().get("/searchPubTransPathT", params=params)
        except httpx.TimeoutException:
            logger.error("Request to ODsay API timed out")
            return []
        except httpx.HTTPError as e:
            logger.error("Network error while contacting ODsay API: %s", str(e))
            return []

        if response.status_code == 429:
            logger.warning("ODsay API rate limit exceeded, no transit itineraries")
            return []
        if response.status_code != 200:
            logger.error("ODsay API returned status %s", response.status_code)
            return []

        try:
            data = response.json()
        except ValueError as e:
            logger.error("ODsay API returned invalid JSON: %s", str(e))
            return []

        return self._parse_itineraries(data)

    def _parse_itineraries(self, data: Dict) -> List[TransitItinerary]:
        """
        Parse ODsay response data into itineraries, dropping malformed paths.
        """
        if not isinstance(data, dict):
            logger.error("Unexpected ODsay response type: %s", type(data).__name__)
            return []

        if data.get("error"):
            # e.g. origin and destination within 700m of each other
            logger.info("ODsay found no transit path: %s", data["error"])
            return []

        result = data.get("result") or {}
        if not isinstance(result, dict):
            logger.error("Unexpected ODsay result type: %s", type(result).__name__)
            return []

        paths = result.get("path") or []
        if not isinstance(paths, list):
            logger.error("Unexpected ODsay path type: %s", type(paths).__name__)
            return []

        itineraries: List[TransitItinerary] = []
        for rank, path in enumerate(paths):
            try:
                itineraries.append(self._parse_itinerary(path))
            except (
                AttributeError,
                KeyError,
                IndexError,
                TypeError,
                ValueError,
                ValidationError,
            ) as e:
                logger.warning("Skipping malformed ODsay path #%d: %s", rank, str(e))
        return itineraries

    def _parse_itinerary(self, data: Dict) -> TransitItinerary:
        info = data["info"]
        return TransitItinerary(
            segments=[self._parse_segment(sub_path) for sub_path in data.get("subPath", [])],
            total_duration_minutes=info["totalTime"],
            total_fare=info.get("payment") or 0,
            bus_transfer_count=info.get("busTransitCount") or 0,
            subway_transfer_count=info.get("subwayTransitCount") or 0,
        )

    def _parse_segment(self, data: Dict) -> TransitSegment:
        mode = segment_mode(data.get("trafficType"))
        lane = (data.get("lane") or [{}])[0]

        if mode == TransportMode.SUBWAY:
            line_name = lane.get("name") or ""
        elif mode == TransportMode.BUS:
            line_name = str(lane.get("busNo") or "")
        else:
            line_name = ""

        return TransitSegment(
            mode=mode,
            line_name=line_name,
            start_station_name=data.get("startName") or "",
            station_count=data.get("stationCount") or 0,
            duration_minutes=data["sectionTime"],
        )

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
