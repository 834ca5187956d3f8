"""
Geocoding Service

Resolves free-text place keywords to coordinates through the TMap POI search
API, and coordinates back to an address through TMap reverse geocoding.

Documentation: https://tmapapi.sktelecom.com/
"""

import logging
from typing import Any, Dict, Optional

import httpx

from waitstop.schemas.geo import Coordinates, Place
from waitstop.schemas.health import ServiceHealth

logger = logging.getLogger(__name__)

DEFAULT_PLACE_NAME = "Current Location"
UNKNOWN_PLACE_NAME = "Unknown Location"


class GeocodingService:
    """
    Service for resolving trip endpoints with the TMap API.

    Provider failures are logged and reported as "not found" (``None``).
    """

    def __init__(self, api_url: str, app_key: str, timeout: float = 10.0):
        self._api_url = api_url
        self._app_key = app_key
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._api_url,
                headers={"appKey": self._app_key, "Accept": "application/json"},
                timeout=self._timeout,
            )
        return self._client

    def health_check(self) -> ServiceHealth:
        if not self._app_key:
            return ServiceHealth(healthy=False, message="TMap app key is not configured")
        return ServiceHealth(healthy=True, message="TMap geocoding is configured")

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Optional[Dict]:
        try:
            response = await self._get_client().get(path, params=params)
        except httpx.TimeoutException:
            logger.error("TMap request to %s timed out", path)
            return None
        except httpx.HTTPError as e:
            logger.error("Network error while contacting TMap: %s", str(e))
            return None

        if response.status_code == 204:
            logger.info("TMap %s returned no results", path)
            return None
        if response.status_code == 429:
            logger.warning("TMap API rate limit exceeded on %s", path)
            return None
        if response.status_code != 200:
            logger.error("TMap %s returned status %s: %s", path, response.status_code, response.text)
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error("TMap %s returned invalid JSON: %s", path, str(e))
            return None

    async def geocode(self, keyword: str) -> Optional[Place]:
        """
        Resolve a keyword to the best matching place.

        Args:
            keyword: Free-text place name, e.g. "강남역"

        Returns:
            The first POI match, or None if nothing matched or the call failed
        """
        data = await self._get_json(
            "/pois", {"version": "1", "searchKeyword": keyword, "count": 1}
        )
        if not data:
            return None

        try:
            return self._parse_poi(data)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Failed to parse TMap POI response for '%s': %s", keyword, str(e))
            return None

    def _parse_poi(self, data: Dict) -> Optional[Place]:
        pois = data["searchPoiInfo"]["pois"]["poi"]
        if not pois:
            return None
        poi = pois[0]
        return Place(
            name=poi["name"],
            latitude=float(poi["noorLat"]),
            longitude=float(poi["noorLon"]),
        )

    async def reverse_geocode(self, coordinates: Coordinates) -> str:
        """
        Return the full address at the given coordinates.

        Falls back to "Current Location" when the call fails and to
        "Unknown Location" when the provider has no address there.
        """
        data = await self._get_json(
            "/geo/reversegeocoding",
            {
                "version": "1",
                "lat": coordinates.latitude,
                "lon": coordinates.longitude,
                "coordType": "WGS84GEO",
                "addressType": "A10",
            },
        )
        if data is None:
            return DEFAULT_PLACE_NAME

        address_info = data.get("addressInfo") if isinstance(data, dict) else None
        address = address_info.get("fullAddress") if isinstance(address_info, dict) else None
        if not address:
            return UNKNOWN_PLACE_NAME
        return address

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
