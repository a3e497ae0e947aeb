# marketplace/shared/services/geocoding_service.py
import httpx
import logging
from typing import Dict, Any, Optional

from marketplace.config.settings import settings
from marketplace.core.exceptions import NotFoundError, UpstreamServiceError

logger = logging.getLogger(__name__)

PLACEHOLDER_LOCATION = "Unknown location"


class GeocodingClient:
    """Client for the address <-> coordinates provider (Google Geocoding API)"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else settings.google_maps_api_key
        self.base_url = base_url or settings.geocoding_base_url
        self.timeout = timeout or settings.http_timeout_seconds

    @staticmethod
    def _extract_components(result: Dict[str, Any]) -> Dict[str, str]:
        components = {"city": "", "state": "", "country": ""}
        for component in result.get("address_components", []):
            types = component.get("types", [])
            if "locality" in types:
                components["city"] = component.get("long_name", "")
            elif "administrative_area_level_1" in types:
                components["state"] = component.get("long_name", "")
            elif "country" in types:
                components["country"] = component.get("long_name", "")
        return components

    async def _request(self, params: Dict[str, str]) -> Dict[str, Any]:
        if not self.api_key:
            logger.error("Geocoding provider is not configured")
            raise UpstreamServiceError("Geocoding service unavailable")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params={**params, "key": self.api_key})
        except httpx.TimeoutException:
            logger.error(f"Geocoding timeout - params: {list(params)}")
            raise UpstreamServiceError("Geocoding service timeout")
        except httpx.HTTPError as e:
            logger.error(f"Geocoding transport error: {str(e)}")
            raise UpstreamServiceError("Geocoding service unavailable")

        if response.status_code != 200:
            logger.error(f"Geocoding provider error: {response.status_code}")
            raise UpstreamServiceError("Geocoding service unavailable")

        data = response.json()
        provider_status = data.get("status")

        if provider_status == "ZERO_RESULTS" or (provider_status == "OK" and not data.get("results")):
            raise NotFoundError("Location not found")

        if provider_status != "OK":
            logger.error(f"Geocoding provider status: {provider_status}")
            raise UpstreamServiceError("Geocoding service unavailable")

        return data["results"][0]

    async def geocode(self, address: str) -> Dict[str, Any]:
        """Forward geocoding; failures abort the caller's flow"""
        result = await self._request({"address": address})
        location = result["geometry"]["location"]

        return {
            "latitude": location["lat"],
            "longitude": location["lng"],
            "formatted_address": result.get("formatted_address", ""),
            **self._extract_components(result)
        }

    async def reverse_geocode(self, latitude: float, longitude: float) -> Dict[str, Any]:
        result = await self._request({"latlng": f"{latitude},{longitude}"})

        return {
            "formatted_address": result.get("formatted_address", ""),
            **self._extract_components(result)
        }

    async def describe_location(self, latitude: float, longitude: float) -> str:
        """Formatted address for a point, or a placeholder when the provider fails"""
        try:
            result = await self.reverse_geocode(latitude, longitude)
        except (UpstreamServiceError, NotFoundError) as e:
            logger.warning(f"Reverse geocoding fell back to placeholder: {e.detail}")
            return PLACEHOLDER_LOCATION

        return result["formatted_address"] or PLACEHOLDER_LOCATION


def get_geocoding_client() -> GeocodingClient:
    """Dependency for FastAPI"""
    return GeocodingClient()
