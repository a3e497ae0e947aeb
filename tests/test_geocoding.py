import asyncio

from fastapi import status

from marketplace.shared.services.geocoding_service import GeocodingClient, PLACEHOLDER_LOCATION


class TestGeocodingClient:

    def test_unconfigured_provider_degrades_to_placeholder(self):
        client = GeocodingClient(api_key="")

        assert asyncio.run(client.describe_location(40.0, -74.0)) == PLACEHOLDER_LOCATION

    def test_forward_geocoding_parses_components(self, geocoder):
        result = asyncio.run(geocoder.geocode("1 Main St"))

        assert result == {
            "latitude": 40.0,
            "longitude": -74.0,
            "formatted_address": "1 Main St, Springfield, IL, USA",
            "city": "Springfield",
            "state": "IL",
            "country": "United States"
        }


class TestGeocodeAPI:

    def test_forward(self, client):
        response = client.get("/api/v1/geocode", params={"address": "1 Main St"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["latitude"] == 40.0

    def test_forward_requires_address(self, client):
        response = client.get("/api/v1/geocode")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_forward_not_found(self, client, geocoder):
        geocoder.status = "ZERO_RESULTS"

        response = client.get("/api/v1/geocode", params={"address": "nowhere"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_forward_provider_down(self, client, geocoder):
        geocoder.result = None

        response = client.get("/api/v1/geocode", params={"address": "1 Main St"})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_reverse_falls_back_to_placeholder(self, client, geocoder):
        geocoder.result = None

        response = client.get("/api/v1/geocode/reverse", params={"lat": 40.0, "lng": -74.0})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["formatted_address"] == PLACEHOLDER_LOCATION

    def test_reverse_validates_point(self, client):
        response = client.get("/api/v1/geocode/reverse", params={"lat": 95, "lng": 0})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestHealth:

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/api/v1/health").json()["status"] == "healthy"
