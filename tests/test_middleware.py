import logging

from fastapi import status

from marketplace.core.middleware import PROCESS_TIME_HEADER, request_scope

MIDDLEWARE_LOGGER = "marketplace.core.middleware"


class TestRequestScope:

    def test_role_scoped_paths(self):
        assert request_scope("/api/v1/delivery/orders/available") == "delivery"
        assert request_scope("/api/v1/vendor") == "vendor"

    def test_public_paths(self):
        assert request_scope("/health") == "public"
        assert request_scope("/api/v1/products/nearby") == "public"
        assert request_scope("/api/v1/vendorship") == "public"


class TestRequestLogging:

    def test_process_time_header(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert float(response.headers[PROCESS_TIME_HEADER]) >= 0

    def test_wrong_role_on_scoped_path_is_a_warning(self, client, auth_headers, customer, caplog):
        with caplog.at_level(logging.INFO, logger=MIDDLEWARE_LOGGER):
            response = client.get("/api/v1/vendor/dashboard", headers=auth_headers(customer))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        records = [r for r in caplog.records if r.name == MIDDLEWARE_LOGGER]
        assert records[-1].levelno == logging.WARNING
        assert "[vendor]" in records[-1].getMessage()

    def test_public_request_is_info(self, client, caplog):
        with caplog.at_level(logging.INFO, logger=MIDDLEWARE_LOGGER):
            client.get("/api/v1/health")

        records = [r for r in caplog.records if r.name == MIDDLEWARE_LOGGER]
        assert records[-1].levelno == logging.INFO
        assert "[public]" in records[-1].getMessage()


class TestCORS:

    def test_preflight_allows_configured_origin(self, client):
        response = client.options(
            "/api/v1/products/nearby",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            }
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access-control-allow-origin" in response.headers
