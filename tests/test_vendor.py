from datetime import datetime

from fastapi import status

from marketplace.core.clock import utcnow
from marketplace.shared.database.models import Order, OrderStatus, Product, User, UserRole


def _set_status(client, headers, order_id, value):
    return client.put(f"/api/v1/vendor/orders/{order_id}/status", json={"status": value}, headers=headers)


class TestVendorOrderStatus:

    def test_vendor_advances_pending_order(self, client, auth_headers, customer, vendor, make_product, make_order):
        order = make_order(customer, make_product(vendor), status=OrderStatus.PENDING)

        response = _set_status(client, auth_headers(vendor), order.id, "processing")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "processing"

    def test_vendor_cancels_order(self, client, auth_headers, customer, vendor, partner, make_product, make_order):
        order = make_order(customer, make_product(vendor))

        assert _set_status(client, auth_headers(vendor), order.id, "cancelled").status_code == status.HTTP_200_OK

        accept = client.put(f"/api/v1/delivery/orders/{order.id}/accept", headers=auth_headers(partner))
        assert accept.status_code == status.HTTP_409_CONFLICT

    def test_cannot_cancel_after_pickup(self, client, auth_headers, customer, vendor, partner,
                                        make_product, make_order, db_session):
        order = make_order(customer, make_product(vendor), status=OrderStatus.OUT_FOR_DELIVERY,
                           partner=partner, started_at=utcnow())

        response = _set_status(client, auth_headers(vendor), order.id, "cancelled")

        assert response.status_code == status.HTTP_409_CONFLICT
        stored = db_session.query(Order).filter(Order.id == order.id).one()
        assert stored.status == OrderStatus.OUT_FOR_DELIVERY.value
        assert stored.delivery_partner_id == partner.id

    def test_completed_closes_order_out_for_delivery(self, client, auth_headers, customer, vendor, partner,
                                                     make_product, make_order):
        order = make_order(customer, make_product(vendor), status=OrderStatus.OUT_FOR_DELIVERY,
                           partner=partner, started_at=utcnow())

        response = _set_status(client, auth_headers(vendor), order.id, "Completed")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "delivered"
        assert data["delivered_at"] is not None
        assert data["delivery_partner_id"] == partner.id

    def test_completed_requires_pickup(self, client, auth_headers, customer, vendor, make_product, make_order):
        order = make_order(customer, make_product(vendor))

        response = _set_status(client, auth_headers(vendor), order.id, "completed")

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_unknown_status_rejected(self, client, auth_headers, customer, vendor, make_product, make_order):
        order = make_order(customer, make_product(vendor))

        response = _set_status(client, auth_headers(vendor), order.id, "out_for_delivery")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_vendor_without_line_item_is_unauthorized(self, client, auth_headers, customer, vendor, make_user,
                                                      make_product, make_order):
        order = make_order(customer, make_product(vendor))
        other_vendor = make_user(UserRole.VENDOR)

        response = _set_status(client, auth_headers(other_vendor), order.id, "cancelled")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unknown_order(self, client, auth_headers, vendor):
        response = _set_status(client, auth_headers(vendor), 9999, "processing")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestVendorDashboard:

    def test_dashboard_totals(self, client, auth_headers, customer, vendor, partner, make_product, make_order):
        product = make_product(vendor)
        make_product(vendor, name="Rolls")
        make_order(customer, product, status=OrderStatus.DELIVERED, partner=partner,
                   started_at=datetime(2024, 5, 1, 9), delivered_at=datetime(2024, 5, 1, 9, 20))
        make_order(customer, product)
        make_order(customer, product, status=OrderStatus.CANCELLED)

        response = client.get("/api/v1/vendor/dashboard", headers=auth_headers(vendor))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total_products"] == 2
        assert data["total_orders"] == 2
        assert data["revenue"] == 7.0
        assert len(data["recent_orders"]) == 3

    def test_vendor_orders_listing(self, client, auth_headers, customer, vendor, make_user, make_product, make_order):
        mine = make_order(customer, make_product(vendor))
        make_order(customer, make_product(make_user(UserRole.VENDOR)))

        response = client.get("/api/v1/vendor/orders", headers=auth_headers(vendor))

        assert [o["id"] for o in response.json()] == [mine.id]


class TestVendorProducts:

    def test_product_inherits_store_location(self, client, auth_headers, vendor):
        response = client.post(
            "/api/v1/vendor/products",
            json={"name": "Sourdough", "category": "Bakery", "price": 4.25, "count_in_stock": 3},
            headers=auth_headers(vendor)
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["category"] == "bakery"
        assert data["latitude"] == 40.0
        assert data["longitude"] == -74.0
        assert data["delivery_radius_km"] == 5.0

        listing = client.get("/api/v1/vendor/products", headers=auth_headers(vendor))
        assert [p["id"] for p in listing.json()] == [data["id"]]

    def test_customer_cannot_create_products(self, client, auth_headers, customer):
        response = client.post(
            "/api/v1/vendor/products",
            json={"name": "Sourdough", "category": "bakery", "price": 4.25},
            headers=auth_headers(customer)
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestStoreLocation:

    def test_coordinates_propagate_to_products(self, client, auth_headers, db_session, vendor, make_product):
        product = make_product(vendor)

        response = client.put(
            "/api/v1/vendor/store-location",
            json={"latitude": 41.5, "longitude": -73.5, "city": "Hudson", "service_radius_km": 8},
            headers=auth_headers(vendor)
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["products_updated"] == 1
        stored = db_session.query(Product).filter(Product.id == product.id).one()
        assert (stored.latitude, stored.longitude) == (41.5, -73.5)
        assert stored.city == "Hudson"
        assert stored.delivery_radius_km == 8

    def test_address_is_geocoded(self, client, auth_headers, db_session, vendor, geocoder):
        response = client.put(
            "/api/v1/vendor/store-location",
            json={"street": "1 Main St", "city": "Springfield", "country": "US"},
            headers=auth_headers(vendor)
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["formatted_address"] == "1 Main St, Springfield, IL, USA"
        assert geocoder.requests == [{"address": "1 Main St, Springfield, US"}]
        stored = db_session.query(User).filter(User.id == vendor.id).one()
        assert stored.store_state == "IL"

    def test_geocoding_failure_aborts_update(self, client, auth_headers, db_session, vendor, geocoder):
        geocoder.result = None

        response = client.put(
            "/api/v1/vendor/store-location",
            json={"street": "1 Main St", "city": "Springfield"},
            headers=auth_headers(vendor)
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        stored = db_session.query(User).filter(User.id == vendor.id).one()
        assert (stored.store_latitude, stored.store_longitude) == (40.0, -74.0)

    def test_empty_update_rejected(self, client, auth_headers, vendor):
        response = client.put("/api/v1/vendor/store-location", json={}, headers=auth_headers(vendor))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
