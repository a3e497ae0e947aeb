from fastapi import status

from marketplace.shared.database.models import Order, OrderItem, UserRole


def _order_payload(*product_ids, status_value=None):
    payload = {
        "order_items": [{"product_id": product_id, "qty": 1} for product_id in product_ids],
        "shipping_address": {
            "address": "12 Market Street",
            "city": "Springfield",
            "postal_code": "12345",
            "country": "US",
            "latitude": 40.01,
            "longitude": -74.0
        },
        "payment_method": "cash",
        "items_price": 10,
        "tax_price": 1,
        "shipping_price": 2,
        "total_price": 13
    }
    if status_value:
        payload["status"] = status_value
    return payload


class TestCreateOrder:

    def test_line_items_bound_to_product_vendors(self, client, auth_headers, customer, vendor, make_user,
                                                 make_product):
        second_vendor = make_user(UserRole.VENDOR)
        bread = make_product(vendor)
        milk = make_product(second_vendor, name="Milk", category="dairy")

        response = client.post(
            "/api/v1/orders",
            json=_order_payload(bread.id, milk.id),
            headers=auth_headers(customer)
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "pending"
        assert data["delivery_partner_id"] is None
        assert {item["product_id"]: item["vendor_id"] for item in data["items"]} == {
            bread.id: vendor.id,
            milk.id: second_vendor.id
        }

    def test_unknown_product_rejects_whole_order(self, client, auth_headers, db_session, customer, vendor,
                                                 make_product):
        bread = make_product(vendor)

        response = client.post(
            "/api/v1/orders",
            json=_order_payload(bread.id, 424242),
            headers=auth_headers(customer)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Product not found: 424242"
        assert db_session.query(Order).count() == 0
        assert db_session.query(OrderItem).count() == 0

    def test_processing_order_is_immediately_available(self, client, auth_headers, customer, vendor, partner,
                                                       make_product):
        bread = make_product(vendor)
        created = client.post(
            "/api/v1/orders",
            json=_order_payload(bread.id, status_value="processing"),
            headers=auth_headers(customer)
        ).json()

        response = client.get("/api/v1/delivery/orders/available", headers=auth_headers(partner))

        assert [o["id"] for o in response.json()] == [created["id"]]

    def test_status_beyond_processing_rejected(self, client, auth_headers, customer, vendor, make_product):
        bread = make_product(vendor)

        response = client.post(
            "/api/v1/orders",
            json=_order_payload(bread.id, status_value="delivered"),
            headers=auth_headers(customer)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_empty_order_rejected(self, client, auth_headers, customer):
        response = client.post("/api/v1/orders", json=_order_payload(), headers=auth_headers(customer))

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestOrderVisibility:

    def test_customer_sees_own_orders(self, client, auth_headers, customer, vendor, make_product, make_order):
        order = make_order(customer, make_product(vendor))

        mine = client.get("/api/v1/orders/myorders", headers=auth_headers(customer))
        detail = client.get(f"/api/v1/orders/{order.id}", headers=auth_headers(customer))

        assert [o["id"] for o in mine.json()] == [order.id]
        assert detail.status_code == status.HTTP_200_OK

    def test_vendor_with_line_item_sees_order(self, client, auth_headers, customer, vendor, make_product,
                                              make_order):
        order = make_order(customer, make_product(vendor))

        response = client.get(f"/api/v1/orders/{order.id}", headers=auth_headers(vendor))

        assert response.status_code == status.HTTP_200_OK

    def test_uninvolved_account_is_unauthorized(self, client, auth_headers, customer, vendor, make_user,
                                                make_product, make_order):
        order = make_order(customer, make_product(vendor))
        stranger = make_user(UserRole.CUSTOMER)

        response = client.get(f"/api/v1/orders/{order.id}", headers=auth_headers(stranger))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
