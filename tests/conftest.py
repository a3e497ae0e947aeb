import itertools
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from marketplace.config.database import Base, get_db
from marketplace.core.auth.service import AuthService
from marketplace.core.exceptions import NotFoundError, UpstreamServiceError
from marketplace.main import app
from marketplace.shared.database.models import Order, OrderItem, OrderStatus, Product, User, UserRole
from marketplace.shared.services.email_service import EmailService, get_email_service
from marketplace.shared.services.geocoding_service import GeocodingClient, get_geocoding_client

DEFAULT_PASSWORD = "secret123"

_email_counter = itertools.count(1)


@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow; hash the shared test password once"""
    return AuthService.get_password_hash(DEFAULT_PASSWORD)


@pytest.fixture(scope="function")
def engine(tmp_path):
    """File-backed SQLite so that several sessions see the same data"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


class FakeMailSender(EmailService):
    """Records reset links instead of calling the mail provider"""

    def __init__(self, fail: bool = False):
        super().__init__(api_key="test-key")
        self.fail = fail
        self.sent = []

    async def send(self, to_email, subject, text, html):
        if self.fail:
            raise UpstreamServiceError("Email could not be sent")
        self.sent.append({"to": to_email, "subject": subject, "text": text, "html": html})

    async def send_password_reset(self, to_email, user_name, reset_url, role):
        await super().send_password_reset(to_email, user_name, reset_url, role)
        self.sent[-1]["reset_url"] = reset_url

    @property
    def last_token(self):
        return self.sent[-1]["reset_url"].rsplit("/", 1)[-1]


class FakeGeocoder(GeocodingClient):
    """Answers from canned provider payloads; None means the provider is down"""

    def __init__(self, result=None, status="OK"):
        super().__init__(api_key="test-key")
        self.result = result
        self.status = status
        self.requests = []

    async def _request(self, params):
        self.requests.append(params)
        if self.status == "ZERO_RESULTS":
            raise NotFoundError("Location not found")
        if self.result is None:
            raise UpstreamServiceError("Geocoding service unavailable")
        return self.result


def provider_result(lat, lng, formatted_address, city="Springfield", state="IL", country="United States"):
    return {
        "formatted_address": formatted_address,
        "geometry": {"location": {"lat": lat, "lng": lng}},
        "address_components": [
            {"long_name": city, "types": ["locality", "political"]},
            {"long_name": state, "types": ["administrative_area_level_1", "political"]},
            {"long_name": country, "types": ["country", "political"]},
        ]
    }


@pytest.fixture
def mail_sender():
    return FakeMailSender()


@pytest.fixture
def geocoder():
    return FakeGeocoder(result=provider_result(40.0, -74.0, "1 Main St, Springfield, IL, USA"))


@pytest.fixture(scope="function")
def client(db_session, mail_sender, geocoder):
    """Test client bound to the test session and the fake outbound services"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: mail_sender
    app.dependency_overrides[get_geocoding_client] = lambda: geocoder
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session, password_hash):
    def _make_user(role: UserRole, **fields):
        number = next(_email_counter)
        user = User(
            name=fields.pop("name", f"{role.value.title()} {number}"),
            email=fields.pop("email", f"{role.value}{number}@shopmail.com"),
            password_hash=password_hash,
            role=role.value,
            is_active=True,
            **fields
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def customer(make_user):
    return make_user(UserRole.CUSTOMER)


@pytest.fixture
def vendor(make_user):
    return make_user(
        UserRole.VENDOR,
        store_name="Corner Store",
        store_latitude=40.0,
        store_longitude=-74.0,
        service_radius_km=5.0
    )


@pytest.fixture
def partner(make_user):
    return make_user(UserRole.DELIVERY)


@pytest.fixture
def other_partner(make_user):
    return make_user(UserRole.DELIVERY)


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = AuthService.create_access_token(data={
            "user_id": user.id,
            "email": user.email,
            "role": user.role
        })
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def make_product(db_session):
    def _make_product(vendor, latitude=40.0, longitude=-74.0, **fields):
        product = Product(
            vendor_id=vendor.id,
            name=fields.pop("name", "Fresh Bread"),
            category=fields.pop("category", "bakery"),
            price=fields.pop("price", 3.5),
            count_in_stock=fields.pop("count_in_stock", 10),
            is_active=fields.pop("is_active", True),
            latitude=latitude,
            longitude=longitude,
            delivery_radius_km=5.0,
            **fields
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return _make_product


@pytest.fixture
def make_order(db_session):
    def _make_order(customer, product, status=OrderStatus.PROCESSING, partner=None,
                    started_at=None, delivered_at=None, latitude=40.0, longitude=-74.0):
        order = Order(
            customer_id=customer.id,
            shipping_address="12 Market Street",
            shipping_city="Springfield",
            shipping_country="US",
            shipping_latitude=latitude,
            shipping_longitude=longitude,
            payment_method="cash",
            items_price=7,
            total_price=7,
            status=status.value,
            delivery_partner_id=partner.id if partner else None,
            delivery_started_at=started_at,
            delivered_at=delivered_at,
            items=[OrderItem(
                product_id=product.id,
                vendor_id=product.vendor_id,
                name=product.name,
                qty=2,
                price=3.5
            )]
        )
        db_session.add(order)
        db_session.commit()
        db_session.refresh(order)
        return order
    return _make_order


@pytest.fixture
def fixed_clock():
    """Mutable clock: tests move `now` forward by assigning to clock.now"""
    class Clock:
        now = datetime(2024, 5, 1, 12, 0, 0)

        def __call__(self):
            return self.now

        def advance(self, **kwargs):
            self.now = self.now + timedelta(**kwargs)

    return Clock()
