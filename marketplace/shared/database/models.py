# marketplace/shared/database/models.py
import enum

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, Float,
    Numeric, ForeignKey, CheckConstraint, Index, func
)
from sqlalchemy.orm import relationship

from marketplace.config.database import Base


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    VENDOR = "vendor"
    DELIVERY = "delivery"
    ADMIN = "admin"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Statuses in which an order is bound to a delivery partner
ASSIGNED_STATUSES = (OrderStatus.OUT_FOR_DELIVERY.value, OrderStatus.DELIVERED.value)


# =====================================================
# TIMESTAMP MIXIN
# =====================================================
class TimestampMixin:
    """Adds created_at and updated_at columns"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# ACCOUNTS
# =====================================================

class User(Base, TimestampMixin):
    """Account for every role: customer, vendor, delivery partner and admin"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(50))
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value, index=True)
    is_active = Column(Boolean, default=True)

    # Password reset (sha256 of the raw token, never the token itself)
    reset_password_token = Column(String(64), index=True)
    reset_password_expire = Column(DateTime)

    # Vendor store profile
    store_name = Column(String(255))
    store_latitude = Column(Float)
    store_longitude = Column(Float)
    store_street = Column(String(255))
    store_city = Column(String(100))
    store_state = Column(String(100))
    store_zip_code = Column(String(20))
    store_country = Column(String(100))
    store_formatted_address = Column(Text)
    service_radius_km = Column(Float, default=10.0)

    # Delivery partner profile
    vehicle_type = Column(String(20), default="bike")
    vehicle_number = Column(String(50))
    current_latitude = Column(Float)
    current_longitude = Column(Float)
    current_formatted_address = Column(Text)

    __table_args__ = (
        CheckConstraint(
            "role IN ('customer', 'vendor', 'delivery', 'admin')",
            name="ck_users_role"
        ),
    )

    # Relationships
    products = relationship("Product", back_populates="vendor")
    orders = relationship("Order", back_populates="customer", foreign_keys="Order.customer_id")

    @property
    def has_store_location(self) -> bool:
        return self.store_latitude is not None and self.store_longitude is not None


# =====================================================
# PRODUCTS
# =====================================================

class Product(Base, TimestampMixin):
    """Product listed by a vendor; location mirrors the vendor's store"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    brand = Column(String(255))
    category = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    image_url = Column(String(500))
    price = Column(Numeric(10, 2), nullable=False, default=0)
    count_in_stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True)

    # Inherited from the vendor store profile
    latitude = Column(Float)
    longitude = Column(Float)
    street = Column(String(255))
    city = Column(String(100))
    state = Column(String(100))
    zip_code = Column(String(20))
    country = Column(String(100))
    delivery_radius_km = Column(Float, nullable=False, default=10.0)

    __table_args__ = (
        Index("ix_products_lat_lng", "latitude", "longitude"),
    )

    # Relationships
    vendor = relationship("User", back_populates="products")


# =====================================================
# ORDERS
# =====================================================

class Order(Base, TimestampMixin):
    """Customer order moving through the assignment lifecycle"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Shipping
    shipping_address = Column(String(255), nullable=False)
    shipping_city = Column(String(100), nullable=False)
    shipping_postal_code = Column(String(20))
    shipping_country = Column(String(100), nullable=False)
    shipping_latitude = Column(Float)
    shipping_longitude = Column(Float)

    # Totals
    payment_method = Column(String(50))
    items_price = Column(Numeric(10, 2), default=0)
    tax_price = Column(Numeric(10, 2), default=0)
    shipping_price = Column(Numeric(10, 2), default=0)
    total_price = Column(Numeric(10, 2), default=0)
    is_paid = Column(Boolean, default=False)
    paid_at = Column(DateTime)

    # Lifecycle
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    delivery_partner_id = Column(Integer, ForeignKey("users.id"), index=True)
    delivery_started_at = Column(DateTime)
    delivered_at = Column(DateTime)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'processing', 'out_for_delivery', 'delivered', 'cancelled')",
            name="ck_orders_status"
        ),
        CheckConstraint(
            "(delivery_partner_id IS NULL) = (status NOT IN ('out_for_delivery', 'delivered'))",
            name="ck_orders_partner_binding"
        ),
        Index("ix_orders_shipping_lat_lng", "shipping_latitude", "shipping_longitude"),
    )

    # Relationships
    customer = relationship("User", back_populates="orders", foreign_keys=[customer_id])
    delivery_partner = relationship("User", foreign_keys=[delivery_partner_id])
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    @property
    def vendor_ids(self) -> set:
        return {item.vendor_id for item in self.items}


class OrderItem(Base):
    """Order line item; vendor resolved at creation time"""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    vendor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    qty = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")
