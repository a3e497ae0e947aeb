# marketplace/shared/services/proximity_index.py
"""
Geospatial discovery over located records (products, unassigned orders).

A bounding box around the query point is pushed to the database to narrow the
candidates; the exact great-circle test and the ordering run here, so the
behaviour is the same on PostgreSQL and SQLite.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.core.exceptions import UpstreamServiceError, ValidationError
from marketplace.shared.database.models import Order, OrderStatus, Product

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# Widening factor for the SQL prefilter box; the exact test is done in Python
BOX_MARGIN = 1.01


def great_circle_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometers between two points given in degrees"""
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(min(1.0, math.sqrt(a)))

    return EARTH_RADIUS_KM * c


def _parse_number(value: Any, field: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def validate_point(latitude: Any, longitude: Any) -> Tuple[float, float]:
    """Parse and range-check a latitude/longitude pair"""
    if latitude in (None, "") or longitude in (None, ""):
        raise ValidationError("Latitude and longitude are required")

    lat = _parse_number(latitude, "lat")
    lng = _parse_number(longitude, "lng")

    if not -90.0 <= lat <= 90.0:
        raise ValidationError("lat must be between -90 and 90")
    if not -180.0 <= lng <= 180.0:
        raise ValidationError("lng must be between -180 and 180")

    return lat, lng


def validate_radius(radius_km: Any) -> float:
    radius = _parse_number(radius_km, "radius_km")
    if radius <= 0:
        raise ValidationError("radius_km must be greater than 0")
    return radius


@dataclass
class NearbyMatch:
    record: Any
    distance_km: float


class ProximityIndex:
    """Radius queries over a mapped class carrying latitude/longitude columns"""

    def __init__(
        self,
        db: Session,
        model,
        latitude_column,
        longitude_column,
        base_filters: Sequence = (),
        category_column=None
    ):
        self.db = db
        self.model = model
        self.latitude_column = latitude_column
        self.longitude_column = longitude_column
        self.base_filters = list(base_filters)
        self.category_column = category_column

    @classmethod
    def for_products(cls, db: Session) -> "ProximityIndex":
        return cls(
            db,
            Product,
            Product.latitude,
            Product.longitude,
            base_filters=[Product.is_active.is_(True)],
            category_column=Product.category
        )

    @classmethod
    def for_unassigned_orders(cls, db: Session) -> "ProximityIndex":
        return cls(
            db,
            Order,
            Order.shipping_latitude,
            Order.shipping_longitude,
            base_filters=[
                Order.status == OrderStatus.PROCESSING.value,
                Order.delivery_partner_id.is_(None)
            ]
        )

    def _bounding_box_filters(self, lat: float, lng: float, radius_km: float) -> List:
        filters = [
            self.latitude_column.isnot(None),
            self.longitude_column.isnot(None),
        ]

        angular_radius = radius_km / EARTH_RADIUS_KM
        if angular_radius >= math.pi:
            return filters

        lat_delta = math.degrees(angular_radius) * BOX_MARGIN
        min_lat = lat - lat_delta
        max_lat = lat + lat_delta
        filters.append(self.latitude_column.between(max(min_lat, -90.0), min(max_lat, 90.0)))

        # A cap touching a pole covers every longitude
        if min_lat <= -90.0 or max_lat >= 90.0:
            return filters

        ratio = math.sin(angular_radius) / math.cos(math.radians(lat))
        if ratio >= 1.0:
            return filters

        lng_delta = math.degrees(math.asin(ratio)) * BOX_MARGIN
        min_lng = lng - lng_delta
        max_lng = lng + lng_delta

        # TODO: split the box in two instead of dropping the filter across the antimeridian
        if min_lng < -180.0 or max_lng > 180.0:
            return filters

        filters.append(self.longitude_column.between(min_lng, max_lng))
        return filters

    def find_near(
        self,
        latitude: Any,
        longitude: Any,
        radius_km: Any,
        category: Optional[str] = None
    ) -> List[NearbyMatch]:
        """
        Records within radius_km of the point, nearest first.

        The boundary is inclusive. An empty list is a valid answer.
        """
        lat, lng = validate_point(latitude, longitude)
        radius = validate_radius(radius_km)
        radius_m = radius * 1000

        query = self.db.query(self.model).filter(
            *self.base_filters,
            *self._bounding_box_filters(lat, lng, radius)
        )

        if category and self.category_column is not None:
            query = query.filter(func.lower(self.category_column) == category.strip().lower())

        try:
            candidates = query.all()
        except SQLAlchemyError as e:
            logger.exception(f"Proximity query on {self.model.__tablename__} failed: {str(e)}")
            raise UpstreamServiceError(
                detail="Error finding nearby records",
                status_code=500
            )

        matches = []
        for record in candidates:
            distance_km = great_circle_km(
                lat, lng,
                getattr(record, self.latitude_column.key),
                getattr(record, self.longitude_column.key)
            )
            if distance_km * 1000 <= radius_m:
                matches.append(NearbyMatch(record=record, distance_km=distance_km))

        matches.sort(key=lambda m: (m.distance_km, m.record.id))

        logger.info(
            f"Proximity query on {self.model.__tablename__}: "
            f"{len(matches)}/{len(candidates)} within {radius} km of ({lat}, {lng})"
        )
        return matches
