# marketplace/modules/geocode/__init__.py
"""Geocode Module - Address and coordinate lookups backed by the geocoding provider"""

from .router import router

__all__ = ["router"]
