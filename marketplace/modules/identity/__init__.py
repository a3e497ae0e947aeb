# marketplace/modules/identity/__init__.py
"""
Identity Module - Role-scoped credential reset

One implementation for every self-service role (customer, vendor, delivery);
the role is a path parameter, not a separate code path:
- POST /{role}/forgot-password: issue a 30-minute, single-use token and mail the link
- PUT /{role}/reset-password/{token}: consume the token and set the new password

Architecture:
- router.py: Public reset endpoints
- service.py: Token issuance and consumption
- repository.py: Conditional writes on the reset fields
- schemas.py: Request/response models
"""

from .router import router
from .service import CredentialResetService
from .repository import IdentityRepository

__all__ = [
    "router",
    "CredentialResetService",
    "IdentityRepository"
]
