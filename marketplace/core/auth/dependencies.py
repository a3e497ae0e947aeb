from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List

from marketplace.config.database import get_db
from marketplace.core.exceptions import UnauthorizedError
from marketplace.shared.database.models import User, UserRole
from marketplace.core.auth.service import AuthService

security = HTTPBearer(auto_error=False)

class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the account behind the bearer token"""

    if credentials is None:
        raise AuthenticationError("Not authorized, no token")

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("user_id")
    if user_id is None:
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()

    if user is None:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User inactive")

    return user

def require_roles(allowed_roles: List[str]):
    """Factory for a dependency that only lets the given roles through"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise UnauthorizedError()
        return current_user
    return role_checker

# Role-specific dependencies
def get_customer_user(current_user: User = Depends(require_roles([UserRole.CUSTOMER.value]))):
    return current_user

def get_vendor_user(current_user: User = Depends(require_roles([UserRole.VENDOR.value]))):
    return current_user

def get_delivery_user(current_user: User = Depends(require_roles([UserRole.DELIVERY.value]))):
    return current_user
