# marketplace/api/v1/router.py
from fastapi import APIRouter
from marketplace.config.settings import settings
from marketplace.api.v1.auth import router as auth_router
from marketplace.modules.products import router as products_router
from marketplace.modules.orders import router as orders_router
from marketplace.modules.delivery import router as delivery_router
from marketplace.modules.vendor import router as vendor_router
from marketplace.modules.geocode import router as geocode_router
from marketplace.modules.identity import router as identity_router


# Main API v1 router
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(
    products_router,
    prefix="/products",
    tags=["Products"]
)

api_router.include_router(
    orders_router,
    prefix="/orders",
    tags=["Orders"]
)

api_router.include_router(
    delivery_router,
    prefix="/delivery",
    tags=["Delivery Operations"]
)

api_router.include_router(
    vendor_router,
    prefix="/vendor",
    tags=["Vendor Operations"]
)

api_router.include_router(
    geocode_router,
    prefix="/geocode",
    tags=["Geocoding"]
)

# Role-scoped password reset: /{role}/forgot-password, /{role}/reset-password/{token}
api_router.include_router(identity_router, tags=["Password Reset"])

# ==================== ROOT ENDPOINTS ====================

@api_router.get("/")
async def api_root():
    return {
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "products": "/api/v1/products",
            "orders": "/api/v1/orders",
            "delivery": "/api/v1/delivery",
            "vendor": "/api/v1/vendor",
            "geocode": "/api/v1/geocode",
            "password_reset": "/api/v1/{role}/forgot-password"
        }
    }

@api_router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "database": "sqlite" if settings.is_sqlite else "postgresql"
    }
