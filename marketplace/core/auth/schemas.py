from pydantic import BaseModel, Field
from typing import Optional

class UserLogin(BaseModel):
    """Login payload"""
    email: str = Field(..., description="Account email")
    password: str = Field(..., min_length=6, description="Account password")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "rider@localmarketplace.app",
                "password": "rider123"
            }
        }

class UserResponse(BaseModel):
    """Public account information"""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    is_active: bool

    store_name: Optional[str] = None
    vehicle_type: Optional[str] = None
    vehicle_number: Optional[str] = None

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Ana Rider",
                "email": "rider@localmarketplace.app",
                "phone": "+1 555 0100",
                "role": "delivery",
                "is_active": True,
                "vehicle_type": "scooter"
            }
        }

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
