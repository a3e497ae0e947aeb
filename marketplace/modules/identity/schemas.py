# marketplace/modules/identity/schemas.py
import enum

from pydantic import BaseModel, EmailStr, Field

from marketplace.shared.schemas.common import BaseResponse


class ResetRole(str, enum.Enum):
    """Roles that can reset their own credential"""
    CUSTOMER = "customer"
    VENDOR = "vendor"
    DELIVERY = "delivery"


class ClientType(str, enum.Enum):
    WEB = "web"
    ANDROID = "android"
    IOS = "ios"


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email")
    client_type: ClientType = Field(ClientType.WEB, description="Client that will open the reset link")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "rider@localmarketplace.app",
                "client_type": "android"
            }
        }


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6, description="New password")


class PasswordResetResponse(BaseResponse):
    pass
