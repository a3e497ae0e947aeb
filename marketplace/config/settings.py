# marketplace/config/settings.py
from pydantic_settings import BaseSettings
from typing import List, Optional
import os

class Settings(BaseSettings):
    # App Info
    app_name: str = "Local Marketplace API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database - PostgreSQL in production, SQLite for development
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./marketplace.db")

    # Security
    secret_key: str = os.getenv("SECRET_KEY", "change-in-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 10080
    reset_token_expire_minutes: int = 30

    # Password reset links, one base URL per client type
    frontend_url_web: str = "http://localhost:3000"
    frontend_url_android: str = "marketplace://app"
    frontend_url_ios: str = "marketplace://app"

    # External Services
    sendgrid_api_key: Optional[str] = None
    sendgrid_base_url: str = "https://api.sendgrid.com"
    mail_from: str = "no-reply@localmarketplace.app"

    google_maps_api_key: Optional[str] = None
    geocoding_base_url: str = "https://maps.googleapis.com/maps/api/geocode/json"

    http_timeout_seconds: float = 10.0

    # Browser origins allowed by CORS
    cors_origins: List[str] = ["*"]

    # Geospatial discovery
    default_search_radius_km: float = 10.0
    default_delivery_radius_km: float = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", 8000))

    @property
    def database_url_with_ssl(self) -> str:
        """Add SSL for remote PostgreSQL connections"""
        if self.database_url.startswith("postgresql") and "localhost" not in self.database_url:
            if "sslmode=" not in self.database_url:
                separator = "&" if "?" in self.database_url else "?"
                return f"{self.database_url}{separator}sslmode=require"
        return self.database_url

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def reset_base_url(self, client_type: str) -> str:
        """Reset-link base URL for the given client type"""
        return {
            "android": self.frontend_url_android,
            "ios": self.frontend_url_ios,
        }.get(client_type, self.frontend_url_web)

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'

settings = Settings()
