"""
Customer Analytics Buddy
Centralized Configuration Management

Pydantic settings with environment variable support, validation, and type safety.
"""

from functools import lru_cache
from typing import Optional, List
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShopifySettings(BaseSettings):
    """Shopify Admin API Configuration"""
    
    model_config = SettingsConfigDict(env_prefix="SHOPIFY_")
    
    shop_domain: Optional[str] = Field(default=None, description="Default shop domain (my-store.myshopify.com)")
    access_token: Optional[SecretStr] = Field(default=None, description="Default Admin API access token")
    api_version: str = Field(default="2025-01", description="Admin API version")
    request_timeout: float = Field(default=30.0, description="Request timeout in seconds")
    
    @field_validator("shop_domain")
    @classmethod
    def normalize_domain(cls, v: Optional[str]) -> Optional[str]:
        """Strip protocol and trailing slashes"""
        if not v:
            return None
        return v.strip().replace("https://", "").replace("http://", "").rstrip("/")


class AggregationSettings(BaseSettings):
    """Metric Aggregation Configuration"""
    
    model_config = SettingsConfigDict(env_prefix="AGGREGATION_")
    
    page_size: int = Field(default=250, ge=1, le=250, description="Records requested per page")
    list_record_cap: int = Field(default=1000, ge=1, description="Record cap for drill-down lists")
    max_records: Optional[int] = Field(default=None, description="Record cap for metric counts (None fetches until exhaustion)")
    timezone: str = Field(default="UTC", description="IANA timezone used to resolve 'now'")
    default_range: str = Field(default="30days", description="Range token used when none is given")


class SecuritySettings(BaseSettings):
    """Security Configuration"""
    
    model_config = SettingsConfigDict(env_prefix="")
    
    cors_origins: List[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
        description="Allowed CORS origins"
    )


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""
    
    model_config = SettingsConfigDict(env_prefix="")
    
    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings
    
    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # Application
    app_name: str = Field(default="customer-analytics-buddy", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")
    
    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")
    
    # Version
    version: str = Field(default="1.0.0", description="Application version")
    
    # Subsystem configurations
    shopify: ShopifySettings = Field(default_factory=ShopifySettings)
    aggregation: AggregationSettings = Field(default_factory=AggregationSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    
    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()
    
    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"
    
    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.
    
    Uses LRU cache to ensure settings are only loaded once.
    
    Returns:
        Settings: Application settings instance
    """
    return Settings()
