"""
Pydantic schemas for configuration, settings, the remote feed and API validation.
"""

from typing import List, Optional, Any
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


DEFAULT_FEED_URL = "https://eccdn.com.au/misc/challengedata.json"


class ProjectConfig(BaseModel):
    """Top-level project configuration."""
    name: str = Field(default="Restaurant Deals")
    version: str = Field(default="0.1.0")


class FeedConfig(BaseModel):
    """Remote restaurant/deal feed configuration."""
    url: str = Field(default=DEFAULT_FEED_URL)
    source: str = Field(default="feed", pattern="^(feed|database)$")
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=1, le=10)
    retry_delay_seconds: float = Field(default=0.5, ge=0)
    cache_ttl_seconds: float = Field(default=0.0, ge=0)  # 0 = refetch every query


class DatabaseConfig(BaseModel):
    """Database configuration."""
    url: str = Field(default="sqlite:///./restaurant_deals.db")
    echo: bool = Field(default=False)
    bootstrap_on_startup: bool = Field(default=False)


class ApiConfig(BaseModel):
    """HTTP API configuration."""
    cors_origins: List[str] = Field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ])


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR)$"
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


class AppConfig(BaseModel):
    """Complete application configuration loaded from params.yaml."""
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class Settings(BaseSettings):
    """Environment-based settings; override params.yaml when set."""
    deals_feed_url: Optional[str] = Field(default=None)
    database_url: Optional[str] = Field(default=None)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Remote feed DTOs. Values arrive loosely typed ("50", "true", ...).
class DealDTO(BaseModel):
    """Raw deal as it appears in the feed."""
    object_id: Optional[str] = Field(default=None, alias="objectId")
    discount: Optional[str] = None
    dine_in: Optional[str] = Field(default=None, alias="dineIn")
    lightning: Optional[str] = None
    qty_left: Optional[str] = Field(default=None, alias="qtyLeft")
    start_raw: Optional[str] = Field(default=None, alias="start")
    end_raw: Optional[str] = Field(default=None, alias="end")
    open_raw: Optional[str] = Field(default=None, alias="open")
    close_raw: Optional[str] = Field(default=None, alias="close")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("object_id", "discount", "dine_in", "lightning", "qty_left", mode="before")
    @classmethod
    def scalar_to_str(cls, v: Any):
        """Accept numbers and booleans as well as strings."""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v


class RestaurantDTO(BaseModel):
    """Raw restaurant as it appears in the feed."""
    object_id: Optional[str] = Field(default=None, alias="objectId")
    name: Optional[str] = None
    address1: Optional[str] = None
    suburb: Optional[str] = None
    image_link: Optional[str] = Field(default=None, alias="imageLink")
    open_raw: Optional[str] = Field(default=None, alias="open")
    close_raw: Optional[str] = Field(default=None, alias="close")
    cuisines: Optional[List[str]] = None
    deals: Optional[List[DealDTO]] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


class ChallengeDataDTO(BaseModel):
    """Top-level feed document."""
    restaurants: Optional[List[RestaurantDTO]] = None

    model_config = {"extra": "ignore"}


# API Request/Response Schemas
class SyncStatsResponse(BaseModel):
    """Result of saving the feed into the database."""
    restaurants_saved: int = 0
    restaurants_replaced: int = 0
    deals_saved: int = 0
    suburbs_created: int = 0
    cuisines_created: int = 0


class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    database_connected: bool
    data_source: str
    feed_url: str
    timestamp: str
