"""
Main service layer for restaurant deals.
Orchestrates data loading, active-deal lookup, peak computation and persistence.
"""

import logging
from datetime import datetime, time
from pathlib import Path
from typing import List, Optional, Dict, Any

import yaml

from .deal_filter import active_deals
from .domain import ChallengeData
from .integrations.feed_client import DataLoader, FeedClient
from .models import ActiveDealResponse, PeakTimeResponse
from .peak import PeakResult, peak_deal_time
from .repo import DatabaseRepository
from .schemas import AppConfig, Settings, SyncStatsResponse
from .util.time_utils import format_clock

logger = logging.getLogger(__name__)


def load_config(config_path: str) -> AppConfig:
    """Load configuration from YAML; a missing file yields the defaults."""
    path = Path(config_path)
    if not path.exists():
        logger.warning(f"Config file {config_path} not found, using defaults")
        return AppConfig()
    try:
        with open(path, 'r') as f:
            config_data = yaml.safe_load(f) or {}
        return AppConfig(**config_data)
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise


def apply_settings(config: AppConfig, settings: Settings) -> AppConfig:
    """Environment values win over params.yaml."""
    if settings.deals_feed_url:
        config.feed.url = settings.deals_feed_url
    if settings.database_url:
        config.database.url = settings.database_url
    return config


class DealService:
    """Main service for restaurant deal queries."""

    def __init__(
        self,
        config_path: str = "config/params.yaml",
        config: Optional[AppConfig] = None,
        loader: Optional[DataLoader] = None,
    ):
        """Initialize service with configuration."""
        if config is None:
            config = apply_settings(load_config(config_path), Settings())
        self.config = config

        # Setup logging
        self._setup_logging()

        # Initialize components
        self.repo = DatabaseRepository(self.config)
        self.loader = loader or DataLoader(
            FeedClient(self.config),
            cache_ttl_seconds=self.config.feed.cache_ttl_seconds,
        )

        # Initialize database
        self.repo.create_tables()

    def _setup_logging(self) -> None:
        """Setup logging configuration."""
        logging.basicConfig(
            level=getattr(logging, self.config.logging.level),
            format=self.config.logging.format
        )

    def apply_overrides(self, overrides: Dict[str, Any]) -> None:
        """Apply dot-path overrides onto loaded config (CLI > env > YAML)."""
        if not overrides:
            return
        def set_dot(obj, path, val):
            parts = path.split('.')
            cur = obj
            for p in parts[:-1]:
                cur = getattr(cur, p)
            setattr(cur, parts[-1], val)
        for k, v in overrides.items():
            try:
                set_dot(self.config, k, v)
            except AttributeError as e:
                logger.warning(f"Override failed for {k}: {e}")

    async def load_data(self) -> ChallengeData:
        """Load restaurants from the configured source."""
        if self.config.feed.source == "database":
            data = self.repo.load_challenge_data()
            logger.debug(f"Loaded {len(data.restaurants)} restaurants from database")
            return data
        return await self.loader.load()

    async def find_active_deals(self, t: time) -> List[ActiveDealResponse]:
        """
        Find deals live at clock time t.

        Args:
            t: Time of day to check

        Returns:
            Active deals with their restaurant, in feed order
        """
        data = await self.load_data()
        pairs = active_deals(data.restaurants, t)
        logger.info(f"{len(pairs)} active deals at {format_clock(t)}")
        return [ActiveDealResponse.from_pair(r, d) for r, d in pairs]

    async def calculate_peak_time(self) -> PeakResult:
        """Window of the day with the most simultaneously available deals."""
        data = await self.load_data()
        result = peak_deal_time(data.restaurants)
        logger.info(
            f"Peak {format_clock(result.start)}-{format_clock(result.end)} "
            f"with {result.count} deals"
        )
        return result

    async def peak_time_response(self) -> PeakTimeResponse:
        result = await self.calculate_peak_time()
        return PeakTimeResponse(
            peak_time_start=format_clock(result.start),
            peak_time_end=format_clock(result.end),
            count=result.count,
        )

    async def sync_database(self) -> SyncStatsResponse:
        """Fetch the feed and save it to the database."""
        data = await self.loader.load()
        stats = self.repo.save_challenge_data(data)
        logger.info(
            f"Sync completed: {stats.restaurants_saved} restaurants "
            f"({stats.restaurants_replaced} replaced), {stats.deals_saved} deals"
        )
        return stats

    def health_check(self) -> Dict[str, Any]:
        """Report service health."""
        db_ok = self.repo.health_check()
        return {
            "status": "healthy" if db_ok else "degraded",
            "database_connected": db_ok,
            "data_source": self.config.feed.source,
            "feed_url": self.config.feed.url,
            "timestamp": datetime.now().isoformat(),
        }

    async def close(self) -> None:
        """Release the feed HTTP client."""
        await self.loader.close()
