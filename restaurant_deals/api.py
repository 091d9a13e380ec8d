"""
FastAPI application for restaurant deals.
Provides REST API endpoints for active deals, the peak deal window and feed sync.
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .integrations.feed_client import FeedError
from .mapper import MalformedFeedValue
from .models import ActiveDealListResponse, PeakTimeResponse
from .schemas import AppConfig, HealthResponse, SyncStatsResponse
from .service import DealService
from .util.time_utils import InvalidTimeFormat, parse_clock
from .windows import MalformedWindowError, MissingBusinessHoursError


logger = logging.getLogger(__name__)

# Global service instance
service: Optional[DealService] = None


def get_service() -> DealService:
    """Dependency to get service instance."""
    global service
    if service is None:
        service = DealService()
    return service


def _data_error(e: Exception) -> HTTPException:
    """Translate a source-data problem into a client-facing error."""
    if isinstance(e, FeedError):
        return HTTPException(
            status_code=502,
            detail={"error": "feed_unavailable", "message": str(e)}
        )
    return HTTPException(
        status_code=422,
        detail={"error": "invalid_source_data", "message": str(e)}
    )


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    config = config or AppConfig()

    app = FastAPI(
        title="Restaurant Deals",
        description="Active restaurant deals by time of day and the peak deal window",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup."""
        svc = get_service()
        if svc.config.database.bootstrap_on_startup:
            try:
                await svc.sync_database()
            except (FeedError, ValueError) as e:
                logger.error(f"Database bootstrap failed: {e}")
        logger.info("Restaurant Deals API started")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Clean up on shutdown."""
        if service:
            await service.close()
        logger.info("Restaurant Deals API stopped")

    @app.get("/health", response_model=HealthResponse)
    async def health_check(svc: DealService = Depends(get_service)):
        """Health check endpoint."""
        health_data = svc.health_check()
        return HealthResponse(
            status=health_data["status"],
            version=__version__,
            database_connected=health_data["database_connected"],
            data_source=health_data["data_source"],
            feed_url=health_data["feed_url"],
            timestamp=health_data["timestamp"]
        )

    @app.get("/api/deals", response_model=ActiveDealListResponse)
    async def get_active_deals(
        time_of_day: str = Query(..., alias="timeOfDay"),
        svc: DealService = Depends(get_service)
    ):
        """
        List deals available at a time of day, e.g. ?timeOfDay=3:00pm.
        Only deals of restaurants open at that time are returned.
        """
        try:
            t = parse_clock(time_of_day)
            if t is None:
                raise InvalidTimeFormat("timeOfDay must not be blank")
        except InvalidTimeFormat as e:
            raise HTTPException(
                status_code=400,
                detail={"error": "invalid_time_format", "message": str(e)}
            )

        try:
            deals = await svc.find_active_deals(t)
            return ActiveDealListResponse(deals=deals)

        except (FeedError, MalformedFeedValue, MalformedWindowError, MissingBusinessHoursError,
                InvalidTimeFormat) as e:
            logger.error(f"Active deal lookup failed: {e}")
            raise _data_error(e)
        except Exception as e:
            logger.error(f"Active deal lookup failed: {e}")
            raise HTTPException(
                status_code=500,
                detail={"error": "internal_error", "message": "Unexpected server error"}
            )

    @app.get("/api/deals/peak-time", response_model=PeakTimeResponse)
    async def get_peak_time(svc: DealService = Depends(get_service)):
        """Window of the day with the most deals available at once."""
        try:
            return await svc.peak_time_response()

        except (FeedError, MalformedFeedValue, MalformedWindowError, InvalidTimeFormat) as e:
            logger.error(f"Peak time calculation failed: {e}")
            raise _data_error(e)
        except Exception as e:
            logger.error(f"Peak time calculation failed: {e}")
            raise HTTPException(
                status_code=500,
                detail={"error": "internal_error", "message": "Unexpected server error"}
            )

    @app.post("/api/admin/sync", response_model=SyncStatsResponse)
    async def sync_database(svc: DealService = Depends(get_service)):
        """Save the current feed into the database."""
        try:
            return await svc.sync_database()

        except (FeedError, MalformedFeedValue, MalformedWindowError, InvalidTimeFormat) as e:
            logger.error(f"Sync failed: {e}")
            raise _data_error(e)
        except Exception as e:
            logger.error(f"Sync failed: {e}")
            raise HTTPException(
                status_code=500,
                detail={"error": "internal_error", "message": "Unexpected server error"}
            )

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
