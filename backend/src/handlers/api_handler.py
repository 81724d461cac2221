"""Main FastAPI application handler for Lambda deployment."""

import logging
import os
import time
from datetime import UTC, datetime
from typing import Any

import boto3
from botocore.exceptions import ClientError
from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from mangum import Mangum
from pydantic import ValidationError

from models.gear import GearPreferences, Ownership, SkillLevel, Terrain
from models.ski_data import SkiData
from services.conditions_service import analyze_conditions
from services.domain_scoring_service import DomainScoringService
from services.gear_service import recommend_gear
from services.ingestion_service import (
    AuthenticationError,
    IngestionService,
    ProcessingError,
)
from services.insight_service import generate_insights, overall_condition
from services.normalisation_service import PayloadValidationError
from services.sector_weather_resolver import SectorWeatherResolver
from services.snapshot_store import (
    LocalSnapshotStore,
    S3SnapshotStore,
    SnapshotNotFoundError,
)
from utils.cache import CACHE_CONTROL_PUBLIC, cached_snapshot, clear_all_caches
from utils.labels import avalanche_risk_label, snow_quality_label

logger = logging.getLogger(__name__)

DEFAULT_SECRET = "change-me-in-production"

# Initialize FastAPI app
app = FastAPI(
    title="Chamonix Ski Conditions API",
    description="Lift, piste and weather conditions with daily recommendations",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log slow and failed API requests with timing."""
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000

    path = request.url.path
    if duration_ms > 1000:
        logger.warning(
            "[SLOW] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 500:
        logger.error(
            "[ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 400:
        logger.info(
            "[CLIENT_ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )

    return response


# Lazy-initialized clients and services
_s3_client = None
_snapshot_store = None
_ingestion_service = None
_scoring_service = None

# Security scheme for bearer token authentication
security = HTTPBearer(auto_error=False)


def reset_services():
    """Reset all lazy-initialized services. Useful for testing."""
    global _s3_client, _snapshot_store, _ingestion_service, _scoring_service
    _s3_client = None
    _snapshot_store = None
    _ingestion_service = None
    _scoring_service = None
    clear_all_caches()


def get_s3_client():
    """Get or create S3 client (lazy init)."""
    global _s3_client
    if _s3_client is None:
        region = os.environ.get("AWS_DEFAULT_REGION", "eu-west-3")
        _s3_client = boto3.client("s3", region_name=region)
    return _s3_client


def get_snapshot_store():
    """S3 store when SNAPSHOT_BUCKET is set, local files otherwise."""
    global _snapshot_store
    if _snapshot_store is None:
        bucket = os.environ.get("SNAPSHOT_BUCKET")
        if bucket:
            _snapshot_store = S3SnapshotStore(bucket, get_s3_client())
        else:
            _snapshot_store = LocalSnapshotStore(
                data_dir=os.environ.get("DATA_DIR", "data"),
                public_dir=os.environ.get("PUBLIC_DIR", "public"),
            )
    return _snapshot_store


def get_ingestion_service():
    global _ingestion_service
    if _ingestion_service is None:
        secret = os.environ.get("DATA_UPDATE_SECRET", DEFAULT_SECRET)
        if secret == DEFAULT_SECRET:
            logger.warning("DATA_UPDATE_SECRET not set, using the default secret")
        _ingestion_service = IngestionService(secret, get_snapshot_store())
    return _ingestion_service


def get_scoring_service():
    global _scoring_service
    if _scoring_service is None:
        _scoring_service = DomainScoringService(SectorWeatherResolver())
    return _scoring_service


@cached_snapshot
def _load_snapshot() -> SkiData:
    return SkiData.model_validate(get_snapshot_store().read_published())


def get_snapshot() -> SkiData:
    """Load the published snapshot, mapping absence to 503."""
    try:
        return _load_snapshot()
    except SnapshotNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No conditions data has been published yet",
        )
    except ValidationError as e:
        logger.error(f"Published snapshot is malformed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Published snapshot is malformed",
        )


# MARK: - Health Check


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": "1.0.0",
    }


# MARK: - Ingestion


@app.post("/api/update-data")
async def update_data(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),  # noqa: B008
):
    """Receive a scraped snapshot, store it raw and normalised."""
    service = get_ingestion_service()
    token = credentials.credentials if credentials else None

    try:
        service.verify_token(token)
    except AuthenticationError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Unauthorized"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = await request.json()
    except ValueError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Request body must be JSON"},
        )

    try:
        result = service.ingest(token, payload)
    except PayloadValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)}
        )
    except ProcessingError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to process data"},
        )

    clear_all_caches()
    return result.to_dict()


@app.get("/api/update-data")
async def update_data_status():
    """Liveness check describing the ingestion contract."""
    return {
        "status": "ok",
        "endpoint": "POST /api/update-data",
        "description": "Send scraped Chamonix ski data as JSON body with Bearer token",
    }


# MARK: - Conditions Endpoints


@app.get("/api/v1/snapshot", response_model=SkiData)
async def get_published_snapshot(response: Response):
    """The normalised snapshot, as published."""
    response.headers["Cache-Control"] = CACHE_CONTROL_PUBLIC
    return get_snapshot()


@app.get("/api/v1/recommendation")
async def get_recommendation(response: Response):
    """Today's best sector and two alternatives."""
    data = get_snapshot()
    recommendation = get_scoring_service().recommend(
        data.lifts, data.pistes, data.weather
    )
    response.headers["Cache-Control"] = CACHE_CONTROL_PUBLIC
    result = recommendation.to_dict()
    result["avalanche_risk_label"] = avalanche_risk_label(
        recommendation.max_avalanche_risk or None
    )
    return result


@app.get("/api/v1/sectors")
async def get_sectors(response: Response):
    """All sectors, most open lifts first."""
    data = get_snapshot()
    summaries = get_scoring_service().summarize_sectors(
        data.lifts, data.pistes, data.weather
    )
    response.headers["Cache-Control"] = CACHE_CONTROL_PUBLIC
    sectors = []
    for summary in summaries:
        item = summary.to_dict()
        if summary.weather:
            item["snow_quality_label"] = snow_quality_label(summary.weather.snow_quality)
        sectors.append(item)
    return {
        "calculated_summary": data.calculated_summary.model_dump(),
        "sectors": sectors,
    }


@app.get("/api/v1/insights")
async def get_insights(response: Response):
    """Prioritized condition insights and the overall verdict."""
    data = get_snapshot()
    conditions = analyze_conditions(data.weather)
    response.headers["Cache-Control"] = CACHE_CONTROL_PUBLIC
    return {
        "overall": overall_condition(data.weather, conditions).model_dump(),
        "insights": [
            insight.model_dump()
            for insight in generate_insights(data.weather, conditions)
        ],
    }


@app.get("/api/v1/gear")
async def get_gear(
    terrain: Terrain = Query(Terrain.MIXED),  # noqa: B008
    skill: SkillLevel = Query(SkillLevel.INTERMEDIATE),  # noqa: B008
    ownership: Ownership = Query(Ownership.RENTAL),  # noqa: B008
    height_cm: int = Query(175, ge=100, le=220),
    target_altitude_m: int | None = Query(None, ge=0, le=5000),
) -> dict[str, Any]:
    """Ski recommendation for today's conditions and the skier's preferences."""
    data = get_snapshot()
    preferences = GearPreferences(
        terrain=terrain,
        skill=skill,
        ownership=ownership,
        height_cm=height_cm,
        target_altitude_m=target_altitude_m,
    )
    recommendation = recommend_gear(analyze_conditions(data.weather), preferences)
    if recommendation is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No weather data available for gear sizing",
        )
    return {
        **recommendation.model_dump(),
        "waist_width": recommendation.waist_width,
        "length": recommendation.length,
    }


# MARK: - Error Handlers


@app.exception_handler(ClientError)
async def aws_client_error_handler(request, exc: ClientError):
    """Handle AWS client errors."""
    error_message = exc.response["Error"]["Message"]
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"AWS error: {error_message}"},
    )


# MARK: - Lambda Handler

api_handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
