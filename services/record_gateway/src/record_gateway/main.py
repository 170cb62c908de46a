import argparse
from contextlib import asynccontextmanager
import logging
from typing import List, Optional

import uvicorn
from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from gateway_common.db import RecordStore
from gateway_common.errors import GatewayError, StoreError, ValidationError
from gateway_common.models import (
    PydanticAthlete,
    PydanticAthleteStats,
    PydanticMap,
    PydanticSession,
    PydanticToken,
    StoredActivity,
)
from record_gateway.config import Settings, get_settings
from record_gateway.db import (
    ActivityRepository,
    AthleteRepository,
    MapRepository,
    SessionRepository,
    TokenRepository,
    create_store,
    get_store,
)
from record_gateway.models import (
    AccessTokenResponse,
    ActivityPayload,
    AthleteStatsUpdateRequest,
    AthleteUpdateRequest,
    AuthIdResponse,
    MapCreateRequest,
    RefreshTokenResponse,
    SessionCreateRequest,
    SessionUserResponse,
    TokenUpsertRequest,
)

# Configure logging
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

async def get_activity_repository(store: RecordStore = Depends(get_store)) -> ActivityRepository:
    return ActivityRepository(store)

async def get_token_repository(store: RecordStore = Depends(get_store)) -> TokenRepository:
    return TokenRepository(store)

async def get_athlete_repository(store: RecordStore = Depends(get_store)) -> AthleteRepository:
    return AthleteRepository(store)

async def get_session_repository(store: RecordStore = Depends(get_store)) -> SessionRepository:
    return SessionRepository(store)

async def get_map_repository(store: RecordStore = Depends(get_store)) -> MapRepository:
    return MapRepository(store)

def require_param(value: str, name: str) -> str:
    """Reject blank path parameters before they reach the store."""
    value = value.strip()
    if not value:
        raise ValidationError(f"{name} is required")
    return value

def describe_validation_errors(exc: RequestValidationError) -> str:
    """Render FastAPI validation errors as a single message."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part not in ("body", "path", "query"))
        if error["type"] == "missing":
            messages.append(f"{field or 'request body'} is required")
        elif field:
            messages.append(f"{field}: {error['msg']}")
        else:
            messages.append(error["msg"])
    return "; ".join(messages)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application."""
    # Startup
    logger.info("Starting record gateway service...")
    yield
    # Shutdown
    if app.state.owns_store:
        await app.state.store.dispose()
        logger.info("Closed store connections")
    logger.info("Shutting down record gateway service...")

def create_app(store: Optional[RecordStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # Initialize FastAPI app
    app = FastAPI(title="Record Gateway", lifespan=lifespan)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add Prometheus metrics endpoint
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    # The app only disposes a store it created itself
    app.state.owns_store = store is None
    if store is None:
        store = create_store(settings)
    app.state.store = store

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = describe_validation_errors(exc)
        logger.warning(f"{request.method} {request.url.path} rejected: {message}")
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"{request.method} {request.url.path} failed unexpectedly: {str(exc)}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    async def health_check():
        try:
            await app.state.store.ping()
            return {"status": "healthy"}
        except StoreError as e:
            logger.error(f"Health check failed: {e.message}")
            return JSONResponse(status_code=503, content={"error": "Service unhealthy"})

    @app.get("/activities", response_model=List[StoredActivity])
    async def get_activities(
        repository: ActivityRepository = Depends(get_activity_repository)
    ) -> List[StoredActivity]:
        """Get all activities."""
        logger.info("Fetching all activities")
        return await repository.get_activities()

    @app.get("/activities/{activity_id}", response_model=StoredActivity)
    async def get_activity(
        activity_id: int,
        repository: ActivityRepository = Depends(get_activity_repository)
    ) -> StoredActivity:
        """Get an activity by ID."""
        logger.info(f"Fetching activity by ID: {activity_id}")
        return await repository.get_activity(activity_id)

    @app.post("/activities", response_model=StoredActivity, status_code=201)
    async def create_activity(
        activity: ActivityPayload,
        repository: ActivityRepository = Depends(get_activity_repository)
    ) -> StoredActivity:
        """Normalize and store a new activity."""
        logger.info(f"Creating new activity: {activity.name}")
        return await repository.create_activity(activity.model_dump(exclude_unset=True))

    @app.post("/tokens", response_model=PydanticToken)
    async def upsert_token(
        request: TokenUpsertRequest,
        repository: TokenRepository = Depends(get_token_repository)
    ) -> PydanticToken:
        """Create or replace the token pair for a user."""
        logger.info(f"Upserting tokens for user: {request.user_id}")
        return await repository.upsert_token(
            request.user_id,
            request.refresh_token,
            request.access_token,
            request.expires_at,
        )

    @app.get("/tokens/{user_id}", response_model=AccessTokenResponse)
    async def get_access_token(
        user_id: str,
        repository: TokenRepository = Depends(get_token_repository)
    ) -> AccessTokenResponse:
        logger.info(f"Fetching access token for user: {user_id}")
        user_id = require_param(user_id, "user_id")
        return AccessTokenResponse.model_validate(await repository.get_access_token(user_id))

    @app.get("/refresh-tokens/{user_id}", response_model=RefreshTokenResponse)
    async def get_refresh_token(
        user_id: str,
        repository: TokenRepository = Depends(get_token_repository)
    ) -> RefreshTokenResponse:
        logger.info(f"Fetching refresh token for user: {user_id}")
        user_id = require_param(user_id, "user_id")
        return RefreshTokenResponse.model_validate(await repository.get_refresh_token(user_id))

    @app.post("/athletes/{user_id}", response_model=List[PydanticAthlete])
    async def update_athlete(
        user_id: str,
        athlete: AthleteUpdateRequest = Body(...),
        repository: AthleteRepository = Depends(get_athlete_repository)
    ) -> List[PydanticAthlete]:
        """Apply a partial update to an athlete profile."""
        logger.info(f"Updating athlete: {user_id}")
        user_id = require_param(user_id, "user_id")
        athlete_data = athlete.model_dump(exclude_unset=True, exclude={"id", "user_id"})
        if not athlete_data:
            raise ValidationError("Athlete ID and update data are required")
        return await repository.update_athlete(user_id, athlete_data)

    @app.post("/athletes/{user_id}/stats", response_model=List[PydanticAthleteStats])
    async def update_athlete_stats(
        user_id: str,
        stats: AthleteStatsUpdateRequest = Body(...),
        repository: AthleteRepository = Depends(get_athlete_repository)
    ) -> List[PydanticAthleteStats]:
        """Apply a partial update to an athlete's stats."""
        logger.info(f"Updating athlete stats: {user_id}")
        user_id = require_param(user_id, "user_id")
        stats_data = stats.model_dump(exclude_unset=True, exclude={"id", "user_id"})
        if not stats_data:
            raise ValidationError("Athlete ID and stats data are required")
        return await repository.update_athlete_stats(user_id, stats_data)

    @app.post("/maps", response_model=PydanticMap, status_code=201)
    async def create_map(
        map_entry: MapCreateRequest = Body(...),
        repository: MapRepository = Depends(get_map_repository)
    ) -> PydanticMap:
        logger.info(f"Creating new map entry: {map_entry.map_id}")
        map_data = map_entry.model_dump(exclude_unset=True)
        if not map_data:
            raise ValidationError("Map data is required")
        return await repository.create_map(map_data)

    @app.post("/sessions", response_model=PydanticSession, status_code=201)
    async def create_session(
        request: SessionCreateRequest,
        repository: SessionRepository = Depends(get_session_repository)
    ) -> PydanticSession:
        """Map a session to a user and its auth identity."""
        logger.info(f"Creating new session mapping for user: {request.user_id}")
        return await repository.create_session(request.session_id, request.user_id, request.auth_id)

    @app.get("/sessions/{session_id}", response_model=SessionUserResponse)
    async def get_session_user(
        session_id: str,
        repository: SessionRepository = Depends(get_session_repository)
    ) -> SessionUserResponse:
        logger.info(f"Fetching user for session: {session_id}")
        session_id = require_param(session_id, "session_id")
        return SessionUserResponse.model_validate(await repository.get_session_user(session_id))

    @app.get("/auth/{user_id}", response_model=AuthIdResponse)
    async def get_auth_id(
        user_id: str,
        repository: SessionRepository = Depends(get_session_repository)
    ) -> AuthIdResponse:
        logger.info(f"Fetching auth ID for user: {user_id}")
        user_id = require_param(user_id, "user_id")
        return AuthIdResponse.model_validate(await repository.get_auth_id(user_id))

    return app

def main():
    """Main entry point for the CLI."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the record gateway API")
    parser.add_argument("--host", type=str, default=settings.HOST, help="Host to run the server on")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Port to run the server on")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--log-level", type=str, default="info", help="Logging level")

    args = parser.parse_args()

    uvicorn.run(
        "record_gateway.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )

if __name__ == "__main__":
    main()
