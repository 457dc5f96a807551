"""FastAPI application for TalentX."""
import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import Settings, settings
from talentx.api.models import ErrorResponse
from talentx.api.routes import all_routers
from talentx.engagement.exceptions import EngagementError
from talentx.logging_config import setup_logging
from talentx.matching.scorer import get_scorer
from talentx.persistence.database import (
    build_engine,
    create_read_session_factory,
    create_session_factory,
    init_db,
)

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to use (defaults to the environment)
        session_factory: Store sessions; built from config.database_url if omitted.
            Read-only endpoints use sessions on the same engine that do not
            take the SQLite write lock.
    """
    config = config or settings
    setup_logging(config.log_level, config.log_file)

    if session_factory is None:
        engine = build_engine(config.database_url)
        init_db(engine)
        session_factory = create_session_factory(engine)

    app = FastAPI(
        title="TalentX API",
        description="Matching and engagement between employers and talents",
        version="0.1.0",
    )
    app.state.settings = config
    app.state.session_factory = session_factory
    app.state.read_session_factory = create_read_session_factory(session_factory.kw["bind"])
    app.state.scorer = get_scorer(config)

    setup_exception_handlers(app)

    for router in all_routers:
        app.include_router(router)

    logger.info("TalentX API ready (scoring engine: %s)", type(app.state.scorer).__name__)
    return app


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers."""

    @app.exception_handler(EngagementError)
    async def engagement_error_handler(request: Request, exc: EngagementError):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc), kind=exc.kind).model_dump(exclude_none=True),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        correlation_id = str(uuid.uuid4())
        logger.error(
            "Unhandled error [%s] on %s %s",
            correlation_id,
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                correlation_id=correlation_id,
            ).model_dump(exclude_none=True),
        )
