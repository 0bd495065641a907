"""
FastAPI Web Application - GOGLOBAL Market Analysis API
======================================================

JSON API behind the market expansion report frontend.

ENDPOINTS:
    GET  /              - service information
    GET  /api/health    - health check
    POST /api/analyze   - market analysis for every target market
    POST /api/test      - echo endpoint (development only)
"""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from goglobal.application import MarketAnalysisOrchestrator, create_provider, validate_analysis_request
from goglobal.domain import (
    AnalysisProvider,
    ConfigurationError,
    MarketAnalysisError,
    RateLimitExceededError,
    utc_timestamp,
)
from goglobal.infrastructure.config import Settings, get_settings
from goglobal.infrastructure.ratelimit import InMemoryRateLimitStore, RateLimiter, RateLimitStore

logger = logging.getLogger(__name__)


def _error_body(message: str, **extra) -> dict:
    return {"success": False, "error": message, "timestamp": utc_timestamp(), **extra}


def _internal_error(exc: Exception, settings: Settings) -> JSONResponse:
    """500 response; detail only in development."""
    if settings.server.is_development:
        body = _error_body(str(exc) or type(exc).__name__, stack="".join(traceback.format_exception(exc)))
    else:
        body = _error_body("Internal server error")
    return JSONResponse(body, status_code=500)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[AnalysisProvider] = None,
    rate_limit_store: Optional[RateLimitStore] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: defaults to get_settings().
        provider: analysis strategy; defaults to the configured one.
        rate_limit_store: defaults to a process-local in-memory store.
    """
    settings = settings or get_settings()

    # ── Lifespan ───────────────────────────────────────────────────
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        errors = settings.errors()
        if errors:
            for issue in errors:
                logger.error(issue)
            raise ConfigurationError("; ".join(errors))
        for issue in settings.validate():
            logger.warning(issue)
        logger.info(f"{settings.service_name} ready (provider: {app.state.orchestrator.provider.name})")
        yield

    app = FastAPI(
        title=settings.service_name,
        description="Market entry feasibility analysis for export products",
        version=settings.version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.server.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.orchestrator = MarketAnalysisOrchestrator(
        provider or create_provider(settings),
        delay_seconds=settings.analysis.market_delay_seconds,
    )
    app.state.rate_limiter = RateLimiter(
        rate_limit_store or InMemoryRateLimitStore(),
        limit=settings.server.max_requests_per_minute,
        window_seconds=settings.server.rate_limit_window_seconds,
    )

    # ── Middleware & error handlers ────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                _error_body("Endpoint not found", path=request.url.path), status_code=404
            )
        return JSONResponse(_error_body(str(exc.detail)), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _internal_error(exc, settings)

    # ── Routes ─────────────────────────────────────────────────────

    @app.get("/")
    async def service_info():
        return {
            "service": settings.service_name,
            "version": settings.version,
            "status": "running",
            "endpoints": {
                "health": "/api/health",
                "analyze": "POST /api/analyze",
            },
            "timestamp": utc_timestamp(),
        }

    @app.get("/api/health")
    async def health():
        return {
            "status": "ok",
            "timestamp": utc_timestamp(),
            "service": settings.service_name,
        }

    @app.post("/api/analyze")
    async def analyze(request: Request):
        limiter: RateLimiter = request.app.state.rate_limiter
        orchestrator: MarketAnalysisOrchestrator = request.app.state.orchestrator
        client_ip = _client_ip(request)

        try:
            if not limiter.allow(client_ip):
                raise RateLimitExceededError(client_ip, limiter.retry_after(client_ip))

            try:
                body = await request.json()
            except ValueError:
                body = None

            product = validate_analysis_request(body)
            logger.info(
                f"Analysis request for: product={product.product_name}, "
                f"markets={list(product.target_markets)}, ip={client_ip}"
            )

            results = await orchestrator.analyze_product(product)
            return {
                "success": True,
                "data": {"markets": {market: r.to_wire() for market, r in results.items()}},
                "timestamp": utc_timestamp(),
            }

        except RateLimitExceededError as e:
            logger.warning(f"Rate limit exceeded for {e.client_id}")
            return JSONResponse(
                _error_body(str(e)),
                status_code=e.status_code,
                headers={"Retry-After": str(e.retry_after)},
            )

        except MarketAnalysisError as e:
            logger.info(f"Rejected analysis request from {client_ip}: {e}")
            return JSONResponse(_error_body(str(e)), status_code=e.status_code)

        except Exception as e:
            logger.exception(f"Analysis error: {e}")
            return _internal_error(e, settings)

    if settings.server.is_development:

        @app.post("/api/test")
        async def echo(request: Request):
            try:
                received = await request.json()
            except ValueError:
                received = None
            return {
                "success": True,
                "message": "Test endpoint working",
                "receivedData": received,
                "timestamp": utc_timestamp(),
            }

    return app


app = create_app()
