"""
IRB Screen - Human-Subjects Research Pre-Screening

FastAPI application entry point. The service is stateless: every request
carries a full protocol snapshot and nothing is stored between calls.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from irbscreen import __version__
from irbscreen.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

RATE_LIMIT = f"{settings.rate_limit_requests}/{settings.rate_limit_window_seconds}seconds"

limiter = Limiter(key_func=get_remote_address, default_limits=[RATE_LIMIT])

# JSON-only API: nothing may frame, script or embed a response
_SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Cache-Control": "no-store",
}


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject protocol payloads larger than the configured limit."""

    async def dispatch(self, request: Request, call_next) -> Response:
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > settings.max_request_bytes:
            logger.warning(f"Rejected {declared}-byte protocol on {request.url.path}")
            return JSONResponse(
                status_code=413,
                content={
                    "error": "Protocol too large",
                    "message": f"Protocol snapshots are limited to {settings.max_request_bytes // 1024}KB",
                    "max_size_bytes": settings.max_request_bytes,
                },
            )
        return await call_next(request)


class ScreeningHeadersMiddleware(BaseHTTPMiddleware):
    """
    Tag each response with a request ID and timing, add security headers
    and log one line per screening call.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid4().hex[:12]
        started = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        response.headers.update(_SECURITY_HEADERS)
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        logger.info(
            f"{request.method} {request.url.path} [{request_id}] "
            f"-> {response.status_code} in {elapsed * 1000:.1f}ms"
        )
        return response


app = FastAPI(
    title="IRB Screen",
    description="Rules-based IRB review-level pre-screening for human-subjects research (45 CFR 46)",
    version=__version__,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(ScreeningHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Process-Time"],
    max_age=600,
)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Screening calls over the per-client limit get 429."""
    logger.warning(f"Rate limit hit by {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "message": (
                f"Screening is limited to {settings.rate_limit_requests} requests "
                f"per {settings.rate_limit_window_seconds} seconds per client."
            ),
            "limit": str(exc.detail),
        },
        headers={"Retry-After": str(settings.rate_limit_window_seconds)},
    )


@app.exception_handler(Exception)
async def screening_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures; production responses point to the IRB office instead."""
    logger.exception(f"Screening failed on {request.url.path}: {exc}")

    content = {
        "error": "Screening failed",
        "message": (
            f"The protocol could not be screened. Please contact {settings.irb_contact_email}."
            if settings.is_production
            else str(exc)
        ),
    }
    if not settings.is_production:
        content["type"] = type(exc).__name__
    return JSONResponse(status_code=500, content=content)


@app.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check. The service has no external dependencies."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "name": "IRB Screen",
        "description": f"IRB review-level pre-screening for {settings.institution_name}",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


from irbscreen.api.routes import review_router

app.include_router(review_router, prefix="/api/v1/review", tags=["review"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
