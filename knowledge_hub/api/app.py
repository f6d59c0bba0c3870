"""
FastAPI application for the knowledge hub.
"""

import time
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from knowledge_hub.config import config
from knowledge_hub.api.routes import router
from knowledge_hub.channels import CHANNELS, validate_channels
from knowledge_hub.utils.error_handling import register_exception_handlers
from knowledge_hub.utils.logger import logging
from knowledge_hub.utils.rate_limit import RateLimiter, client_key

# Scheduled/ad-hoc triggers are gated by their secrets instead
RATE_LIMIT_EXEMPT_PREFIX = "/api/cron/"

# FastAPI application
app = FastAPI(
    title=config.APP_NAME,
    version=config.APP_VERSION,
    description="Ingests YouTube transcripts into a markdown library and summarizes them",
)

app.state.rate_limiter = RateLimiter(config.RATE_LIMIT_REQUESTS, config.RATE_LIMIT_WINDOW_SECONDS)
register_exception_handlers(app)


@app.on_event("startup")
async def startup_event():
    """Check the channel directory and storage root on startup."""
    config.initialize()
    channels = validate_channels(CHANNELS)
    enabled = [c for c in channels if c.enabled]
    logging.info(f"Channel directory loaded: {len(enabled)} of {len(channels)} channels enabled")
    logging.info(f"Transcript storage root: {config.TRANSCRIPTS_DIR}")


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Reject API callers that exceed the per-path request window."""
    path = request.url.path
    if path.startswith("/api/") and not path.startswith(RATE_LIMIT_EXEMPT_PREFIX):
        limiter: RateLimiter = request.app.state.rate_limiter
        if not limiter.check(client_key(request)):
            logging.warning(f"Rate limit exceeded for {client_key(request)}")
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Rate limit exceeded",
                    "message": f"Maximum {limiter.max_requests} requests per {limiter.window_seconds:g} seconds allowed",
                },
            )
    return await call_next(request)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Middleware to add processing time header to responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


# Include API router
app.include_router(router)


# Root
@app.get("/")
async def root():
    """Root endpoint returning basic API information."""
    return {
        "name": config.APP_NAME,
        "version": config.APP_VERSION,
        "description": "AI Knowledge Hub API",
    }
