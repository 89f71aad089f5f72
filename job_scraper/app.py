from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from job_scraper.config import Settings, settings as default_settings
from job_scraper.rate_limit import build_limiter, RATE_LIMIT_MESSAGE
from job_scraper.schemas.job import HealthResponse
from job_scraper.services.scraper import LinkedInScraper
from job_scraper.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Resource-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"{app.state.settings.app_name} ready "
        f"(browser provider: {app.state.settings.browser_provider})"
    )
    yield


def create_app(settings: Optional[Settings] = None, scraper: Optional[LinkedInScraper] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file)

    # Refuse to start without the browser credentials the provider needs
    settings.check_browser_config()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.scraper = scraper or LinkedInScraper(settings)
    limiter = build_limiter(settings)
    app.state.limiter = limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from job_scraper.routes.api_linkedin import create_router as create_linkedin_router

    linkedin_router = create_linkedin_router(limiter, settings.rate_limit_scrape)
    app.include_router(linkedin_router, prefix="/api/linkedin", tags=["linkedin"])

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse()

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exceeded(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'}: {exc.detail}")
        return JSONResponse(status_code=429, content={"success": False, "error": RATE_LIMIT_MESSAGE})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        # Runs outside the http middleware stack, so headers are added here
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
            headers=SECURITY_HEADERS,
        )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    return app
