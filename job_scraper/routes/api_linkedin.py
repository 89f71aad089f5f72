import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter

from job_scraper.exceptions import ScraperError, ValidationError
from job_scraper.schemas.job import ScrapeRequest, ScrapeResponse
from job_scraper.services.scraper import LinkedInScraper

logger = logging.getLogger(__name__)


def get_scraper(request: Request) -> LinkedInScraper:
    """FastAPI dependency returning the scraper built by create_app."""
    return request.app.state.scraper


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ScrapeResponse(success=False, error=message).to_payload(),
    )


def create_router(limiter: Limiter, rate_limit: str) -> APIRouter:
    router = APIRouter()

    @router.post("/scrape")
    @limiter.limit(rate_limit)
    async def scrape_job(request: Request, scraper: LinkedInScraper = Depends(get_scraper)):
        try:
            body = await request.json()
        except ValueError:
            body = None
        url = ScrapeRequest.model_validate(body).url if isinstance(body, dict) else None

        if not url or not isinstance(url, str):
            return _error(400, "URL is required and must be a string")

        try:
            record = await scraper.scrape_job_data(url)
        except ValidationError as e:
            return _error(400, str(e))
        except ScraperError as e:
            return _error(500, str(e))

        return JSONResponse(
            status_code=200,
            content=ScrapeResponse(success=True, data=record.to_payload()).to_payload(),
        )

    return router
