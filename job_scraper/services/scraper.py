from __future__ import annotations
import logging
from typing import Optional

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from job_scraper.config import Settings
from job_scraper.exceptions import NavigationError, ScraperError, ValidationError, describe
from job_scraper.schemas.job import JobRecord
from job_scraper.services.browser import SessionManager
from job_scraper.services.extractor import JobExtractor
from job_scraper.utils.humanize import random_delay

logger = logging.getLogger(__name__)

JOB_VIEW_PATH = "linkedin.com/jobs/view/"


def validate_job_url(url: object) -> str:
    if not isinstance(url, str) or JOB_VIEW_PATH not in url:
        raise ValidationError("Invalid LinkedIn job URL")
    return url


class LinkedInScraper:
    """Scrapes one LinkedIn job posting per call.

    Holds only configuration and stateless collaborators, so concurrent calls
    share nothing: each one acquires and releases its own browser session.
    """

    def __init__(
        self,
        settings: Settings,
        session_manager: Optional[SessionManager] = None,
        extractor: Optional[JobExtractor] = None,
    ):
        self.settings = settings
        self.sessions = session_manager or SessionManager(settings)
        self.extractor = extractor or JobExtractor(readiness_timeout_ms=settings.readiness_timeout_ms)

    async def scrape_job_data(self, url: str) -> JobRecord:
        logger.info(f"Starting job scraping for URL: {url}")
        url = validate_job_url(url)

        try:
            async with self.sessions.session() as session:
                await self._pause()
                await self._navigate(session.page, url)
                return await self.extractor.extract(session.page)
        except ScraperError as e:
            logger.error(f"Job scraping error ({e.stage}): {e}")
            raise

    async def _pause(self) -> None:
        delay = await random_delay(
            self.settings.pre_navigation_delay_min_ms / 1000,
            self.settings.pre_navigation_delay_max_ms / 1000,
        )
        logger.debug(f"Paused {delay:.2f}s before navigation")

    async def _navigate(self, page: Page, url: str) -> None:
        logger.info("Navigating to URL...")
        timeout = self.settings.navigation_timeout_ms
        try:
            await page.goto(url, wait_until="networkidle", timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise NavigationError(f"page did not settle within {timeout}ms ({describe(e)})") from e
        except Exception as e:
            raise NavigationError(describe(e)) from e
