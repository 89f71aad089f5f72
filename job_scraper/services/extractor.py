from __future__ import annotations
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from job_scraper.exceptions import ExtractionError, describe
from job_scraper.schemas.job import JobRecord
from job_scraper.utils.text_processing import clean_text, parse_requirements

logger = logging.getLogger(__name__)

T = TypeVar("T")

JOB_LAYOUT_SELECTOR = ".job-view-layout"

REQUIRED_SELECTORS = {
    "title": "h1",
    "company": ".jobs-unified-top-card__company-name",
    "location": ".jobs-unified-top-card__bullet",
    "description": ".jobs-description-content__text",
}

OPTIONAL_SELECTORS = {
    "employment_type": ".jobs-unified-top-card__job-insight:first-child",
    "posted_date": ".jobs-unified-top-card__posted-date",
}

SKILLS_SELECTOR = ".job-details-skill-match-status-list li"

TEXT_CONTENT = "el => el.textContent"
ALL_TEXT_CONTENT = "els => els.map(el => el.textContent)"


async def _attempt(label: str, read: Callable[[], Awaitable[T]], default: Optional[T] = None) -> Optional[T]:
    """Run a best-effort read; any failure counts as "not on the page"."""
    try:
        return await read()
    except Exception as e:
        logger.info(f"{label} not found ({describe(e)})")
        return default


class JobExtractor:
    """Turns a navigated job page into a JobRecord."""

    def __init__(self, readiness_timeout_ms: int = 30000):
        self.readiness_timeout_ms = readiness_timeout_ms

    async def extract(self, page: Page) -> JobRecord:
        await self._wait_for_layout(page)

        logger.info("Extracting job data...")
        try:
            fields = {name: await self._read_text(page, selector) for name, selector in REQUIRED_SELECTORS.items()}
        except Exception as e:
            logger.error(f"Data extraction error: {e}")
            raise ExtractionError(describe(e)) from e

        for name, selector in OPTIONAL_SELECTORS.items():
            value = await _attempt(name, lambda selector=selector: self._read_text(page, selector))
            if value is not None:
                fields[name] = value

        fields["requirements"] = tuple(parse_requirements(fields["description"]))
        fields["skills"] = tuple(await _attempt("skills", lambda: self._read_all_text(page, SKILLS_SELECTOR), default=[]))

        logger.info("Job data extracted successfully")
        return JobRecord(**fields)

    async def _wait_for_layout(self, page: Page) -> None:
        logger.info("Waiting for job layout...")
        try:
            await page.wait_for_selector(JOB_LAYOUT_SELECTOR, timeout=self.readiness_timeout_ms)
        except PlaywrightTimeoutError as e:
            logger.error(f"Job layout did not appear within {self.readiness_timeout_ms}ms")
            raise ExtractionError("job layout not found") from e
        except Exception as e:
            raise ExtractionError(describe(e)) from e

    @staticmethod
    async def _read_text(page: Page, selector: str) -> str:
        return clean_text(await page.eval_on_selector(selector, TEXT_CONTENT))

    @staticmethod
    async def _read_all_text(page: Page, selector: str) -> list[str]:
        return [clean_text(text) for text in await page.eval_on_selector_all(selector, ALL_TEXT_CONTENT)]
