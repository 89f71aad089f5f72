"""Shared fakes for pipeline tests: a scriptable page and a counting session manager."""

from unittest.mock import MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from job_scraper.config import Settings
from job_scraper.services.browser import BrowserSession, SessionManager


JOB_URL = "https://www.linkedin.com/jobs/view/1111111111"
OTHER_JOB_URL = "https://www.linkedin.com/jobs/view/2222222222"

REQUIRED_DOM = {
    "h1": "  Senior Python Developer \n",
    ".jobs-unified-top-card__company-name": "Acme Corp",
    ".jobs-unified-top-card__bullet": " Berlin, Germany ",
    ".jobs-description-content__text": "We build things.\nRequirements:\n• Python\n- SQL\nQualifications:\nOther text",
}

FULL_DOM = {
    **REQUIRED_DOM,
    ".jobs-unified-top-card__job-insight:first-child": " Full-time ",
    ".jobs-unified-top-card__posted-date": "2 days ago",
}

SKILLS = {".job-details-skill-match-status-list li": [" Python ", "SQL", None]}


class FakePage:
    """Answers the handful of Page calls the pipeline makes from an in-memory DOM."""

    def __init__(self, elements=None, lists=None, layout=True, goto_error=None, doms_by_url=None):
        self.elements = dict(elements or {})
        self.lists = dict(lists or {})
        self.layout = layout
        self.goto_error = goto_error
        self.doms_by_url = doms_by_url or {}
        self.visited = []
        self.closed = False

    async def goto(self, url, wait_until=None, timeout=None):
        if self.goto_error is not None:
            raise self.goto_error
        self.visited.append(url)
        if url in self.doms_by_url:
            self.elements, self.lists = self.doms_by_url[url]

    async def wait_for_selector(self, selector, timeout=None):
        if not self.layout:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def eval_on_selector(self, selector, expression):
        if selector not in self.elements:
            raise PlaywrightError(f'Error: failed to find element matching selector "{selector}"')
        return self.elements[selector]

    async def eval_on_selector_all(self, selector, expression):
        return list(self.lists.get(selector, []))

    async def close(self):
        self.closed = True


class FakeSessionManager(SessionManager):
    """Records acquire/release calls instead of touching a browser."""

    def __init__(self, settings, page_factory=None, acquire_error=None):
        super().__init__(settings, provider=MagicMock())
        self.page_factory = page_factory or FakePage
        self.acquire_error = acquire_error
        self.acquired = 0
        self.released = 0
        self.pages = []

    async def acquire(self):
        self.acquired += 1
        if self.acquire_error is not None:
            raise self.acquire_error
        page = self.page_factory()
        self.pages.append(page)
        return BrowserSession(playwright=None, browser=MagicMock(), context=None, page=page)

    async def release(self, session):
        self.released += 1
        await session.page.close()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        browser_provider="local",
        browserless_api_key=None,
        readiness_timeout_ms=50,
        navigation_timeout_ms=100,
        pre_navigation_delay_min_ms=0,
        pre_navigation_delay_max_ms=0,
        log_file=None,
    )
