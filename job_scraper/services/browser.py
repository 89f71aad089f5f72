from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from job_scraper.config import Settings
from job_scraper.exceptions import SessionInitError, describe

logger = logging.getLogger(__name__)

# Stealth script to avoid bot detection
STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {get: () => undefined});
Object.defineProperty(navigator, 'plugins', {get: () => [1, 2, 3, 4, 5]});
Object.defineProperty(navigator, 'languages', {get: () => ['en-US', 'en']});
window.chrome = {runtime: {}};
"""


def build_browserless_endpoint(url: str, api_key: str) -> str:
    """WebSocket endpoint for Browserless with the token as a query parameter."""
    if url.startswith("https://"):
        url = "wss://" + url[len("https://"):]
    elif url.startswith("http://"):
        url = "ws://" + url[len("http://"):]
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query) if k != "token"]
    query.append(("token", api_key))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def _redact_token(endpoint: str) -> str:
    parts = urlsplit(endpoint)
    query = [(k, "***" if k == "token" else v) for k, v in parse_qsl(parts.query)]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


class BrowserProvider:
    """Hands out a Browser from a running Playwright driver."""

    name = "base"

    async def open(self, playwright: Playwright) -> Browser:
        raise NotImplementedError


class RemoteBrowserProvider(BrowserProvider):
    name = "remote"

    def __init__(self, url: str, api_key: str, timeout_ms: int = 30000):
        self.endpoint = build_browserless_endpoint(url, api_key)
        self.timeout_ms = timeout_ms

    async def open(self, playwright: Playwright) -> Browser:
        logger.info(f"Connecting to Browserless at {_redact_token(self.endpoint)}")
        return await playwright.chromium.connect_over_cdp(self.endpoint, timeout=self.timeout_ms)


class LocalBrowserProvider(BrowserProvider):
    name = "local"

    def __init__(self, executable_path: Optional[str] = None, headless: bool = True, args: Optional[list[str]] = None):
        self.executable_path = executable_path
        self.headless = headless
        self.args = list(args or [])

    async def open(self, playwright: Playwright) -> Browser:
        logger.info(f"Launching local Chromium (headless={self.headless})")
        launch_args: dict[str, Any] = {"headless": self.headless, "args": self.args}
        if self.executable_path:
            launch_args["executable_path"] = self.executable_path
        return await playwright.chromium.launch(**launch_args)


def build_browser_provider(settings: Settings) -> BrowserProvider:
    if settings.browser_provider == "local":
        return LocalBrowserProvider(
            executable_path=settings.browser_executable_path,
            headless=settings.browser_headless,
            args=settings.browser_launch_args,
        )
    if not settings.browserless_api_key:
        raise SessionInitError("BROWSERLESS_API_KEY is not configured")
    return RemoteBrowserProvider(
        settings.browserless_url,
        settings.browserless_api_key,
        timeout_ms=settings.navigation_timeout_ms,
    )


@dataclass
class BrowserSession:
    """One browser plus one page, owned by a single scrape call."""

    playwright: Optional[Playwright]
    browser: Browser
    context: Optional[BrowserContext]
    page: Page


class SessionManager:
    def __init__(
        self,
        settings: Settings,
        provider: Optional[BrowserProvider] = None,
        playwright_factory: Callable[[], Any] = async_playwright,
    ):
        self.settings = settings
        self._provider = provider
        self._playwright_factory = playwright_factory

    @property
    def provider(self) -> BrowserProvider:
        if self._provider is None:
            self._provider = build_browser_provider(self.settings)
        return self._provider

    def _context_args(self) -> dict[str, Any]:
        return {
            "user_agent": self.settings.user_agent,
            "viewport": {"width": self.settings.viewport_width, "height": self.settings.viewport_height},
            "extra_http_headers": {"Accept-Language": self.settings.accept_language},
        }

    async def acquire(self) -> BrowserSession:
        playwright = None
        browser = None
        context = None
        try:
            playwright = await self._playwright_factory().start()
            browser = await self.provider.open(playwright)

            logger.info("Creating new page...")
            context = await browser.new_context(**self._context_args())
            page = await context.new_page()
            await page.add_init_script(STEALTH_SCRIPT)
        except SessionInitError:
            await self._discard(playwright, browser, context)
            raise
        except Exception as e:
            logger.error(f"Browser initialization error: {e}")
            await self._discard(playwright, browser, context)
            raise SessionInitError(describe(e)) from e
        except BaseException:
            # Cancellation mid-acquire must not leak the driver or browser
            await self._discard(playwright, browser, context)
            raise

        return BrowserSession(playwright=playwright, browser=browser, context=context, page=page)

    async def release(self, session: BrowserSession) -> None:
        """Close page, context, browser and driver; one failure never skips the rest."""
        logger.info("Closing page...")
        await _close_quietly("page", session.page.close)
        if session.context is not None:
            await _close_quietly("context", session.context.close)
        logger.info("Closing browser...")
        await _close_quietly("browser", session.browser.close)
        if session.playwright is not None:
            await _close_quietly("playwright driver", session.playwright.stop)

    async def _discard(self, playwright, browser, context) -> None:
        if context is not None:
            await _close_quietly("context", context.close)
        if browser is not None:
            await _close_quietly("browser", browser.close)
        if playwright is not None:
            await _close_quietly("playwright driver", playwright.stop)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[BrowserSession]:
        browser_session = await self.acquire()
        try:
            yield browser_session
        finally:
            await self.release(browser_session)


async def _close_quietly(label: str, close: Callable[[], Any]) -> None:
    try:
        await close()
    except Exception as e:
        logger.warning(f"Failed to close {label}: {describe(e)}")
