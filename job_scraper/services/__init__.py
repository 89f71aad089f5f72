from job_scraper.services.browser import (
    BrowserProvider,
    BrowserSession,
    LocalBrowserProvider,
    RemoteBrowserProvider,
    SessionManager,
    build_browser_provider,
)
from job_scraper.services.extractor import JobExtractor
from job_scraper.services.scraper import LinkedInScraper

__all__ = [
    "BrowserProvider",
    "BrowserSession",
    "LocalBrowserProvider",
    "RemoteBrowserProvider",
    "SessionManager",
    "build_browser_provider",
    "JobExtractor",
    "LinkedInScraper",
]
