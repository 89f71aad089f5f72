from pydantic_settings import BaseSettings
from typing import Optional

from job_scraper.exceptions import ConfigurationError


class Settings(BaseSettings):
    # App
    app_name: str = "LinkedIn Job Scraper"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Browser: "remote" connects to Browserless, "local" launches Chromium
    browser_provider: str = "remote"
    browserless_url: str = "wss://chrome.browserless.io"
    browserless_api_key: Optional[str] = None
    browser_executable_path: Optional[str] = None
    browser_headless: bool = True
    browser_launch_args: list[str] = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-blink-features=AutomationControlled",
    ]
    viewport_width: int = 1920
    viewport_height: int = 1080
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    accept_language: str = "en-US,en;q=0.9"

    # Timeouts (milliseconds)
    navigation_timeout_ms: int = 30000
    readiness_timeout_ms: int = 30000
    pre_navigation_delay_min_ms: int = 1000
    pre_navigation_delay_max_ms: int = 3000

    # Security
    rate_limit_enabled: bool = True
    rate_limit_scrape: str = "100/15 minutes"
    cors_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def check_browser_config(self) -> None:
        """Fail fast when the selected browser provider is missing what it needs."""
        if self.browser_provider not in ("remote", "local"):
            raise ConfigurationError(
                f"Unknown BROWSER_PROVIDER '{self.browser_provider}' (expected 'remote' or 'local')"
            )
        missing = []
        if self.browser_provider == "remote":
            if not self.browserless_api_key:
                missing.append("BROWSERLESS_API_KEY")
            if not self.browserless_url:
                missing.append("BROWSERLESS_URL")
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        if self.pre_navigation_delay_min_ms > self.pre_navigation_delay_max_ms:
            raise ConfigurationError(
                "PRE_NAVIGATION_DELAY_MIN_MS must not exceed PRE_NAVIGATION_DELAY_MAX_MS"
            )


settings = Settings()
