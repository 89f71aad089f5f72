"""Error taxonomy for the scrape pipeline.

Every pipeline error carries the stage it failed in and a message of the form
``"<stage prefix><cause>"`` so callers can tell the failing phase apart from
the message text alone.
"""


class ConfigurationError(RuntimeError):
    """Raised at startup when a required credential or endpoint is missing."""


class ScraperError(Exception):
    """Catch-all for pipeline failures; only the stage subclasses are raised."""

    stage = ""
    prefix = ""

    def __init__(self, cause: str = ""):
        self.cause = cause
        super().__init__(f"{self.prefix}{cause}")


class ValidationError(ScraperError):
    stage = "validate"
    prefix = ""


class SessionInitError(ScraperError):
    stage = "initialize"
    prefix = "Failed to initialize browser: "


class NavigationError(ScraperError):
    stage = "navigate"
    prefix = "Failed to navigate to job page: "


class ExtractionError(ScraperError):
    stage = "extract"
    prefix = "Failed to extract job data: "


def describe(error: BaseException) -> str:
    """Message of an underlying error, falling back to its type name."""
    message = str(error).strip()
    return message or type(error).__name__
