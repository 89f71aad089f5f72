from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from job_scraper.app import create_app
from job_scraper.exceptions import ExtractionError, NavigationError, ValidationError
from job_scraper.schemas.job import JobRecord

from conftest import JOB_URL


RECORD = JobRecord(
    title="Senior Python Developer",
    company="Acme Corp",
    location="Berlin, Germany",
    description="Requirements:\n- Python",
    employment_type="Full-time",
    requirements=("Python",),
    skills=("Python", "SQL"),
)


class StubScraper:
    def __init__(self, result=None, error=None):
        self.scrape_job_data = AsyncMock(return_value=result, side_effect=error)


@pytest.fixture
def make_client(settings):
    def _make(scraper, **kwargs):
        return TestClient(create_app(settings, scraper=scraper), **kwargs)
    return _make


def test_health(make_client):
    resp = make_client(StubScraper()).get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_responses_carry_security_headers(make_client):
    resp = make_client(StubScraper()).get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_scrape_success(make_client):
    scraper = StubScraper(result=RECORD)
    resp = make_client(scraper).post("/api/linkedin/scrape", json={"url": JOB_URL})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["title"] == "Senior Python Developer"
    assert body["data"]["employmentType"] == "Full-time"
    assert "postedDate" not in body["data"]
    assert body["data"]["requirements"] == ["Python"]
    assert body["data"]["skills"] == ["Python", "SQL"]
    scraper.scrape_job_data.assert_awaited_once_with(JOB_URL)


@pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": 42}, {"url": None}, ["not", "an", "object"]])
def test_scrape_rejects_missing_or_non_string_url(make_client, payload):
    scraper = StubScraper(result=RECORD)
    resp = make_client(scraper).post("/api/linkedin/scrape", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "URL is required and must be a string"}
    scraper.scrape_job_data.assert_not_awaited()


def test_scrape_rejects_non_json_body(make_client):
    resp = make_client(StubScraper()).post(
        "/api/linkedin/scrape", content=b"url=nope", headers={"Content-Type": "text/plain"}
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_scrape_invalid_job_url_is_bad_request(make_client):
    scraper = StubScraper(error=ValidationError("Invalid LinkedIn job URL"))
    resp = make_client(scraper).post("/api/linkedin/scrape", json={"url": "https://example.com"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Invalid LinkedIn job URL"}


@pytest.mark.parametrize("error, message", [
    (NavigationError("Timeout 30000ms exceeded."), "Failed to navigate to job page: Timeout 30000ms exceeded."),
    (ExtractionError("job layout not found"), "Failed to extract job data: job layout not found"),
])
def test_scrape_pipeline_failure_is_server_error(make_client, error, message):
    resp = make_client(StubScraper(error=error)).post("/api/linkedin/scrape", json={"url": JOB_URL})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": message}


def test_unexpected_error_is_generic_server_error(make_client):
    client = make_client(StubScraper(error=RuntimeError("kaboom")), raise_server_exceptions=False)
    resp = client.post("/api/linkedin/scrape", json={"url": JOB_URL})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error"}


def test_rate_limit_exceeded_returns_json_error(settings):
    limited = settings.model_copy(update={"rate_limit_scrape": "2/minute"})
    client = TestClient(create_app(limited, scraper=StubScraper(result=RECORD)))

    statuses = [client.post("/api/linkedin/scrape", json={"url": JOB_URL}).status_code for _ in range(2)]
    resp = client.post("/api/linkedin/scrape", json={"url": JOB_URL})

    assert statuses == [200, 200]
    assert resp.status_code == 429
    assert resp.json() == {
        "success": False,
        "error": "Too many requests from this IP, please try again later.",
    }


def test_rate_limit_can_be_disabled_per_app(settings):
    unlimited = settings.model_copy(update={"rate_limit_enabled": False, "rate_limit_scrape": "1/minute"})
    client = TestClient(create_app(unlimited, scraper=StubScraper(result=RECORD)))

    statuses = {client.post("/api/linkedin/scrape", json={"url": JOB_URL}).status_code for _ in range(5)}
    assert statuses == {200}


def test_rate_limit_counters_are_per_app(settings):
    limited = settings.model_copy(update={"rate_limit_scrape": "1/minute"})
    first = TestClient(create_app(limited, scraper=StubScraper(result=RECORD)))
    second = TestClient(create_app(limited, scraper=StubScraper(result=RECORD)))

    assert first.post("/api/linkedin/scrape", json={"url": JOB_URL}).status_code == 200
    assert first.post("/api/linkedin/scrape", json={"url": JOB_URL}).status_code == 429
    assert second.post("/api/linkedin/scrape", json={"url": JOB_URL}).status_code == 200


def test_cors_allows_configured_origin(make_client):
    resp = make_client(StubScraper()).get("/health", headers={"Origin": "https://jobs.example.com"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"


def test_cors_preflight_for_scrape(make_client):
    resp = make_client(StubScraper()).options(
        "/api/linkedin/scrape",
        headers={"Origin": "https://jobs.example.com", "Access-Control-Request-Method": "POST"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"


def test_unexpected_error_response_carries_security_headers(make_client):
    client = make_client(StubScraper(error=RuntimeError("kaboom")), raise_server_exceptions=False)
    resp = client.post("/api/linkedin/scrape", json={"url": JOB_URL})

    assert resp.status_code == 500
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"
