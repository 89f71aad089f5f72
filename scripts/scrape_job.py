#!/usr/bin/env python3
from __future__ import annotations

import asyncio
import json
import sys

from job_scraper.config import settings
from job_scraper.exceptions import ConfigurationError, ScraperError
from job_scraper.services.scraper import LinkedInScraper
from job_scraper.utils.logging_config import setup_logging


async def main(url: str) -> int:
    setup_logging(settings.log_level, settings.log_file)
    try:
        settings.check_browser_config()
        record = await LinkedInScraper(settings).scrape_job_data(url)
    except (ConfigurationError, ScraperError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(record.to_payload(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: scripts/scrape_job.py https://www.linkedin.com/jobs/view/<id>", file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))
