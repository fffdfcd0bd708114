"""Health check of a StatelessVM service."""

from __future__ import annotations

import argparse
import logging
import os
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Sequence

log = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:7548"
DEFAULT_TIMEOUT = 10.0


class HealthCheckError(Exception):
    """The service is unreachable or reported itself unhealthy."""

    def __init__(self, message: str, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


@dataclass(frozen=True)
class HealthReport:
    """A successful health response."""

    url: str
    status: int
    body: str


def check_health(url: str, timeout: float = DEFAULT_TIMEOUT) -> HealthReport:
    """GET ``<url>/health``; return the report or raise HealthCheckError."""
    endpoint = f"{url}/health"
    log.info("Making health check request to %s", endpoint)
    try:
        with urllib.request.urlopen(endpoint, timeout=timeout) as response:
            status = response.status
            body = response.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        raise HealthCheckError(
            f"StatelessVM health check failed with status: {exc.code}", exc.code, body
        ) from exc
    except (urllib.error.URLError, OSError) as exc:
        raise HealthCheckError(f"StatelessVM health check failed: {exc}") from exc

    if not 200 <= status < 300:
        raise HealthCheckError(f"StatelessVM health check failed with status: {status}", status, body)
    return HealthReport(url=endpoint, status=status, body=body)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check that a StatelessVM service is healthy")
    parser.add_argument("url", nargs="?", default=None,
                        help="service base URL (default: $STATELESSVM_URL or %s)" % DEFAULT_URL)
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG)
    url = args.url or os.environ.get("STATELESSVM_URL", DEFAULT_URL)
    log.info("Starting StatelessVM health check...")
    log.info("Using StatelessVM URL: %s", url)

    try:
        report = check_health(url, args.timeout)
    except HealthCheckError as exc:
        log.error("StatelessVM health check failed: %s", exc)
        if exc.body:
            log.error("Response: %s", exc.body)
        return 1

    log.info("StatelessVM health check succeeded!")
    log.info("Response: %s", report.body)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())