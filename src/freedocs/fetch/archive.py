"""Archive snapshot lookup and content fetch with retries, circuit breakers, and a TTL cache

Services are tried in priority order: the Internet Archive (existing snapshot via
the CDX API, else a save request), then a direct fetch of the page itself.
"""

import logging
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import quote

import requests

from freedocs.config import Settings
from freedocs.core.utils.hashing import sha256
from freedocs.errors import (
    ArchiveError,
    CircuitOpenError,
    ContentError,
    RateLimitedError,
    error_for_status,
)


logger = logging.getLogger(__name__)

ARCHIVE_BASE = "https://web.archive.org"
SERVICES = {                # priority order
    "archive.org": "Internet Archive",
    "direct":      "Direct Fetch",
}
LOOKUP_TIMEOUT    = 15.0
SAVE_SETTLE_DELAY = 5.0     # the save endpoint does not return the snapshot URL
BASE_RETRY_DELAY  = 1.0
RATE_LIMIT_DELAY  = 30.0
MAX_RETRY_DELAY   = 60.0


@dataclass
class CircuitBreaker:
    """Per-service failure counter that blocks requests for a while after repeated failures."""
    threshold:     int
    timeout:       float
    clock:         Callable[[], float] = time.monotonic
    failure_count: int = 0
    opened_at:     Optional[float] = None

    def is_open(self) -> bool:
        if self.opened_at is None:
            return False
        if self.clock() - self.opened_at >= self.timeout:
            logger.info("Circuit breaker reset after %.0fs", self.timeout)
            self.reset()
            return False
        return True

    def reset(self) -> None:
        self.failure_count = 0
        self.opened_at = None

    def record_failure(self) -> None:
        self.failure_count += 1
        if self.failure_count >= self.threshold and self.opened_at is None:
            self.opened_at = self.clock()
            logger.warning("Circuit breaker opened after %d failure(s)", self.failure_count)

    def record_success(self) -> None:
        self.reset()


@dataclass(frozen=True)
class ArchiveResult:
    url:     str
    service: str            # archive.org, direct, or cache
    cached:  bool = False


@dataclass
class _CacheEntry:
    content:   str
    stored_at: float


def retry_delay(attempt: int, rate_limited: bool = False) -> float:
    """Seconds to wait before the next attempt: exponential with jitter, longer when rate limited."""
    if rate_limited:
        return RATE_LIMIT_DELAY + random.uniform(0, 5)
    return min(2 ** (attempt - 1) * BASE_RETRY_DELAY + random.uniform(0, 1), MAX_RETRY_DELAY)


class ArchiveClient:
    """Fetch collaborator for the parse pipeline.

    Owns its cache and circuit breakers; pass one instance where needed.
    `session` is anything with a requests-style get(url, headers=, timeout=).
    """

    def __init__(
        self,
        settings: Settings,
        session=None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        ):
        self.settings = settings
        self.session  = session if session is not None else requests.Session()
        self.sleep    = sleep
        self.clock    = clock
        self.breakers = {
            name: CircuitBreaker(settings.circuit_threshold, settings.circuit_timeout, clock=clock)
            for name in SERVICES
        }
        self._cache: dict[str, _CacheEntry] = {}
        self._fetchers = {"archive.org": self._archive_org, "direct": self._direct}

    # --- cache ---

    def get_cached_content(self, url: str) -> Optional[str]:
        key = sha256(url)
        entry = self._cache.get(key)
        if entry is None:
            return None
        if self.clock() - entry.stored_at < self.settings.cache_ttl:
            logger.debug("Cache hit for %s", url)
            return entry.content
        del self._cache[key]
        return None

    def set_cached_content(self, url: str, content: str) -> None:
        if self.settings.cache_ttl > 0:
            self._cache[sha256(url)] = _CacheEntry(content=content, stored_at=self.clock())

    # --- http ---

    def _get(self, url: str, timeout: Optional[float] = None) -> requests.Response:
        try:
            resp = self.session.get(
                url,
                headers={"User-Agent": self.settings.user_agent},
                timeout=timeout or self.settings.request_timeout,
            )
        except requests.RequestException as e:
            raise ArchiveError(f"Request failed: {e}", url) from e
        if resp.status_code != 200:
            raise error_for_status(resp.status_code, url)
        return resp

    def _lookup_snapshot(self, url: str) -> Optional[str]:
        """Latest Internet Archive snapshot URL for url, or None."""
        cdx = f"{ARCHIVE_BASE}/cdx/search/cdx?url={quote(url, safe='')}&limit=1&output=json"
        try:
            rows = self._get(cdx, timeout=LOOKUP_TIMEOUT).json()
        except RateLimitedError:
            raise
        except (ArchiveError, ValueError) as e:
            logger.debug("Snapshot lookup failed for %s: %s", url, e)
            return None
        # first row is the header
        if isinstance(rows, list) and len(rows) > 1:
            return f"{ARCHIVE_BASE}/web/{rows[1][1]}/{url}"
        return None

    def _archive_org(self, url: str) -> str:
        snapshot = self._lookup_snapshot(url)
        if snapshot:
            logger.info("Found existing snapshot: %s", snapshot)
            return snapshot

        self._get(f"{ARCHIVE_BASE}/save/{url}")
        self.sleep(SAVE_SETTLE_DELAY)
        snapshot = self._lookup_snapshot(url)
        if snapshot:
            logger.info("Created snapshot: %s", snapshot)
            return snapshot
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        return f"{ARCHIVE_BASE}/web/{timestamp}/{url}"

    def _direct(self, url: str) -> str:
        resp = self._get(url)
        if not resp.text:
            raise ArchiveError("Direct fetch returned no content", url)
        self.set_cached_content(url, resp.text)
        return url

    def _try_service(self, service: str, url: str) -> str:
        breaker = self.breakers[service]
        if breaker.is_open():
            raise CircuitOpenError(service)

        attempts = self.settings.max_retries
        last_error: Optional[ArchiveError] = None
        for attempt in range(1, attempts + 1):
            try:
                result = self._fetchers[service](url)
                breaker.record_success()
                return result
            except ArchiveError as e:
                last_error = e
                logger.warning("%s attempt %d/%d failed: %s", SERVICES[service], attempt, attempts, e)
                if attempt < attempts:
                    self.sleep(retry_delay(attempt, isinstance(e, RateLimitedError)))

        breaker.record_failure()
        raise last_error

    # --- public ---

    def get_archive_snapshot(self, url: str) -> ArchiveResult:
        """Return a URL the document content can be read from, trying each service in turn.

        Raises ArchiveError listing every service's failure when none succeeds.
        """
        if self.get_cached_content(url) is not None:
            return ArchiveResult(url=url, service="cache", cached=True)

        errors = []
        for service, name in SERVICES.items():
            try:
                return ArchiveResult(url=self._try_service(service, url), service=service)
            except ArchiveError as e:
                logger.warning("%s failed: %s", name, e)
                errors.append(f"{name}: {e.message}")
        raise ArchiveError(f"All archive services failed: {'; '.join(errors)}", url, errors)

    def get_archived_content(self, url: str) -> str:
        """Return cached content for url, else fetch it."""
        cached = self.get_cached_content(url)
        if cached is not None:
            return cached
        resp = self._get(url)
        if not resp.text:
            raise ContentError("No content received from archive", url)
        self.set_cached_content(url, resp.text)
        return resp.text
