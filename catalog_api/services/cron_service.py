"""Keep-alive cron service: calls a URL on a cron schedule and tracks run stats.

Configuration comes from explicit call arguments, then the ``CRON_*`` settings,
then built-in defaults (every 10 minutes, ``GET`` the service's own
``/keep-alive/status``, 30 s timeout). The job is registered on an injected
``CronTrigger``; each tick issues one request through an injected
``HttpClient``. A tick never raises: every outcome ends up in the statistics
and the log.
"""

import asyncio
import dataclasses
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlsplit

from ..clients.http_client import HttpClient
from ..config import Settings
from ..errors import (
    InvalidScheduleError,
    InvalidTargetError,
    OutboundRequestError,
)
from .cron_trigger import CronHandle, CronTrigger, next_fire_time, validate_cron_expression

logger = logging.getLogger("catalog_api.services.cron_service")

DEFAULT_SCHEDULE = "*/10 * * * *"
DEFAULT_METHOD = "GET"
DEFAULT_TIMEOUT_MS = 30000
USER_AGENT = "CronService/1.0"
HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
OVERLAP_POLICIES = ("allow", "skip")
RESPONSE_PREVIEW_CHARS = 200


@dataclass(frozen=True)
class JobConfiguration:
    enabled: bool = False
    schedule: Optional[str] = None
    url: Optional[str] = None
    method: str = DEFAULT_METHOD
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    overlap_policy: str = "allow"


@dataclass
class RunStatistics:
    total_runs: int = 0
    success_count: int = 0
    failure_count: int = 0
    skipped_count: int = 0
    last_run_time: Optional[datetime] = None
    last_run_status: Optional[str] = None  # success | failure
    last_run_duration_ms: Optional[int] = None
    last_status_code: Optional[int] = None
    last_error: Optional[str] = None
    started_at: Optional[datetime] = None

    @property
    def success_rate(self) -> str:
        if self.total_runs == 0:
            return "0%"
        return f"{self.success_count / self.total_runs * 100:.2f}%"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_url(url: Optional[str]) -> str:
    if not url or not isinstance(url, str):
        raise InvalidTargetError("URL is required")
    parts = urlsplit(url.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidTargetError(f"URL must be an absolute http(s) URL: {url!r}")
    return url.strip()


class CronService:
    """Single recurring keep-alive job with start/stop/reconfigure controls.

    One instance per process, owned by the application's composition root.
    State is ``RUNNING`` while a trigger handle is registered, ``STOPPED``
    otherwise.
    """

    def __init__(self, settings: Settings, trigger: CronTrigger, http: HttpClient):
        self.settings = settings
        self.trigger = trigger
        self.http = http
        self.config = JobConfiguration()
        self.stats = RunStatistics()
        self._handle: Optional[CronHandle] = None
        self._in_flight = 0
        # Ticks may overlap and stats are read from the threadpool
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    def default_url(self) -> str:
        return f"http://localhost:{self.settings.SERVER_PORT}/keep-alive/status"

    # ── Configuration ─────────────────────────────────────────────────────

    def _resolve(
        self,
        enabled: Optional[bool] = None,
        schedule: Optional[str] = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        overlap_policy: Optional[str] = None,
    ) -> JobConfiguration:
        """Merge explicit values over CRON_* settings over defaults, then validate."""
        s = self.settings
        schedule = schedule or s.CRON_SCHEDULE or DEFAULT_SCHEDULE
        if not validate_cron_expression(schedule):
            raise InvalidScheduleError(schedule)

        url = _check_url(url or s.CRON_URL or self.default_url())

        method = (method or s.CRON_METHOD or DEFAULT_METHOD).strip().upper()
        if method not in HTTP_METHODS:
            raise InvalidTargetError(f"Unsupported HTTP method: {method}")

        raw_timeout = timeout_ms
        if raw_timeout is None:
            raw_timeout = s.CRON_TIMEOUT if s.CRON_TIMEOUT is not None else DEFAULT_TIMEOUT_MS
        try:
            timeout_ms = int(raw_timeout)
        except (TypeError, ValueError):
            raise InvalidTargetError(f"Timeout must be an integer number of milliseconds: {raw_timeout!r}")
        if timeout_ms <= 0:
            raise InvalidTargetError("Timeout must be positive")

        overlap_policy = overlap_policy or s.CRON_OVERLAP_POLICY
        if overlap_policy not in OVERLAP_POLICIES:
            raise InvalidTargetError(f"Overlap policy must be one of: {', '.join(OVERLAP_POLICIES)}")

        return JobConfiguration(
            enabled=bool(enabled) or s.CRON_ENABLED,
            schedule=schedule,
            url=url,
            method=method,
            timeout_ms=timeout_ms,
            overlap_policy=overlap_policy,
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def start(
        self,
        enabled: Optional[bool] = None,
        schedule: Optional[str] = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        overlap_policy: Optional[str] = None,
    ) -> bool:
        """Register the job, replacing any active trigger.

        Returns False without touching state when neither ``enabled`` nor
        ``CRON_ENABLED`` is set. Raises CronConfigError (state unchanged) when
        the merged configuration is invalid.
        """
        if not (enabled or self.settings.CRON_ENABLED):
            logger.info("Cron service disabled (set CRON_ENABLED=true to enable)")
            return False

        config = self._resolve(enabled, schedule, url, method, timeout_ms, overlap_policy)

        handle = self.trigger.schedule(config.schedule, lambda: self._execute_job(config))
        if self._handle is not None:
            self._handle.cancel()
        self._handle = handle

        with self._lock:
            self.config = config
            self.stats.started_at = _utcnow()

        logger.info(
            "Cron service started: schedule=%s  url=%s  method=%s  timeout=%dms  overlap=%s  started_at=%s",
            config.schedule,
            config.url,
            config.method,
            config.timeout_ms,
            config.overlap_policy,
            self.stats.started_at.isoformat(),
        )
        logger.info("Next run: %s", self._next_run_display())
        return True

    def stop(self):
        """Cancel future ticks. A request already in flight is left to finish."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        with self._lock:
            self.config = dataclasses.replace(self.config, enabled=False)
        logger.info("Cron job stopped")

    async def aclose(self):
        """Stop the job and let the trigger finish or cancel ticks still in flight."""
        self.stop()
        await self.trigger.aclose()

    def update_schedule(self, schedule: str) -> bool:
        """Restart with a new schedule, keeping target, method and timeout.

        Also (re)activates a stopped job.
        """
        if not validate_cron_expression(schedule):
            raise InvalidScheduleError(schedule)
        previous = self.config
        self.stop()
        return self.start(
            enabled=True,
            schedule=schedule,
            url=previous.url,
            method=previous.method,
            timeout_ms=previous.timeout_ms,
            overlap_policy=previous.overlap_policy,
        )

    def update_url(self, url: str) -> bool:
        """Restart against a new target, keeping schedule, method and timeout.

        Also (re)activates a stopped job.
        """
        url = _check_url(url)
        previous = self.config
        self.stop()
        return self.start(
            enabled=True,
            schedule=previous.schedule,
            url=url,
            method=previous.method,
            timeout_ms=previous.timeout_ms,
            overlap_policy=previous.overlap_policy,
        )

    async def run_once(self) -> bool:
        """Execute one tick right now against the active (or default) configuration."""
        config = self.config if self.config.url else self._resolve()
        return await self._execute_job(config)

    # ── Execution ─────────────────────────────────────────────────────────

    async def _execute_job(self, config: JobConfiguration) -> bool:
        with self._lock:
            if config.overlap_policy == "skip" and self._in_flight > 0:
                self.stats.skipped_count += 1
                skipped = True
            else:
                skipped = False
                self._in_flight += 1
                self.stats.total_runs += 1
                self.stats.last_run_time = _utcnow()
                run_number = self.stats.total_runs
        if skipped:
            logger.warning("Skipping cron tick: previous run still in flight (%s %s)", config.method, config.url)
            return False

        logger.info("Cron job #%d executing: %s %s", run_number, config.method, config.url)
        started = time.monotonic()
        ok = False
        status_code = None
        error = None
        body = ""
        try:
            response = await self.http.request(
                config.method,
                config.url,
                headers={"User-Agent": USER_AGENT},
                timeout_ms=config.timeout_ms,
            )
            ok = True
            status_code = response.status_code
            body = response.text or ""
        except OutboundRequestError as exc:
            error = str(exc)
        except asyncio.CancelledError:
            error = "cancelled"
            raise
        except Exception as exc:
            error = f"{type(exc).__name__}: {exc}"
            logger.exception("Unexpected error in cron job #%d", run_number)
        finally:
            duration_ms = int((time.monotonic() - started) * 1000)
            with self._lock:
                self._in_flight -= 1
                if ok:
                    self.stats.success_count += 1
                    self.stats.last_run_status = "success"
                else:
                    self.stats.failure_count += 1
                    self.stats.last_run_status = "failure"
                self.stats.last_run_duration_ms = duration_ms
                self.stats.last_status_code = status_code
                self.stats.last_error = error
                totals = (self.stats.success_count, self.stats.failure_count, self.stats.total_runs)

        if ok:
            preview = body[:RESPONSE_PREVIEW_CHARS] + ("..." if len(body) > RESPONSE_PREVIEW_CHARS else "")
            logger.info("Success! Status: %s, Duration: %dms", status_code, duration_ms)
            if preview:
                logger.info("Response: %s", preview)
        else:
            logger.error("Failed! Error: %s, Duration: %dms", error, duration_ms)
        logger.info("Stats: %d success / %d failed / %d total", *totals)
        return ok

    # ── Stats ─────────────────────────────────────────────────────────────

    def _next_run_display(self) -> str:
        """Best-effort display value; the trigger owns the real timing."""
        if not self.is_running or not self.config.schedule:
            return "N/A"
        return next_fire_time(self.config.schedule).isoformat()

    def get_stats(self) -> dict:
        with self._lock:
            config = self.config
            stats = dataclasses.replace(self.stats)
        return {
            **dataclasses.asdict(config),
            **dataclasses.asdict(stats),
            "running": self.is_running,
            "next_run_time": self._next_run_display(),
            "success_rate": stats.success_rate,
        }
