"""Exception types raised by the keep-alive scheduler and its HTTP client."""


class CronConfigError(ValueError):
    """A control operation was given a configuration it cannot run with."""


class InvalidScheduleError(CronConfigError):
    def __init__(self, schedule):
        self.schedule = schedule
        super().__init__(f"Invalid cron schedule: {schedule!r}")


class InvalidTargetError(CronConfigError):
    """Target URL, method, timeout or overlap policy is unusable."""


class OutboundRequestError(Exception):
    """The keep-alive request did not produce a response."""


class RequestTimeoutError(OutboundRequestError):
    def __init__(self, url: str, timeout_ms: int):
        self.url = url
        self.timeout_ms = timeout_ms
        super().__init__(f"Request timeout after {timeout_ms}ms ({url})")


class TransportError(OutboundRequestError):
    """Connection refused, DNS failure, reset, protocol error..."""


class ImageStoreError(Exception):
    """An image could not be stored in, or removed from, the image host."""
