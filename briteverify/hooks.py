"""Request observer hooks."""

import logging
from typing import Optional, Protocol

LOGGER = logging.getLogger(__name__)


class RequestObserver(Protocol):
    """Called around every outbound request.

    ``status_code`` is None when no response was received.
    """

    def on_request_start(self, method: str, url: str) -> None:
        ...

    def on_request_end(self, method: str, url: str, status_code: Optional[int], elapsed: float) -> None:
        ...


class LoggingObserver:
    """Observer that writes one log record per finished request."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self.logger = logger or LOGGER
        self.level = level

    def on_request_start(self, method: str, url: str) -> None:
        self.logger.debug("-> %s %s", method, url)

    def on_request_end(self, method: str, url: str, status_code: Optional[int], elapsed: float) -> None:
        self.logger.log(self.level, "<- %s %s %s (%.3fs)", method, url, status_code, elapsed)
