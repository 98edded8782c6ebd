"""HTTP retry utilities for GitHub and raw file lookups.

License lookups hit two hosts: the GitHub REST API and a raw content host.
Both are prone to short hiccups, and the GitHub API additionally answers
with ``403`` plus a rate limit message once the quota is used up. The
session created by :func:`create_retry_session` retries:

- server errors (500, 502, 503, 504)
- GitHub API rate limits, waiting for ``X-RateLimit-Reset`` when possible
- connection errors, timeouts and incomplete reads

Anything that still fails is left to the caller, which treats it as a
license that could not be resolved.
"""

from __future__ import annotations

import dataclasses
import logging
import random
import time
import typing
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import (
    ChunkedEncodingError,
    ConnectionError,
    RequestException,
    Timeout,
)
from urllib3.exceptions import IncompleteRead, ProtocolError
from urllib3.util.retry import Retry

from .result import Result

logger = logging.getLogger(__name__)

GITHUB_API_HOST = "api.github.com"

RETRY_STATUS_CODES = frozenset([500, 502, 503, 504])

# Exceptions that should trigger a retry
RETRYABLE_EXCEPTIONS = (
    ConnectionError,
    Timeout,
    ChunkedEncodingError,
    IncompleteRead,
    ProtocolError,
)


@dataclasses.dataclass(frozen=True)
class RetryConfig:
    total: int = 5
    backoff_factor: float = 1.0
    max_backoff: float = 60.0
    # longest wait for a GitHub rate limit reset
    max_rate_limit_wait: float = 300.0


class RetryHTTPAdapter(HTTPAdapter):
    """HTTP adapter with backoff and GitHub rate limit handling."""

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        timeout: float = 60.0,
        github_api_host: str = GITHUB_API_HOST,
        **kwargs: typing.Any,
    ):
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self.github_api_host = github_api_host.lower()
        # urllib3 only handles connect level retries, status codes are
        # retried in send() to get logging and jitter
        super().__init__(
            max_retries=Retry(total=0, connect=0, read=0, raise_on_status=False),
            **kwargs,
        )

    @property
    def max_attempts(self) -> int:
        return max(self.retry_config.total, 0) + 1

    def send(
        self,
        request: requests.PreparedRequest,
        stream: bool = False,
        timeout: float | tuple[float, float] | tuple[float, None] | None = None,
        verify: bool | str = True,
        cert: bytes | str | tuple[bytes | str, bytes | str] | None = None,
        proxies: typing.Mapping[str, str] | None = None,
        **kwargs: typing.Any,
    ) -> requests.Response:
        """Send request, retry transient failures"""
        if timeout is None:
            timeout = self.timeout

        send_kwargs = {
            "stream": stream,
            "timeout": timeout,
            "verify": verify,
            "cert": cert,
            "proxies": proxies,
            **kwargs,
        }

        for attempt in range(self.max_attempts):
            last_attempt = attempt >= self.max_attempts - 1
            try:
                response = super().send(request, **send_kwargs)
            except RETRYABLE_EXCEPTIONS as e:
                if last_attempt:
                    logger.error(
                        "request failed after %d attempts for %s: %s",
                        self.max_attempts,
                        request.url or "<unknown>",
                        e,
                    )
                    raise
                self._sleep(
                    self._backoff(attempt),
                    "request failed for %s: %s",
                    request.url or "<unknown>",
                    e,
                )
                continue

            if _is_github_rate_limit(request, response, self.github_api_host):
                if last_attempt:
                    logger.error(
                        "GitHub API rate limit exceeded after %d attempts for %s",
                        self.max_attempts,
                        request.url,
                    )
                    return response
                self._sleep(
                    self._rate_limit_wait(response, attempt),
                    "GitHub API rate limit hit for %s",
                    request.url,
                )
                continue

            if response.status_code in RETRY_STATUS_CODES and not last_attempt:
                self._sleep(
                    self._backoff(attempt),
                    "request failed with status %d for %s",
                    response.status_code,
                    request.url or "<unknown>",
                )
                continue

            return response

        # the last attempt always returns or raises
        raise RequestException(
            f"Failed to complete request after {self.max_attempts} attempts"
        )

    def _backoff(self, attempt: int) -> float:
        """Exponential backoff with jitter"""
        return min(
            self.retry_config.backoff_factor * (2**attempt) + random.uniform(0, 1),
            self.retry_config.max_backoff,
        )

    def _rate_limit_wait(self, response: requests.Response, attempt: int) -> float:
        reset_time = response.headers.get("X-RateLimit-Reset")
        if reset_time:
            try:
                wait_time = int(reset_time) - int(time.time()) + 5
            except (ValueError, TypeError):
                logger.debug("could not parse GitHub rate limit reset time")
            else:
                if wait_time > 0:
                    return min(wait_time, self.retry_config.max_rate_limit_wait)
        return self._backoff(attempt)

    def _sleep(self, wait_time: float, msg: str, *args: typing.Any) -> None:
        logger.warning(
            msg + ", retrying in %.1f seconds",
            *args,
            wait_time,
        )
        time.sleep(wait_time)


def _is_github_rate_limit(
    request: requests.PreparedRequest,
    response: requests.Response,
    github_api_host: str,
) -> bool:
    return (
        response.status_code in (403, 429)
        and request.url is not None
        and (urlparse(request.url).hostname or "").lower() == github_api_host
        and "rate limit" in response.text.lower()
    )


def create_retry_session(
    retry_config: RetryConfig | None = None,
    timeout: float = 60.0,
    github_api_host: str = GITHUB_API_HOST,
) -> requests.Session:
    """Create a requests Session with retry capabilities.

    Args:
        retry_config: Retry behavior. If None, uses the :class:`RetryConfig`
            defaults.
        timeout: Default timeout for requests in seconds.
        github_api_host: Host of the GitHub REST API, its rate limit
            responses are retried after the limit resets.
    """
    session = requests.Session()
    adapter = RetryHTTPAdapter(
        retry_config=retry_config,
        timeout=timeout,
        github_api_host=github_api_host,
    )

    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


def http_get(
    session: requests.Session, url: str, **kwargs: typing.Any
) -> Result[requests.Response]:
    """GET *url*, HTTP errors are returned as a failed result"""
    try:
        response = session.get(url, **kwargs)
        response.raise_for_status()
    except RequestException as err:
        logger.debug("GET %s failed: %s", url, err)
        return Result.failure(err)
    return Result.ok(response)
