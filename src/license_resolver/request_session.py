import functools
import os
from urllib.parse import urlparse

import requests

from .http_retry import GITHUB_API_HOST, RetryConfig, create_retry_session

RETRY_CONFIG = RetryConfig(
    total=int(os.environ.get("LICENSE_RESOLVER_HTTP_RETRIES", "5")),
    backoff_factor=float(os.environ.get("LICENSE_RESOLVER_HTTP_BACKOFF_FACTOR", "1.5")),
)
TIMEOUT = float(os.environ.get("LICENSE_RESOLVER_HTTP_TIMEOUT", "30.0"))

# Shared session for GitHub API and raw file lookups
session = create_retry_session(retry_config=RETRY_CONFIG, timeout=TIMEOUT)


@functools.cache
def session_for_api(github_api_url: str) -> requests.Session:
    """Shared session that waits out rate limits of the given GitHub API"""
    host = (urlparse(github_api_url).hostname or "").lower()
    if not host or host == GITHUB_API_HOST:
        return session
    return create_retry_session(
        retry_config=RETRY_CONFIG,
        timeout=TIMEOUT,
        github_api_host=host,
    )
