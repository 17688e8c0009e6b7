"""
Shared HTTP client utilities for talking to the monitoring stack, including client construction with pooled connection limits and a request helper that retries transient transport failures. The helper retries connection errors and throttling or gateway status codes with exponential backoff, and leaves every other response to the caller to interpret.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
from typing import Any, Optional

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from config import config

logger = logging.getLogger(__name__)

_DEFAULT_RETRY_ON_STATUS: frozenset[int] = frozenset({429, 502, 503, 504})


def create_client(timeout_seconds: float, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(timeout_seconds),
        limits=httpx.Limits(
            max_connections=config.HTTP_CLIENT_MAX_CONNECTIONS,
            max_keepalive_connections=config.HTTP_CLIENT_MAX_KEEPALIVE_CONNECTIONS,
            keepalive_expiry=config.HTTP_CLIENT_KEEPALIVE_EXPIRY,
        ),
        transport=transport,
    )


def is_transient_http_exception(exc: BaseException, retry_on_status: frozenset[int] = _DEFAULT_RETRY_ON_STATUS) -> bool:
    if isinstance(exc, httpx.RequestError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in retry_on_status
    return False


def request_with_retry(
    client: httpx.Client,
    method: str,
    url: str,
    content: Optional[bytes] = None,
    headers: Optional[dict[str, str]] = None,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request, retrying transient failures; non-transient error statuses are returned untouched."""

    @retry(
        retry=retry_if_exception(is_transient_http_exception),
        stop=stop_after_attempt(config.MAX_RETRIES),
        wait=wait_exponential(multiplier=config.RETRY_BACKOFF),
        reraise=True,
    )
    def _attempt() -> httpx.Response:
        try:
            resp = client.request(method, url, content=content, headers=headers, **kwargs)
            if resp.status_code in _DEFAULT_RETRY_ON_STATUS:
                resp.raise_for_status()
            return resp
        except httpx.HTTPError as exc:
            logger.warning("HTTP %s failed, retrying: %s", method, url, exc_info=exc)
            raise

    return _attempt()
