"""
HTTP requests with retries and exponential backoff, bounded by a scan deadline.
"""
import logging
import time
from typing import Any, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 2
DEFAULT_INITIAL_BACKOFF = 0.25
USER_AGENT = "SnackCheck/1.0 (ingredient health scoring)"
# Below this much remaining time another attempt is not worth starting.
MIN_ATTEMPT_SECONDS = 0.05


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return deadline - time.monotonic()


def request_with_retries(
    method: str,
    url: str,
    timeout: float,
    deadline: Optional[float] = None,
    params: Optional[dict] = None,
    json_body: Optional[Any] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
) -> Tuple[Optional[requests.Response], Optional[str]]:
    """
    Send a request, retrying timeouts and connection errors with exponential backoff.
    Each attempt's timeout is capped by what is left before `deadline` (time.monotonic()
    seconds); no attempt or backoff sleep starts past it.
    Returns (response, None) on success, (None, error_message) on failure.
    """
    last_error: Optional[str] = None
    for attempt in range(max_retries):
        left = _remaining(deadline)
        if left is not None and left < MIN_ATTEMPT_SECONDS:
            last_error = last_error or "deadline exceeded before request"
            break
        attempt_timeout = timeout if left is None else min(timeout, left)
        try:
            resp = requests.request(
                method,
                url,
                params=params,
                json=json_body,
                timeout=attempt_timeout,
                headers={"User-Agent": USER_AGENT},
            )
            return (resp, None)
        except requests.Timeout as e:
            last_error = f"Read timed out: {e}"
        except requests.RequestException as e:
            last_error = f"{type(e).__name__}: {e}"
        logger.warning(
            "EXTERNAL_API retry attempt=%s/%s url=%s error=%s",
            attempt + 1, max_retries, url[:60], last_error,
        )
        if attempt < max_retries - 1:
            delay = initial_backoff * (2 ** attempt)
            left = _remaining(deadline)
            if left is not None and left <= delay + MIN_ATTEMPT_SECONDS:
                break
            logger.info("EXTERNAL_API backoff %.2fs before retry", delay)
            time.sleep(delay)
    return (None, last_error)


def get_with_retries(url: str, timeout: float, deadline: Optional[float] = None,
                     params: Optional[dict] = None, **kwargs) -> Tuple[Optional[requests.Response], Optional[str]]:
    return request_with_retries("GET", url, timeout, deadline=deadline, params=params, **kwargs)


def post_with_retries(url: str, timeout: float, deadline: Optional[float] = None,
                      json_body: Optional[Any] = None, **kwargs) -> Tuple[Optional[requests.Response], Optional[str]]:
    return request_with_retries("POST", url, timeout, deadline=deadline, json_body=json_body, **kwargs)
