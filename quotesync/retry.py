"""Retry loop shared by every OpenAI backend call."""

import time
from typing import Callable, Optional, TypeVar

from openai import OpenAIError

from quotesync.errors import error_from_api, is_retryable_api_error

T = TypeVar("T")


def call_with_retries(
    request: Callable[[], T],
    description: str,
    max_retries: int = 2,
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """
    Run a backend request, retrying transient failures with exponential backoff.

    Rate limits, connection errors and 5xx responses are retried up to
    `max_retries` times. Everything else, and the last transient failure,
    is raised as a typed QuoteSyncError.

    Args:
        request: Zero-argument callable performing the API call
        description: Short label used in status lines and error messages
        max_retries: Number of retries after the first attempt
        sleep: Sleep function, defaults to time.sleep

    Returns:
        Whatever `request` returns
    """
    sleep = sleep or time.sleep
    max_retries = max(0, max_retries)
    for attempt in range(max_retries + 1):
        try:
            if attempt > 0:
                print(f"  {description} (attempt {attempt + 1}/{max_retries + 1})...")
            return request()
        except OpenAIError as e:
            if is_retryable_api_error(e) and attempt < max_retries:
                wait_time = 2 ** attempt
                print(f"⚠ {description}: {type(e).__name__}. Waiting {wait_time} seconds before retry...")
                sleep(wait_time)
                continue
            raise error_from_api(e, description) from e
