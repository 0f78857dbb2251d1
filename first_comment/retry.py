"""Retry logic with exponential backoff"""

import time
import logging
from typing import Callable, TypeVar, Tuple, Type
from functools import wraps

T = TypeVar('T')
logger = logging.getLogger(__name__)


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
):
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = getattr(func, "__name__", repr(func))

        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        logger.error(f"All {max_retries + 1} attempts failed for {name}")
                        raise
                    logger.warning(
                        f"Attempt {attempt + 1}/{max_retries + 1} failed for {name}: {e}. "
                        f"Retrying in {delay:.2f}s..."
                    )
                    sleep(delay)
                    delay = min(delay * exponential_base, max_delay)

            raise RuntimeError("Unexpected error in retry logic")

        return wrapper
    return decorator
