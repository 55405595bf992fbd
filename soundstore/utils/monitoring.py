import logging
import time

logger = logging.getLogger("soundstore.access")


def log_request(method: str, path: str, status_code: int, started: float) -> float:
    """Write one access-log line for a finished request and return its
    duration in milliseconds. `started` is a `time.perf_counter()` value."""
    elapsed_ms = (time.perf_counter() - started) * 1000
    level = logging.WARNING if status_code >= 500 else logging.INFO
    logger.log(level, f"{method} {path} -> {status_code} ({elapsed_ms:.1f} ms)")
    return elapsed_ms
