"""Wall-clock helpers."""

import time


def current_time() -> int:
    """Return the current time as integer epoch seconds."""
    return int(time.time())
