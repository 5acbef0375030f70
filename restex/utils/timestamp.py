"""Timestamp formatting utilities."""

import uuid
from datetime import datetime


def now() -> str:
    """Compact local timestamp for directory names (e.g., 20251114_123456)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def run_token() -> str:
    """
    Unique token for a single compilation run.

    Combines a timestamp (for readable, sortable directory names) with a short
    random suffix, so two runs started in the same second never collide.

    Example:
        >>> run_token()
        '20251114_123456_3f9c2a1b'
    """
    return f"{now()}_{uuid.uuid4().hex[:8]}"
