"""
Shared utilities for RESTEX.

Common functionality used across contexts:
- Logger configuration
- Timestamps and run tokens
- PDF helpers
"""

from restex.utils.timestamp import now, run_token

__all__ = ["now", "run_token"]
