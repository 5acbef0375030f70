"""
Preview Cache

Compiled preview PDFs stored on disk under an md5 of the full LaTeX source
that was compiled. Entries older than the TTL are treated as missing and
removed when next read.
"""

import hashlib
import os
import time
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv

from restex.contexts.rendering.logger import _log_debug

load_dotenv()
PREVIEW_CACHE_TTL = float(os.getenv("PREVIEW_CACHE_TTL", "3600"))


class PreviewCache:
    """
    TTL cache of compiled previews.

    Args:
        cache_dir: Directory holding `<key>.pdf` entries
        ttl: Entry lifetime in seconds
        clock: Time source (seconds since epoch)
    """

    def __init__(
        self,
        cache_dir: Path,
        ttl: float = PREVIEW_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl
        self.clock = clock

    @staticmethod
    def key(*parts: str) -> str:
        """md5 over the parts, NUL-separated so adjacent parts cannot run together."""
        return hashlib.md5("\0".join(parts).encode("utf-8")).hexdigest()

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.pdf"

    def _expired(self, path: Path) -> bool:
        return self.clock() - path.stat().st_mtime > self.ttl

    def get(self, key: str) -> Optional[bytes]:
        """Cached PDF bytes, or None when missing or expired."""
        path = self._path(key)
        if not path.exists():
            return None

        if self._expired(path):
            _log_debug(f"Preview cache entry expired: {key}")
            path.unlink(missing_ok=True)
            return None

        return path.read_bytes()

    def put(self, key: str, pdf_bytes: bytes) -> Path:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        path.write_bytes(pdf_bytes)
        return path

    def evict_expired(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        if not self.cache_dir.is_dir():
            return 0

        removed = 0
        for path in self.cache_dir.glob("*.pdf"):
            if self._expired(path):
                path.unlink(missing_ok=True)
                removed += 1
        return removed
