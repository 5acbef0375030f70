"""PDF helpers for compiled previews."""

import io
from pathlib import Path
from typing import Optional, Union

from PyPDF2 import PdfReader


def page_count(pdf: Union[Path, bytes]) -> Optional[int]:
    """Get page count from a PDF path or raw PDF bytes, or None if unreadable."""
    try:
        source = io.BytesIO(pdf) if isinstance(pdf, bytes) else str(pdf)
        reader = PdfReader(source)
        return len(reader.pages)
    except Exception:
        return None


def is_pdf(data: bytes) -> bool:
    """Check the PDF magic header."""
    return data[:5] == b"%PDF-"
