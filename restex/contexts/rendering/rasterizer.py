"""
Preview rasterization.

Converts the first page of a compiled PDF to PNG thumbnails at a standard and
a double-density width. pdf2image shells out to pdftoppm (poppler).
"""

import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv
from pdf2image import convert_from_bytes
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError

from restex.contexts.rendering.exceptions import RasterizationError
from restex.contexts.rendering.logger import _log_debug

load_dotenv()
REGULAR_WIDTH = 600
RETINA_WIDTH = 1200
RASTER_DPI = int(os.getenv("RASTER_DPI", "200"))


def thumbnail_paths(output_dir: Path, name: str) -> Tuple[Path, Path]:
    """Standard and double-density thumbnail paths for a name."""
    output_dir = Path(output_dir)
    return output_dir / f"{name}.png", output_dir / f"{name}@2x.png"


def rasterize_preview(pdf_bytes: bytes, output_dir: Path, name: str) -> Tuple[Path, Path]:
    """
    Render the first page of a PDF to `<name>.png` and `<name>@2x.png`.

    Args:
        pdf_bytes: Compiled PDF
        output_dir: Directory for the images (created if missing)
        name: Base file name (normalized template id)

    Returns:
        (standard_path, retina_path)

    Raises:
        RasterizationError: If the PDF cannot be converted
    """
    regular_path, retina_path = thumbnail_paths(output_dir, name)
    regular_path.parent.mkdir(parents=True, exist_ok=True)

    for width, path in ((REGULAR_WIDTH, regular_path), (RETINA_WIDTH, retina_path)):
        try:
            images = convert_from_bytes(
                pdf_bytes,
                dpi=RASTER_DPI,
                size=(width, None),
                first_page=1,
                last_page=1,
            )
        except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError) as e:
            raise RasterizationError(f"Failed to rasterize {name}: {e}") from e

        if not images:
            raise RasterizationError(f"Failed to rasterize {name}: PDF has no pages")

        images[0].save(path, "PNG")
        _log_debug(f"Wrote {width}px preview: {path}")

    return regular_path, retina_path
