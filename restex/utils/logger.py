"""
Shared loguru setup for RESTEX sessions.

Every session (a thumbnail batch, a template check, a preview run) writes a
DEBUG log file under its own directory and echoes INFO and above to the
console. The first lines of each log record where the run came from and which
TeX toolchain binaries it resolved, so a failed compile log can be matched to
the machine state that produced it.

Context-specific wrappers live in contexts/{context}/logger.py.
"""

import os
import shutil
import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from restex import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {thread.name} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

# Binaries the rendering context shells out to, by role
TOOLCHAIN_BINARIES = {
    "xelatex": "xelatex",
    "pdflatex": "pdflatex",
    "font lister": os.getenv("FONT_LISTER", "fc-list"),
    "package resolver": os.getenv("PACKAGE_RESOLVER", "kpsewhich"),
    "rasterizer": "pdftoppm",
}

LEVEL_COLORS = {
    "SUCCESS": "<green>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, str]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Point loguru at a session log file and the console.

    Args:
        context_name: Log file stem ("render", "template")
        log_dir: Session directory (created if missing)
        extra_provenance: Context-specific header lines
        console_level: Minimum level echoed to stdout

    Returns:
        Path to the session log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_session_header(context_name, extra_provenance)
    return log_file


def resolve_toolchain() -> Dict[str, str]:
    """Role -> resolved path of each toolchain binary ("not found" if absent)."""
    return {role: shutil.which(binary) or f"{binary} (not found)" for role, binary in TOOLCHAIN_BINARIES.items()}


def log_session_header(context_name: str, extra: Optional[Dict[str, str]] = None) -> None:
    """Log the restex version, invocation, template catalog and toolchain paths."""
    logger.info("=" * 80)
    logger.info(f"restex {__version__} | {context_name} session")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Template catalog: {os.getenv('TEMPLATES_CONFIG', 'config/templates.yaml')}")

    for role, path in resolve_toolchain().items():
        logger.debug(f"Toolchain {role}: {path}")

    for key, value in (extra or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
