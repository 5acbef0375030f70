"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from restex.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[template]"


def setup_templating_logger(log_dir: Path, phase: str = "template") -> Path:
    """
    Setup logger for templating context.

    Args:
        log_dir: Directory for this templating session
        phase: Phase name for provenance ("load", "transform", ...)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="template",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_registry_loaded(num_templates: int, config_path: Path) -> None:
    """Log the result of loading the template catalog."""
    _log_info(f"Loaded {num_templates} templates")
    _log_debug(f"  Catalog: {config_path}")


def log_transform_fault(template_id: str, error: Exception) -> None:
    """Log a recovered transformation fault (content is returned unchanged)."""
    _log_error(f"Error transforming content for {template_id}: {error}")
    _log_warning(f"{template_id}: returning content unchanged")


def log_skipped_declaration(declaration: str) -> None:
    """Log a package declaration the resolver could not parse."""
    _log_warning(f"Skipping invalid package declaration: {declaration}")
