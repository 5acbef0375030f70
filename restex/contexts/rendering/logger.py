"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from restex.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session

    Returns:
        Path to log file

    Example:
        from restex.contexts.rendering.logger import setup_rendering_logger, _log_info

        log_file = setup_rendering_logger(log_dir)
        _log_info("Starting compilation...")
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={
            "Engines": "xelatex (primary), pdflatex (fallback)",
            "Rasterizer": "pdf2image (pdftoppm)",
            "Retry base delay": os.getenv("RETRY_BASE_DELAY", "1.0"),
        },
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_compilation_start(template_id: str, tex_file: Path, working_dir: Path) -> None:
    """Log start of compilation with context."""
    _log_info(f"Starting compilation: {template_id}")
    _log_info(f"Compiling in {working_dir}")
    _log_debug(f"  Source: {tex_file}")


def log_attempt_start(file_name: str, attempt_number: int, max_retries: int, engine) -> None:
    """Log one compile attempt."""
    _log_info(f"[{file_name}] Attempt {attempt_number}/{max_retries}: compiling with {engine.value}")


def log_attempt_failure(file_name: str, attempt) -> None:
    """
    Log a failed compile attempt with the first lines of its log.

    Args:
        file_name: Source file being compiled
        attempt: CompilationAttempt for the failed try
    """
    _log_error(
        f"[{file_name}] LaTeX error ({attempt.engine.value}, attempt {attempt.attempt_number}): "
        f"{attempt.classified_kind.value}"
    )
    head = "\n".join(attempt.error_log.split("\n")[:5])
    if head.strip():
        logger.opt(raw=True).debug(f"\n{'=' * 80}\nERROR DETAILS:\n{'=' * 80}\n{head}\n")


def log_retry_wait(file_name: str, delay: float, kind) -> None:
    """Log the backoff before the next attempt."""
    _log_info(f"[{file_name}] Waiting {delay:.1f}s before retry...")
    if kind.is_actionable:
        _log_info(f"[{file_name}] Detected {kind.value}, trying alternate engine...")


def log_compilation_result(template_id: str, success: bool, elapsed_time: float, attempts: int) -> None:
    """Log overall compilation outcome."""
    if success:
        _log_success(f"{template_id}: compiled after {attempts} attempt(s) ({elapsed_time:.2f}s)")
    else:
        _log_error(f"{template_id}: compilation exhausted {attempts} attempts ({elapsed_time:.2f}s)")


def log_validation_result(template_id: str, result) -> None:
    """
    Log validation result.

    Args:
        template_id: Template identifier
        result: ValidationResult from validate_template()
    """
    if result.is_valid:
        _log_success(f"{template_id}: template is valid ({len(result.warnings)} warnings)")
    else:
        _log_error(f"{template_id}: {len(result.errors)} validation errors")
        for i, err in enumerate(result.errors, 1):
            _log_error(f"  Error {i}: {err}")

    for warn in result.warnings:
        _log_debug(f"  Warning: {warn}")
