"""
Requirement Validator

Checks a template before it is compiled:
- Structure: document class and document environment markers
- Advisory: recommended packages (warnings only)
- Hard requirements: required fonts and custom packages resolve in the toolchain
  (a lookup that raises counts as not installed)

Font and package checks are dispatched to a thread pool and joined. Nothing in
this module raises; every problem ends up in the ValidationResult.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from restex.contexts.rendering.logger import _log_debug, _log_error, log_validation_result
from restex.contexts.rendering.toolchain import (
    Engine,
    SubprocessToolchain,
    Toolchain,
    engine_is_installed,
)
from restex.contexts.templating.defaults import RECOMMENDED_PACKAGES
from restex.contexts.templating.latex_patterns import DocumentPatterns
from restex.contexts.templating.packages import declared_package_names, is_superseded
from restex.contexts.templating.template_registry import Template


@dataclass
class ValidationResult:
    """
    Outcome of validating one template.

    Attributes:
        is_valid: True iff there are no errors
        errors: Blocking problems, in check order
        warnings: Advisory problems, in check order
    """

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def check_structure(source: str) -> List[str]:
    """Structural errors for a template source."""
    errors = []
    if DocumentPatterns.DOCUMENTCLASS not in source:
        errors.append("Missing document class declaration")

    if DocumentPatterns.BEGIN_DOCUMENT not in source:
        errors.append("Missing document environment")
    elif DocumentPatterns.END_DOCUMENT not in source:
        errors.append("Missing end of document")

    return errors


def check_recommended_packages(source: str) -> List[str]:
    """Warnings for recommended packages the source does not declare."""
    declared = declared_package_names(source)
    return [
        f"Missing recommended package: {name}"
        for name in RECOMMENDED_PACKAGES
        if name not in declared and not is_superseded(name, declared)
    ]


def _check_each(
    names: Iterable[str],
    is_available: Callable[[str], bool],
    missing_message: str,
    what: str,
) -> List[str]:
    """
    Run one availability check per name, in order.

    A lookup that raises counts as not available. The cause is only logged.
    """
    errors = []
    for name in names:
        try:
            if not is_available(name):
                errors.append(missing_message.format(name=name))
        except Exception as e:
            _log_error(f"Failed to check {what} {name}: {e}")
            errors.append(missing_message.format(name=name))
    return errors


def validate_requirements(template: Template, toolchain: Toolchain) -> List[str]:
    """
    Check required fonts and custom packages against the toolchain.

    Both lists are checked concurrently. Font errors come first, then package
    errors, each in the template's declared order.
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="restex-validate") as executor:
        fonts = executor.submit(
            _check_each,
            template.required_fonts,
            toolchain.font_is_available,
            "Required font not installed: {name}",
            "font",
        )
        packages = executor.submit(
            _check_each,
            template.custom_packages,
            toolchain.package_is_available,
            "Required LaTeX package not installed: {name}",
            "package",
        )
        return fonts.result() + packages.result()


def validate_template(template: Template, toolchain: Optional[Toolchain] = None) -> ValidationResult:
    """
    Validate a template's structure and requirements.

    Args:
        template: Template to check
        toolchain: Font/package catalog (defaults to SubprocessToolchain)

    Returns:
        ValidationResult (never raises)
    """
    if toolchain is None:
        toolchain = SubprocessToolchain()

    source = template.latex_source
    errors: List[str] = []
    warnings: List[str] = []

    for check, sink, what in (
        (check_structure, errors, "structure"),
        (check_recommended_packages, warnings, "recommended packages"),
    ):
        try:
            sink.extend(check(source))
        except Exception as e:
            _log_error(f"{template.id}: {what} check failed: {e}")
            errors.append(f"Failed to check {what}: {e}")

    try:
        errors.extend(validate_requirements(template, toolchain))
    except Exception as e:
        _log_error(f"{template.id}: requirement check failed: {e}")
        errors.append(f"Failed to check requirements: {e}")

    result = ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
    log_validation_result(template.id, result)
    return result


def check_prerequisites(
    templates: Iterable[Template],
    toolchain: Optional[Toolchain] = None,
    templates_dir: Optional[Path] = None,
    engine_check: Callable[[Engine], bool] = engine_is_installed,
) -> List[str]:
    """
    Check everything batch preview generation needs before it starts.

    Args:
        templates: Templates about to be compiled
        toolchain: Font/package catalog (defaults to SubprocessToolchain)
        templates_dir: Directory the template sources live in, if checked
        engine_check: Predicate for an engine being installed

    Returns:
        List of problems (empty when ready)
    """
    if toolchain is None:
        toolchain = SubprocessToolchain()

    problems = []
    for engine in Engine:
        if not engine_check(engine):
            problems.append(f"{engine.value} is not installed")

    if templates_dir is not None and not Path(templates_dir).is_dir():
        problems.append(f"Templates directory not found: {templates_dir}")

    for template in templates:
        for error in validate_requirements(template, toolchain):
            problems.append(f"{template.id}: {error}")

    _log_debug(f"Prerequisite check found {len(problems)} problem(s)")
    return problems
