"""
Rendering Context

Responsibilities:
- Validates templates (structure, recommended packages, installed fonts and packages)
- Talks to the TeX toolchain (fc-list, kpsewhich, xelatex, pdflatex)
- Compiles preview documents with engine fallback and retry-with-backoff
- Rasterizes previews to thumbnails and manages temporary run directories

Owns: Toolchain access, compilation, preview images
Never: Modifies template catalog entries
"""

from restex.contexts.rendering.cache import PreviewCache
from restex.contexts.rendering.compiler import (
    CompilationAttempt,
    CompilationOrchestrator,
    classify_error,
    engine_for_attempt,
)
from restex.contexts.rendering.exceptions import ErrorKind, LatexCompilationError, RasterizationError
from restex.contexts.rendering.preview import (
    PreviewResult,
    compile_preview,
    sweep_stale_runs,
    thumbnails_up_to_date,
)
from restex.contexts.rendering.toolchain import Engine, SubprocessToolchain, Toolchain
from restex.contexts.rendering.validator import (
    ValidationResult,
    check_prerequisites,
    validate_template,
)

__all__ = [
    # Validation
    "ValidationResult",
    "validate_template",
    "check_prerequisites",
    # Toolchain
    "Toolchain",
    "SubprocessToolchain",
    "Engine",
    # Compilation
    "CompilationAttempt",
    "CompilationOrchestrator",
    "classify_error",
    "engine_for_attempt",
    # Previews
    "PreviewCache",
    "PreviewResult",
    "compile_preview",
    "sweep_stale_runs",
    "thumbnails_up_to_date",
    # Errors
    "ErrorKind",
    "LatexCompilationError",
    "RasterizationError",
]
