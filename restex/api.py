"""
Caller-facing functions.

Thin layer over the templating and rendering contexts for the surrounding
application (routes, workers). The template catalog is loaded once, on first
use, from TEMPLATES_CONFIG.
"""

from typing import List, Optional

from restex.contexts.rendering.cache import PreviewCache
from restex.contexts.rendering.preview import PREVIEW_CACHE_PATH, PreviewResult
from restex.contexts.rendering.preview import compile_preview as _compile_preview
from restex.contexts.rendering.toolchain import Toolchain
from restex.contexts.rendering.validator import ValidationResult
from restex.contexts.rendering.validator import validate_template as _validate_template
from restex.contexts.templating.template_registry import Template, TemplateRegistry
from restex.contexts.templating.transformer import transform_content as _transform_content

_registry: Optional[TemplateRegistry] = None


def get_registry() -> TemplateRegistry:
    """The process-wide template registry (loaded on first call)."""
    global _registry
    if _registry is None:
        _registry = TemplateRegistry.from_config()
    return _registry


def set_registry(registry: Optional[TemplateRegistry]) -> None:
    """Replace the process-wide registry (None reloads from config on next use)."""
    global _registry
    _registry = registry


def list_templates() -> List[Template]:
    return get_registry().list_templates()


def get_template(template_id: str) -> Template:
    """
    Look up a template by id or source path.

    Raises:
        TemplateNotRegisteredError: If the template is unknown
    """
    return get_registry().get(template_id)


def validate_template(template: Template, toolchain: Optional[Toolchain] = None) -> ValidationResult:
    return _validate_template(template, toolchain)


def transform_content(template: Template, content: str) -> str:
    """Transform content for a template using the registry's rewrite strategies."""
    return _transform_content(template, content, get_registry().transforms)


def compile_preview(template: Template, content: Optional[str] = None, use_cache: bool = True) -> PreviewResult:
    """
    Compile and rasterize a preview of a template.

    Content goes through the registry's rewrite strategies, as in
    transform_content().

    Raises:
        LatexCompilationError: If every compile attempt failed
        RasterizationError: If the PDF could not be rasterized
    """
    cache = PreviewCache(PREVIEW_CACHE_PATH) if use_cache else None
    return _compile_preview(template, content, cache=cache, transforms=get_registry().transforms)
