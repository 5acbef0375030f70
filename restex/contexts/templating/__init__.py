"""
Templating Context

Responsibilities:
- Owns the template catalog (metadata + LaTeX source, read once at startup)
- Parses and resolves \\usepackage declarations
- Transforms resume content for a specific template (rewrites, image placeholders,
  font warnings) and places it into the template source
- Generates standalone preview documents

Owns: Template catalog, package resolution, content transformation
Never: Shells out to the TeX toolchain
"""

from restex.contexts.templating.exceptions import (
    InvalidPackageDeclarationError,
    TemplateLoadError,
    TemplateNotRegisteredError,
)
from restex.contexts.templating.packages import (
    PackageDeclaration,
    parse_package,
    resolve_packages,
)
from restex.contexts.templating.preview_template import PreviewOptions, generate_preview_template
from restex.contexts.templating.template_registry import (
    Template,
    TemplateRegistry,
    get_image_placeholder,
    load_template,
)
from restex.contexts.templating.transformer import render_template, transform_content
from restex.contexts.templating.transforms import TransformRegistry, default_transforms

__all__ = [
    # Package resolution
    "PackageDeclaration",
    "parse_package",
    "resolve_packages",
    # Catalog
    "Template",
    "TemplateRegistry",
    "load_template",
    "get_image_placeholder",
    # Transformation
    "TransformRegistry",
    "default_transforms",
    "transform_content",
    "render_template",
    # Previews
    "PreviewOptions",
    "generate_preview_template",
    # Errors
    "InvalidPackageDeclarationError",
    "TemplateLoadError",
    "TemplateNotRegisteredError",
]
