"""
Content Transformer

Turns resume content into text that is safe to drop into a given template.

Pipeline (in order):
1. Template-specific rewrite strategy (looked up by template id, then file stem)
2. Image substitution: \\includegraphics arguments are swapped for placeholders
3. Font warnings: a comment is injected after \\documentclass for every required
   font the text does not load with \\usepackage

Transformation is best-effort. transform_content() and render_template() never
raise: on an internal fault they log and return their input unchanged.
"""

import re
from typing import Optional

from restex.contexts.templating.defaults import DEFAULT_IMAGE_PLACEHOLDER
from restex.contexts.templating.latex_patterns import (
    DOCUMENT_BODY_RE,
    DOCUMENTCLASS_LINE_RE,
    IMAGE_RE,
    CommentPatterns,
)
from restex.contexts.templating.logger import _log_debug, _log_error, log_transform_fault
from restex.contexts.templating.packages import extract_package_names
from restex.contexts.templating.template_registry import Template, get_image_placeholder
from restex.contexts.templating.transforms import TransformRegistry, default_transforms


def apply_template_rewrite(
    template: Template, content: str, transforms: Optional[TransformRegistry] = None
) -> str:
    """Apply the template's registered rewrite, or pass content through."""
    if transforms is None:
        transforms = default_transforms()

    rewrite = transforms.for_template(template.id, template.source_path)
    if rewrite is None:
        return content

    _log_debug(f"Applying content rewrite for {template.id}")
    return rewrite(content)


def substitute_images(template: Template, content: str) -> str:
    """
    Replace every \\includegraphics path with the template's placeholder image.

    A failure on one image only affects that image: it gets the default
    placeholder plus a comment, and the remaining images are still processed.
    """
    if not template.image_placeholders or not IMAGE_RE.search(content):
        return content

    def _replace(match: re.Match) -> str:
        options = match.group(1) or ""
        image_path = match.group(2)
        try:
            placeholder = get_image_placeholder(template, image_path)
            return f"\\includegraphics{options}{{{placeholder}}}"
        except Exception as e:
            _log_error(f"Error processing image {image_path}: {e}")
            return "\n".join(
                [
                    CommentPatterns.IMAGE_FAILURE.format(path=image_path),
                    CommentPatterns.IMAGE_FALLBACK,
                    f"\\includegraphics{options}{{{DEFAULT_IMAGE_PLACEHOLDER}}}",
                ]
            )

    return IMAGE_RE.sub(_replace, content)


def inject_font_warnings(template: Template, content: str) -> str:
    """
    Add a warning comment for each required font the text does not load.

    Warnings go right after the \\documentclass line, in the order fonts are
    declared on the template. Content without a \\documentclass line gets them
    prepended instead.
    """
    if not template.required_fonts:
        return content

    loaded = set(extract_package_names(content))
    warnings = [
        CommentPatterns.FONT_WARNING.format(font=font)
        for font in template.required_fonts
        if font not in loaded
    ]
    if not warnings:
        return content

    block = "\n".join(warnings) + "\n"
    match = DOCUMENTCLASS_LINE_RE.search(content)
    if match is None:
        return block + content

    return content[: match.end()] + block + content[match.end():]


def transform_content(
    template: Template, content: str, transforms: Optional[TransformRegistry] = None
) -> str:
    """
    Transform resume content for a template.

    Args:
        template: Template the content is destined for (read-only)
        content: LaTeX content to transform
        transforms: Rewrite strategies (defaults to the built-in set)

    Returns:
        Transformed content, or `content` unchanged if anything goes wrong
    """
    try:
        transformed = apply_template_rewrite(template, content, transforms)
        transformed = substitute_images(template, transformed)
        transformed = inject_font_warnings(template, transformed)
        return transformed
    except Exception as e:
        log_transform_fault(template.id, e)
        return content


def render_template(
    template: Template, content: str, transforms: Optional[TransformRegistry] = None
) -> str:
    """
    Produce full LaTeX source: the template with transformed content inserted.

    Content replaces the template's content placeholder. Templates without a
    placeholder get their document body replaced. Returns the template source
    unchanged if the content cannot be placed.
    """
    transformed = transform_content(template, content, transforms)
    source = template.latex_source

    try:
        if template.content_placeholder in source:
            return source.replace(template.content_placeholder, transformed)

        match = DOCUMENT_BODY_RE.search(source)
        if match is None:
            _log_error(f"{template.id}: no content placeholder or document body found")
            return source

        return source[: match.start(1)] + "\n" + transformed.strip() + "\n" + source[match.end(1):]
    except Exception as e:
        log_transform_fault(template.id, e)
        return source
