"""
Per-template content rewrite strategies.

A TransformRegistry maps a template identifier to a pure function
content -> content. Registries are handed to the TemplateRegistry at
construction time, so new templates can add behavior without touching the
transformer.
"""

import re
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Optional

from restex.contexts.templating.latex_patterns import SECTION_RE

ContentTransform = Callable[[str], str]


def rewrite_sections_as_headright(content: str) -> str:
    r"""Turn \section{X} into \headright{X}{\workIcon} (John Miller CV layout)."""
    return SECTION_RE.sub(lambda m: "\\headright{" + m.group(1) + "}{\\workIcon}", content)


def replace_pattern(pattern: str, replacement: str) -> ContentTransform:
    """Build a transform that applies a single regex substitution."""
    compiled = re.compile(pattern)

    def _transform(content: str) -> str:
        return compiled.sub(replacement, content)

    return _transform


class TransformRegistry:
    r"""
    Strategy table of template-specific content rewrites.

    Lookup tries the template id first, then the stem of its source file, so a
    strategy can be registered under either name.

    Example:
        >>> transforms = TransformRegistry({"John_Miller_CV": rewrite_sections_as_headright})
        >>> transforms.get("John_Miller_CV")("\\section{Skills}")
        '\\headright{Skills}{\\workIcon}'
    """

    def __init__(self, transforms: Optional[Mapping[str, ContentTransform]] = None):
        self._transforms: Dict[str, ContentTransform] = dict(transforms or {})

    def register(self, template_id: str, transform: ContentTransform) -> None:
        """Register (or replace) the rewrite for a template."""
        self._transforms[template_id] = transform

    def get(self, *keys: str) -> Optional[ContentTransform]:
        """Return the first transform registered under any of the keys."""
        for key in keys:
            if key and key in self._transforms:
                return self._transforms[key]
        return None

    def for_template(self, template_id: str, source_path: Optional[Path] = None) -> Optional[ContentTransform]:
        """Lookup by template id, then by source file stem."""
        stem = Path(source_path).stem if source_path else None
        return self.get(template_id, stem)

    def names(self) -> Iterable[str]:
        return list(self._transforms)

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._transforms

    def __len__(self) -> int:
        return len(self._transforms)


def default_transforms() -> TransformRegistry:
    """Rewrites for the templates shipped in templates/latex/."""
    return TransformRegistry({"John_Miller_CV": rewrite_sections_as_headright})
