"""
Template Registry

In-memory catalog of LaTeX resume templates. The catalog is read once from
config/templates.yaml (or built from .tex files) and never mutated afterwards,
so a registry can be shared across threads without locking.

Catalog format (YAML, loaded with OmegaConf):

    templates:
      - id: Default_Resume
        name: Default Resume
        path: templates/latex/Default_Resume-template.tex
        required_fonts: [Charter]
        image_placeholders:
          - original: photo.jpg
            placeholder: /placeholder-user.jpg
        is_default: true
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from restex.contexts.templating.defaults import (
    DEFAULT_CONTENT_PLACEHOLDER,
    DEFAULT_IMAGE_PLACEHOLDER,
)
from restex.contexts.templating.exceptions import (
    TemplateLoadError,
    TemplateNotRegisteredError,
)
from restex.contexts.templating.logger import _log_debug, log_registry_loaded
from restex.contexts.templating.packages import extract_package_names
from restex.contexts.templating.transforms import TransformRegistry, default_transforms

load_dotenv()
PROJECT_ROOT = Path(os.getenv("PROJECT_ROOT", Path(__file__).resolve().parents[3]))
TEMPLATES_CONFIG = Path(os.getenv("TEMPLATES_CONFIG", PROJECT_ROOT / "config" / "templates.yaml"))
TEMPLATES_PATH = Path(os.getenv("TEMPLATES_PATH", PROJECT_ROOT / "templates" / "latex"))


def normalize_identifier(identifier: str) -> str:
    """Lowercase identifier with runs of non-alphanumerics collapsed to '_'."""
    return re.sub(r"[^a-z0-9]+", "_", identifier.lower())


@dataclass(frozen=True)
class Template:
    """
    A parameterized LaTeX resume template.

    Attributes:
        id: Unique, stable identifier
        name: Display name
        source_path: Path of the .tex file the source was read from
        latex_source: Full template text (never modified)
        description: Optional short description
        source_url: Where the template was obtained (e.g., Overleaf gallery)
        image_placeholders: Original image reference -> substitute path
        required_fonts: Fonts that must be installed, in declaration order
        custom_packages: Packages that must resolve via kpsewhich, in order
        preview_image_path: Pre-rendered thumbnail, if any
        is_default: Whether this is the catalog's default template
        content_placeholder: Marker replaced by resume content
    """

    id: str
    name: str
    source_path: Path
    latex_source: str
    description: Optional[str] = None
    source_url: Optional[str] = None
    image_placeholders: Mapping[str, str] = field(default_factory=dict)
    required_fonts: Tuple[str, ...] = ()
    custom_packages: Tuple[str, ...] = ()
    preview_image_path: Optional[Path] = None
    is_default: bool = False
    content_placeholder: str = DEFAULT_CONTENT_PLACEHOLDER

    def __post_init__(self):
        object.__setattr__(self, "image_placeholders", MappingProxyType(dict(self.image_placeholders)))

    @property
    def normalized_id(self) -> str:
        """Identifier used for output file names (e.g., 'default_resume')."""
        return normalize_identifier(self.id)


def get_image_placeholder(template: Template, image_path: str) -> str:
    """Return the substitute for an image reference, or the default placeholder."""
    if template.image_placeholders and template.image_placeholders.get(image_path):
        return template.image_placeholders[image_path]
    return DEFAULT_IMAGE_PLACEHOLDER


def read_template_source(source_path: Path) -> str:
    """Read a .tex file as UTF-8, wrapping I/O failures in TemplateLoadError."""
    try:
        return Path(source_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateLoadError(f"Failed to load template {source_path}", source_path, e) from e


def load_template(template_path: Path, template_id: Optional[str] = None) -> Template:
    """
    Build a Template straight from a .tex file.

    The package list is extracted from the source's \\usepackage declarations.

    Args:
        template_path: Path to the .tex file
        template_id: Identifier to use (defaults to the file stem)

    Raises:
        TemplateLoadError: If the file cannot be read
    """
    template_path = Path(template_path)
    latex_source = read_template_source(template_path)
    return Template(
        id=template_id or template_path.stem,
        name=template_path.stem,
        source_path=template_path,
        latex_source=latex_source,
        custom_packages=tuple(extract_package_names(latex_source)),
    )


def list_available_templates(templates_dir: Path = None) -> List[str]:
    """List .tex file names in the templates directory."""
    if templates_dir is None:
        templates_dir = TEMPLATES_PATH
    try:
        return sorted(p.name for p in Path(templates_dir).iterdir() if p.suffix == ".tex")
    except OSError as e:
        raise TemplateLoadError("Failed to list available templates", templates_dir, e) from e


def _template_from_entry(entry: Dict[str, Any], project_root: Path) -> Template:
    """Convert one catalog entry into a Template, reading its source file."""
    source_path = Path(entry["path"])
    if not source_path.is_absolute():
        source_path = project_root / source_path

    placeholders = {
        item["original"]: item["placeholder"] for item in entry.get("image_placeholders") or []
    }

    preview_image_path = entry.get("preview_image")
    if preview_image_path is not None:
        preview_image_path = project_root / preview_image_path

    return Template(
        id=entry.get("id") or source_path.stem,
        name=entry.get("name") or source_path.stem,
        source_path=source_path,
        latex_source=read_template_source(source_path),
        description=entry.get("description"),
        source_url=entry.get("source"),
        image_placeholders=placeholders,
        required_fonts=tuple(entry.get("required_fonts") or ()),
        custom_packages=tuple(entry.get("custom_packages") or ()),
        preview_image_path=preview_image_path,
        is_default=bool(entry.get("is_default", False)),
        content_placeholder=entry.get("content_placeholder") or DEFAULT_CONTENT_PLACEHOLDER,
    )


class TemplateRegistry:
    """
    Read-only catalog of templates plus their rewrite strategies.

    Templates are addressable by id or by source path. The registry is
    populated once in the constructor; there is no mutation API.
    """

    def __init__(self, templates: List[Template], transforms: TransformRegistry = None):
        """
        Initialize the template registry.

        Args:
            templates: Templates in catalog order
            transforms: Content rewrite strategies. Defaults to the built-in set.

        Raises:
            ValueError: If two templates share an id
        """
        self._templates: Dict[str, Template] = {}
        for template in templates:
            if template.id in self._templates:
                raise ValueError(f"Duplicate template id: {template.id}")
            self._templates[template.id] = template

        self.transforms = transforms if transforms is not None else default_transforms()

    @classmethod
    def from_config(
        cls,
        config_path: Path = None,
        project_root: Path = None,
        transforms: TransformRegistry = None,
    ) -> "TemplateRegistry":
        """
        Load the registry from a YAML catalog.

        Args:
            config_path: Catalog file (defaults to TEMPLATES_CONFIG env variable)
            project_root: Base for relative template paths (defaults to PROJECT_ROOT)
            transforms: Content rewrite strategies

        Raises:
            TemplateLoadError: If the catalog or any template source cannot be read
        """
        if config_path is None:
            config_path = TEMPLATES_CONFIG
        if project_root is None:
            project_root = PROJECT_ROOT

        try:
            catalog = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
        except Exception as e:
            raise TemplateLoadError("Failed to load template catalog", Path(config_path), e) from e

        entries = (catalog or {}).get("templates") or []
        templates = [_template_from_entry(entry, Path(project_root)) for entry in entries]

        log_registry_loaded(len(templates), Path(config_path))
        return cls(templates, transforms=transforms)

    @classmethod
    def from_directory(
        cls, templates_dir: Path = None, transforms: TransformRegistry = None
    ) -> "TemplateRegistry":
        """Build a registry from every .tex file in a directory (ids are file stems)."""
        if templates_dir is None:
            templates_dir = TEMPLATES_PATH

        templates = [
            load_template(Path(templates_dir) / name)
            for name in list_available_templates(templates_dir)
        ]
        _log_debug(f"Loaded {len(templates)} templates from {templates_dir}")
        return cls(templates, transforms=transforms)

    def get(self, template_id: str) -> Template:
        """
        Look up a template by id or by source path.

        Raises:
            TemplateNotRegisteredError: If nothing matches
        """
        if template_id in self._templates:
            return self._templates[template_id]

        for template in self._templates.values():
            if _same_path(template.source_path, template_id):
                return template

        raise TemplateNotRegisteredError(template_id, list(self._templates))

    def list_templates(self) -> List[Template]:
        """All templates in catalog order."""
        return list(self._templates.values())

    def default_template(self) -> Optional[Template]:
        """The template flagged is_default, else the first one."""
        for template in self._templates.values():
            if template.is_default:
                return template
        return next(iter(self._templates.values()), None)

    def is_registered(self, template_id: str) -> bool:
        try:
            self.get(template_id)
        except TemplateNotRegisteredError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self):
        return iter(self._templates.values())


def _same_path(source_path: Path, candidate: str) -> bool:
    """Match a source path given as written in the catalog, relative to root, or absolute."""
    candidate_path = Path(candidate)
    if source_path == candidate_path:
        return True
    if not candidate_path.is_absolute() and source_path == PROJECT_ROOT / candidate_path:
        return True
    num_parts = len(candidate_path.parts)
    return not candidate_path.is_absolute() and source_path.parts[-num_parts:] == candidate_path.parts
