"""
Preview Template Generator

Builds a standalone, compilable preview document from a template's source:
the original document class, a resolved package list (template packages plus
any common packages the template lacks), the template's own preamble commands,
and either its own body or supplied content.

The skeleton is a Jinja2 template using custom delimiters so LaTeX braces are
never interpreted:
- Variable: <<< var >>>
- Block: <%% block %%>
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from restex.contexts.templating.defaults import (
    COMMON_LATEX_COMMANDS,
    COMMON_PACKAGES,
    IMPLIED_PACKAGES,
)
from restex.contexts.templating.latex_patterns import (
    COLOR_COMMAND_RE,
    DOCUMENT_BODY_RE,
    DOCUMENTCLASS_RE,
    SETMAINFONT_RE,
    DocumentPatterns,
)
from restex.contexts.templating.logger import _log_debug
from restex.contexts.templating.packages import (
    extract_package_declarations,
    parse_package,
    resolve_packages,
)

SKELETONS_PATH = Path(__file__).parent / "skeletons"
PREVIEW_SKELETON = "preview.tex.jinja"
DEFAULT_DOCUMENT_CLASS = r"\documentclass{article}"


@dataclass
class PreviewOptions:
    """
    Options for generating a preview document.

    Attributes:
        title: Title block (omitted when None)
        content: Body content (defaults to the template's own body)
        author: Author line in the title block
        date: Date in the title block (empty when None)
        additional_packages: Extra \\usepackage declarations to merge in
        include_common_commands: Prepend common CV commands to the preamble
    """

    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    additional_packages: List[str] = field(default_factory=list)
    include_common_commands: bool = True


@dataclass
class TemplateRequirements:
    """Document class, package declarations and preamble lines found in a template."""

    document_class: str
    packages: List[str]
    preamble_commands: List[str]


def extract_requirements(source: str) -> TemplateRequirements:
    """
    Scan template source for its document class, packages and preamble commands.

    Packages implied by the body (tabularx, longtable, xcolor, fontspec) are
    appended after the declared ones.
    """
    class_match = DOCUMENTCLASS_RE.search(source)
    document_class = class_match.group(0) if class_match else DEFAULT_DOCUMENT_CLASS

    packages = extract_package_declarations(source)
    for marker, declaration in IMPLIED_PACKAGES.items():
        if marker in source:
            packages.append(declaration)
    if COLOR_COMMAND_RE.search(source):
        packages.append(r"\usepackage[dvipsnames]{xcolor}")
    if SETMAINFONT_RE.search(source):
        packages.append(r"\usepackage{fontspec}")

    lines = source.split("\n")
    class_index = _find_line(lines, DocumentPatterns.DOCUMENTCLASS)
    begin_index = _find_line(lines, DocumentPatterns.BEGIN_DOCUMENT)

    preamble_commands = []
    if class_index is not None and begin_index is not None:
        for line in lines[class_index + 1 : begin_index]:
            stripped = line.strip()
            if not stripped or stripped.startswith("%"):
                continue
            if stripped.startswith(r"\usepackage") or stripped.startswith(r"\documentclass"):
                continue
            preamble_commands.append(line)

    return TemplateRequirements(document_class, packages, preamble_commands)


def _find_line(lines: List[str], marker: str) -> Optional[int]:
    for index, line in enumerate(lines):
        if marker in line:
            return index
    return None


def extract_document_body(source: str) -> str:
    """Text between \\begin{document} and \\end{document}, stripped ('' if absent)."""
    match = DOCUMENT_BODY_RE.search(source)
    return match.group(1).strip() if match else ""


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(SKELETONS_PATH)),
        undefined=StrictUndefined,
        variable_start_string="<<<",
        variable_end_string=">>>",
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        trim_blocks=True,
        lstrip_blocks=False,
        keep_trailing_newline=True,
    )


def generate_preview_template(source: str, options: PreviewOptions = None) -> str:
    """
    Generate a preview LaTeX document from template source.

    Args:
        source: Full template LaTeX source
        options: Title, content and package overrides

    Returns:
        Complete LaTeX document text
    """
    if options is None:
        options = PreviewOptions()

    requirements = extract_requirements(source)

    original_names = {parse_package(pkg).name for pkg in requirements.packages}
    essential = [pkg for pkg in COMMON_PACKAGES if parse_package(pkg).name not in original_names]

    packages = resolve_packages(
        requirements.packages + essential + list(options.additional_packages)
    )
    _log_debug(f"Preview preamble: {len(packages)} packages after resolution")

    preamble_parts = [COMMON_LATEX_COMMANDS if options.include_common_commands else ""]
    preamble_parts.extend(requirements.preamble_commands)
    preamble = "\n".join(part for part in preamble_parts if part)

    skeleton = _environment().get_template(PREVIEW_SKELETON)
    return skeleton.render(
        document_class=requirements.document_class,
        packages="\n".join(packages),
        preamble=preamble,
        title=options.title,
        author=options.author,
        date=options.date or "",
        content=options.content or extract_document_body(source),
    )
