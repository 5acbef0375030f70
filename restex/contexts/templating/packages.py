"""
Package declaration model and resolver.

Parses \\usepackage declarations and merges competing declarations from a
template and the built-in defaults into one deduplicated, ordered preamble list.

Resolution rules:
1. Unparseable declarations are skipped (and logged)
2. Same package name: the declaration with options wins, ties keep the first seen
3. Superseded packages are dropped (fontspec drops fontenc, unicode-math drops amsmath)
4. Common packages come first, all other packages after, relative order preserved

Example:
    >>> resolve_packages([r"\\usepackage{foo}", r"\\usepackage[opt]{foo}"])
    ['\\\\usepackage[opt]{foo}']
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from restex.contexts.templating.defaults import COMMON_PACKAGES, SUPERSEDED_PACKAGES
from restex.contexts.templating.exceptions import InvalidPackageDeclarationError
from restex.contexts.templating.latex_patterns import PACKAGE_RE
from restex.contexts.templating.logger import log_skipped_declaration


@dataclass(frozen=True)
class PackageDeclaration:
    """
    One parsed \\usepackage declaration.

    Attributes:
        name: Package name as written between braces
        options: Bracketed options, or None when absent/empty
        raw_text: The declaration exactly as given
        priority: 2 when options are present, 1 otherwise
    """

    name: str
    options: Optional[str]
    raw_text: str
    priority: int


def parse_package(declaration: str) -> PackageDeclaration:
    """
    Parse a package declaration string.

    Raises:
        InvalidPackageDeclarationError: If the string holds no \\usepackage{...}
    """
    match = PACKAGE_RE.search(declaration)
    if not match:
        raise InvalidPackageDeclarationError(declaration)

    options = match.group(1) or None
    return PackageDeclaration(
        name=match.group(2).strip(),
        options=options,
        raw_text=declaration,
        priority=2 if options else 1,
    )


def _common_package_names() -> Set[str]:
    return {parse_package(pkg).name for pkg in COMMON_PACKAGES}


COMMON_PACKAGE_NAMES = _common_package_names()


def resolve_packages(declarations: Iterable[str]) -> List[str]:
    """
    Deduplicate and order package declarations.

    Never raises for malformed input; bad declarations are logged and dropped.

    Args:
        declarations: Raw \\usepackage strings (template packages, defaults, extras)

    Returns:
        Raw declaration strings, one per package name, common packages first
    """
    by_name: Dict[str, PackageDeclaration] = {}

    for declaration in declarations:
        try:
            parsed = parse_package(declaration)
        except InvalidPackageDeclarationError:
            log_skipped_declaration(declaration)
            continue

        existing = by_name.get(parsed.name)
        if existing is None or parsed.priority > existing.priority:
            by_name[parsed.name] = parsed

    for superseding, superseded_names in SUPERSEDED_PACKAGES.items():
        if superseding in by_name:
            for superseded in superseded_names:
                by_name.pop(superseded, None)

    common = [d.raw_text for d in by_name.values() if d.name in COMMON_PACKAGE_NAMES]
    other = [d.raw_text for d in by_name.values() if d.name not in COMMON_PACKAGE_NAMES]

    return common + other


def extract_package_declarations(source: str) -> List[str]:
    """Return every \\usepackage declaration in source order."""
    return [match.group(0) for match in PACKAGE_RE.finditer(source)]


def extract_package_names(source: str) -> List[str]:
    """
    Return package names in source order, splitting comma lists.

    \\usepackage{amsmath,amssymb} yields both names.
    """
    names = []
    for match in PACKAGE_RE.finditer(source):
        for name in match.group(2).split(","):
            name = name.strip()
            if name and name not in names:
                names.append(name)
    return names


def declared_package_names(source: str) -> Set[str]:
    """
    Names of the packages a source effectively declares after resolution.

    Superseded packages are absent; use is_superseded() to treat them as satisfied.
    """
    names: Set[str] = set()
    for raw in resolve_packages(extract_package_declarations(source)):
        names.update(n.strip() for n in parse_package(raw).name.split(","))
    return names


def is_superseded(name: str, declared: Set[str]) -> bool:
    """Check whether a declared package makes `name` redundant."""
    return any(
        superseding in declared and name in superseded_names
        for superseding, superseded_names in SUPERSEDED_PACKAGES.items()
    )
