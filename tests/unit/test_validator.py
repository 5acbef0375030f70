"""Unit tests for template validation."""

import pytest

from restex.contexts.rendering.toolchain import Engine
from restex.contexts.rendering.validator import (
    ValidationResult,
    check_prerequisites,
    check_recommended_packages,
    check_structure,
    validate_requirements,
    validate_template,
)

from conftest import FakeToolchain, make_template

CHARTER_SOURCE = r"""\documentclass{article}
\usepackage[T1]{fontenc}
\usepackage[utf8]{inputenc}
\usepackage{geometry}
\usepackage{charter}
\begin{document}
%RESUME_CONTENT%
\end{document}
"""


@pytest.mark.unit
def test_valid_template(template):
    result = validate_template(template, FakeToolchain())

    assert isinstance(result, ValidationResult)
    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []


@pytest.mark.unit
def test_missing_class_and_environment():
    """Test the two structural errors for text with no LaTeX markers."""
    result = validate_template(make_template(source="Just some text"), FakeToolchain())

    assert not result.is_valid
    assert result.errors == ["Missing document class declaration", "Missing document environment"]


@pytest.mark.unit
def test_missing_end_of_document():
    errors = check_structure("\\documentclass{article}\n\\begin{document}\nunterminated")

    assert errors == ["Missing end of document"]


@pytest.mark.unit
def test_bare_document_warns_about_recommended_packages():
    source = "\\documentclass{article}\n\\begin{document}\n\\end{document}"

    result = validate_template(make_template(source=source), FakeToolchain())

    assert result.is_valid
    assert result.warnings == [
        "Missing recommended package: fontenc",
        "Missing recommended package: inputenc",
        "Missing recommended package: geometry",
    ]


@pytest.mark.unit
def test_fontspec_satisfies_fontenc():
    source = "\\usepackage{fontspec}\n\\usepackage[utf8]{inputenc}\n\\usepackage[a4paper]{geometry}"

    assert check_recommended_packages(source) == []


@pytest.mark.unit
def test_required_font_missing():
    template = make_template(source=CHARTER_SOURCE, required_fonts=("Charter",))

    result = validate_template(template, FakeToolchain(fonts=["DejaVu Sans"]))

    assert not result.is_valid
    assert result.errors == ["Required font not installed: Charter"]


@pytest.mark.unit
def test_required_font_installed():
    template = make_template(source=CHARTER_SOURCE, required_fonts=("Charter",))
    toolchain = FakeToolchain(fonts=["/usr/share/fonts/charter/Charter-Regular.otf: Charter:style=Regular"])

    result = validate_template(template, toolchain)

    assert result.is_valid
    assert toolchain.font_queries == ["Charter"]


@pytest.mark.unit
def test_requirement_errors_fonts_first_in_declared_order():
    template = make_template(
        required_fonts=("FiraSans", "FontAwesome"),
        custom_packages=("fontawesome", "FiraSans", "paracol"),
    )
    toolchain = FakeToolchain(fonts=[], packages=["FiraSans"])

    assert validate_requirements(template, toolchain) == [
        "Required font not installed: FiraSans",
        "Required font not installed: FontAwesome",
        "Required LaTeX package not installed: fontawesome",
        "Required LaTeX package not installed: paracol",
    ]


@pytest.mark.unit
def test_crashing_lookup_counts_as_missing():
    """Test a crashing lookup reads as not installed and the remaining checks still run."""
    template = make_template(required_fonts=("Charter", "FiraSans"), custom_packages=("paracol",))
    toolchain = FakeToolchain(fonts=["FiraSans"], packages=["paracol"], broken=["Charter"])

    result = validate_template(template, toolchain)

    assert not result.is_valid
    assert result.errors == ["Required font not installed: Charter"]
    assert toolchain.font_queries == ["Charter", "FiraSans"]
    assert toolchain.package_queries == ["paracol"]


@pytest.mark.unit
def test_structural_and_requirement_errors_combined():
    template = make_template(source="plain", custom_packages=("paracol",))

    result = validate_template(template, FakeToolchain())

    assert result.errors == [
        "Missing document class declaration",
        "Missing document environment",
        "Required LaTeX package not installed: paracol",
    ]


@pytest.mark.unit
def test_check_prerequisites(tmp_path):
    template = make_template(required_fonts=("Charter",))

    problems = check_prerequisites(
        [template],
        FakeToolchain(),
        templates_dir=tmp_path / "missing",
        engine_check=lambda engine: engine is Engine.XELATEX,
    )

    assert problems == [
        "pdflatex is not installed",
        f"Templates directory not found: {tmp_path / 'missing'}",
        "Test_Template: Required font not installed: Charter",
    ]


@pytest.mark.unit
def test_check_prerequisites_all_satisfied(tmp_path, template):
    problems = check_prerequisites(
        [template], FakeToolchain(), templates_dir=tmp_path, engine_check=lambda engine: True
    )

    assert problems == []


@pytest.mark.unit
def test_crashing_package_lookup_counts_as_missing():
    template = make_template(custom_packages=("paracol", "fontawesome5"))
    toolchain = FakeToolchain(packages=["fontawesome5"], broken=["paracol"])

    result = validate_template(template, toolchain)

    assert result.errors == ["Required LaTeX package not installed: paracol"]
