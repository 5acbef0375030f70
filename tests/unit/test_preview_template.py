"""Unit tests for the preview template generator."""

import pytest

from restex.contexts.templating.packages import parse_package
from restex.contexts.templating.preview_template import (
    PreviewOptions,
    extract_document_body,
    extract_requirements,
    generate_preview_template,
)

TEMPLATE = r"""\documentclass[10pt,a4paper]{article}
\usepackage{fontspec}
\usepackage[margin=2cm]{geometry}
\usepackage{paracol}
% A comment that is not a command
\setmainfont{Charter}
\newcommand{\role}[1]{\textit{#1}}

\begin{document}
\section{Experience}
\textcolor{blue}{Engineer}
\begin{tabularx}{\linewidth}{X}
cell
\end{tabularx}
\end{document}
"""


def _package_lines(document):
    return [line for line in document.split("\n") if line.startswith("\\usepackage")]


@pytest.mark.unit
def test_extract_requirements():
    requirements = extract_requirements(TEMPLATE)

    assert requirements.document_class == r"\documentclass[10pt,a4paper]{article}"
    assert requirements.packages[:3] == [
        r"\usepackage{fontspec}",
        r"\usepackage[margin=2cm]{geometry}",
        r"\usepackage{paracol}",
    ]
    assert r"\usepackage{tabularx}" in requirements.packages
    assert r"\usepackage[dvipsnames]{xcolor}" in requirements.packages
    assert requirements.preamble_commands == [
        r"\setmainfont{Charter}",
        r"\newcommand{\role}[1]{\textit{#1}}",
    ]


@pytest.mark.unit
def test_extract_requirements_defaults_to_article():
    assert extract_requirements("no class here").document_class == r"\documentclass{article}"


@pytest.mark.unit
def test_extract_document_body():
    assert extract_document_body("\\begin{document}\n  body  \n\\end{document}") == "body"
    assert extract_document_body("no body") == ""


@pytest.mark.unit
def test_generate_keeps_template_body_and_class():
    document = generate_preview_template(TEMPLATE)

    assert document.startswith(r"\documentclass[10pt,a4paper]{article}")
    assert "\\section{Experience}" in document
    assert document.rstrip().endswith("\\end{document}")
    assert "\\maketitle" not in document


@pytest.mark.unit
def test_generate_resolves_packages():
    """Test template packages win and fontspec drops the injected fontenc."""
    document = generate_preview_template(TEMPLATE)
    packages = _package_lines(document)
    names = [parse_package(line).name for line in packages]

    assert len(names) == len(set(names))
    assert "fontenc" not in names
    assert "fontspec" in names
    assert r"\usepackage[margin=2cm]{geometry}" in packages
    assert r"\usepackage[margin=1cm]{geometry}" not in packages
    # common packages come first
    assert names.index("geometry") < names.index("paracol")


@pytest.mark.unit
def test_generate_with_options():
    options = PreviewOptions(
        title="Jane Doe",
        author="Jane",
        content="Custom body",
        additional_packages=[r"\usepackage{multicol}"],
        include_common_commands=False,
    )

    document = generate_preview_template(TEMPLATE, options)

    assert "\\title{Jane Doe}" in document
    assert "\\author{Jane}" in document
    assert "\\maketitle" in document
    assert "Custom body" in document
    assert "\\section{Experience}" not in document
    assert r"\usepackage{multicol}" in document
    assert "\\cvSection" not in document


@pytest.mark.unit
def test_generate_includes_common_commands_by_default():
    document = generate_preview_template(TEMPLATE)

    assert "\\newcommand{\\cvSection}" in document
    assert "\\setmainfont{Charter}" in document
