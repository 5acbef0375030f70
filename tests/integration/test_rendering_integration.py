"""
Integration tests for rendering context - tests real LaTeX compilation.
"""

import shutil

import pytest

from restex.contexts.rendering.compiler import CompilationOrchestrator
from restex.contexts.rendering.exceptions import ErrorKind, LatexCompilationError
from restex.contexts.rendering.preview import compile_preview
from restex.contexts.rendering.toolchain import Engine, SubprocessToolchain, run_engine
from restex.contexts.rendering.validator import validate_template
from restex.contexts.templating.template_registry import TemplateRegistry
from restex.utils.pdf_processing import is_pdf

# Check if xelatex is available
XELATEX_AVAILABLE = shutil.which("xelatex") is not None
PDFTOPPM_AVAILABLE = shutil.which("pdftoppm") is not None
skip_if_no_xelatex = pytest.mark.skipif(
    not XELATEX_AVAILABLE,
    reason="xelatex not installed - install TeX Live, MiKTeX, or MacTeX"
)
skip_if_no_pdftoppm = pytest.mark.skipif(
    not PDFTOPPM_AVAILABLE,
    reason="pdftoppm not installed - install poppler-utils"
)

SIMPLE_DOCUMENT = r"""
\documentclass{article}
\begin{document}
Hello, preview.
\end{document}
"""


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_xelatex
def test_run_engine_compiles_simple_document(tmp_path):
    tex_file = tmp_path / "simple.tex"
    tex_file.write_text(SIMPLE_DOCUMENT)

    run = run_engine(Engine.XELATEX, tex_file, tmp_path, num_passes=1)

    assert run.success, run.log_text[-2000:]
    assert run.pdf_path.exists()
    assert is_pdf(run.pdf_path.read_bytes())


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_xelatex
def test_missing_package_is_classified(tmp_path):
    """Test a missing .sty fails every attempt and is reported as a package error."""
    tex_file = tmp_path / "broken.tex"
    tex_file.write_text(
        r"""
\documentclass{article}
\usepackage{thispackagedoesnotexist}
\begin{document}
x
\end{document}
"""
    )
    orchestrator = CompilationOrchestrator(base_delay=0.0, sleep=lambda _: None)

    with pytest.raises(LatexCompilationError) as exc_info:
        orchestrator.compile(tex_file, tmp_path, tmp_path / "logs")

    assert exc_info.value.kind is not ErrorKind.NONE
    assert len(exc_info.value.attempts) == 3
    assert exc_info.value.log_path.exists()


@pytest.mark.integration
def test_shipped_templates_are_structurally_valid():
    """Test every catalog template passes the structural and advisory checks."""
    registry = TemplateRegistry.from_config()

    class EverythingInstalled(SubprocessToolchain):
        def font_is_available(self, name):
            return True

        def package_is_available(self, name):
            return True

    for template in registry:
        result = validate_template(template, EverythingInstalled())
        assert result.is_valid, result.errors
        assert result.warnings == []


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_xelatex
@skip_if_no_pdftoppm
def test_compile_preview_writes_thumbnails(tmp_path):
    registry = TemplateRegistry.from_config()
    template = registry.get("Default_Resume")

    if validate_template(template).errors:
        pytest.skip("Default_Resume requirements not installed")

    result = compile_preview(
        template,
        orchestrator=CompilationOrchestrator(base_delay=0.0, sleep=lambda _: None),
        thumbnails_dir=tmp_path / "thumbnails",
        temp_dir=tmp_path / "tmp",
        logs_dir=tmp_path / "logs",
    )

    regular, retina = result.image_paths
    assert regular.name == "default_resume.png"
    assert retina.name == "default_resume@2x.png"
    assert regular.exists() and retina.exists()
    assert result.page_count >= 1
    assert list((tmp_path / "tmp").iterdir()) == []
