"""Shared fixtures and fakes for RESTEX tests."""

import sys
from pathlib import Path
from typing import Iterable, List, Optional

import pytest
from loguru import logger

from restex.contexts.rendering.toolchain import Engine, EngineRun, Toolchain
from restex.contexts.templating.template_registry import Template


def _minimal_pdf() -> bytes:
    """A one-page PDF with a correct cross-reference table."""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>",
    ]
    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return out


MINIMAL_PDF = _minimal_pdf()

VALID_SOURCE = r"""\documentclass[11pt]{article}
\usepackage[T1]{fontenc}
\usepackage[utf8]{inputenc}
\usepackage[margin=1in]{geometry}
\begin{document}
%RESUME_CONTENT%
\end{document}
"""


class FakeToolchain(Toolchain):
    """In-memory toolchain with a fixed set of installed fonts and packages."""

    def __init__(
        self,
        fonts: Iterable[str] = (),
        packages: Iterable[str] = (),
        broken: Iterable[str] = (),
    ):
        self.fonts = [f.lower() for f in fonts]
        self.packages = set(packages)
        self.broken = set(broken)
        self.font_queries: List[str] = []
        self.package_queries: List[str] = []

    def font_is_available(self, name: str) -> bool:
        self.font_queries.append(name)
        if name in self.broken:
            raise RuntimeError(f"font catalog unavailable for {name}")
        return any(name.lower() in font for font in self.fonts)

    def package_is_available(self, name: str) -> bool:
        self.package_queries.append(name)
        if name in self.broken:
            raise RuntimeError(f"package resolver crashed for {name}")
        return name in self.packages


class FakeEngineRunner:
    """
    Stand-in for run_engine.

    Each call consumes the next scripted outcome: a log string means failure,
    None means success (a PDF is written to the output directory).
    """

    def __init__(self, outcomes: Optional[List[Optional[str]]] = None, fail_log: str = "! Emergency stop."):
        self.outcomes = list(outcomes) if outcomes is not None else None
        self.fail_log = fail_log
        self.calls: List[Engine] = []

    def __call__(self, engine: Engine, tex_file: Path, output_dir: Path) -> EngineRun:
        self.calls.append(engine)
        outcome = self.outcomes.pop(0) if self.outcomes is not None else self.fail_log

        if outcome is None:
            pdf_path = Path(output_dir) / f"{Path(tex_file).stem}.pdf"
            pdf_path.write_bytes(MINIMAL_PDF)
            return EngineRun(engine=engine, success=True, pdf_path=pdf_path)

        return EngineRun(engine=engine, success=False, log_text=outcome)


class FakeRasterizer:
    """Writes placeholder PNG files instead of calling pdftoppm."""

    def __init__(self):
        self.calls = []

    def __call__(self, pdf_bytes: bytes, output_dir: Path, name: str):
        self.calls.append((pdf_bytes, output_dir, name))
        output_dir.mkdir(parents=True, exist_ok=True)
        regular = output_dir / f"{name}.png"
        retina = output_dir / f"{name}@2x.png"
        regular.write_bytes(b"png")
        retina.write_bytes(b"png@2x")
        return regular, retina


def make_template(
    source: str = VALID_SOURCE,
    template_id: str = "Test_Template",
    source_path: Optional[Path] = None,
    **kwargs,
) -> Template:
    return Template(
        id=template_id,
        name=template_id.replace("_", " "),
        source_path=source_path or Path(f"/templates/{template_id}.tex"),
        latex_source=source,
        **kwargs,
    )


@pytest.fixture
def template() -> Template:
    return make_template()


@pytest.fixture
def sleeps() -> List[float]:
    """Records delays passed to an injected sleep function."""
    return []


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks a test configured (they may point at pytest's captured stdout)."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
