"""
Toolchain Adapter

The only place the engine shells out. Wraps:
- the font catalog lister (fc-list)
- the package path resolver (kpsewhich <name>.sty)
- the two LaTeX engines (xelatex primary, pdflatex fallback)

Every call has a timeout. Lookup failures (missing binary, timeout, non-zero
exit) are reported as "not available" and logged with their cause; they are
never raised to the caller.
"""

import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from restex.contexts.rendering.logger import _log_debug, _log_warning

load_dotenv()
TOOLCHAIN_TIMEOUT = float(os.getenv("TOOLCHAIN_TIMEOUT", "10"))
COMPILER_TIMEOUT = float(os.getenv("COMPILER_TIMEOUT", "120"))
FONT_LISTER = os.getenv("FONT_LISTER", "fc-list")
PACKAGE_RESOLVER = os.getenv("PACKAGE_RESOLVER", "kpsewhich")

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out", ".toc", ".synctex.gz", ".fls", ".fdb_latexmk"]


class Engine(str, Enum):
    """The two interchangeable LaTeX engines."""

    XELATEX = "xelatex"
    PDFLATEX = "pdflatex"


class Toolchain(ABC):
    """Narrow interface over the font and package catalogs."""

    @abstractmethod
    def font_is_available(self, name: str) -> bool:
        """True iff the font catalog lists `name` (case-insensitive substring)."""

    @abstractmethod
    def package_is_available(self, name: str) -> bool:
        """True iff `<name>.sty` resolves in the TeX tree."""


class SubprocessToolchain(Toolchain):
    """Production adapter backed by fc-list and kpsewhich."""

    def __init__(
        self,
        timeout: float = TOOLCHAIN_TIMEOUT,
        font_lister: Sequence[str] = (FONT_LISTER,),
        package_resolver: str = PACKAGE_RESOLVER,
    ):
        self.timeout = timeout
        self.font_lister = list(font_lister)
        self.package_resolver = package_resolver

    def _run(self, cmd: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=self.timeout,
            check=False,
        )

    def list_fonts(self) -> Optional[str]:
        """Raw font catalog output, or None if the lister could not run."""
        try:
            result = self._run(self.font_lister)
        except (OSError, subprocess.SubprocessError) as e:
            _log_warning(f"Error checking font availability: {e}")
            return None

        if result.returncode != 0:
            _log_warning(f"{self.font_lister[0]} exited with code {result.returncode}")
            return None
        return result.stdout

    def font_is_available(self, name: str) -> bool:
        catalog = self.list_fonts()
        if catalog is None:
            return False
        available = name.lower() in catalog.lower()
        if not available:
            _log_debug(f"Font not in catalog: {name}")
        return available

    def package_is_available(self, name: str) -> bool:
        try:
            result = self._run([self.package_resolver, f"{name}.sty"])
        except (OSError, subprocess.SubprocessError) as e:
            _log_warning(f"Error checking package availability for {name}: {e}")
            return False

        if result.returncode != 0:
            _log_debug(f"Package not found by {self.package_resolver}: {name}")
            return False
        return True


def engine_is_installed(engine: Engine) -> bool:
    """Check whether an engine binary is on PATH."""
    return shutil.which(engine.value) is not None


@dataclass
class EngineRun:
    """
    Result of running one engine over a source file.

    Attributes:
        engine: Engine that was run
        success: Every pass exited 0 and a PDF was produced
        pdf_path: Produced PDF (None if missing)
        log_text: Engine .log content, or a description of why it could not run
        stdout: Combined stdout of all passes
        stderr: Combined stderr of all passes
    """

    engine: Engine
    success: bool
    pdf_path: Optional[Path] = None
    log_text: str = ""
    stdout: str = ""
    stderr: str = ""


def remove_artifacts(tex_file: Path, output_dir: Path) -> None:
    """Remove intermediate LaTeX files for a source in an output directory."""
    for ext in LATEX_ARTIFACTS:
        artifact_path = output_dir / f"{tex_file.stem}{ext}"
        if artifact_path.exists():
            artifact_path.unlink()


def run_engine(
    engine: Engine,
    tex_file: Path,
    output_dir: Path,
    num_passes: int = 2,
    timeout: float = COMPILER_TIMEOUT,
) -> EngineRun:
    """
    Compile a .tex file with one engine.

    Pure compilation function - assumes output_dir exists. Stale outputs for
    the same stem are removed first, so a PDF on disk always means this run
    produced it.

    Args:
        engine: Engine to run
        tex_file: Source file
        output_dir: Directory for the PDF and the .log
        num_passes: Number of passes (default: 2 for cross-references)
        timeout: Seconds allowed per pass

    Returns:
        EngineRun describing the outcome (never raises for engine failures)
    """
    stem = tex_file.stem
    for ext in [".pdf"] + LATEX_ARTIFACTS:
        old_file = output_dir / f"{stem}{ext}"
        if old_file.exists():
            old_file.unlink()

    all_stdout = []
    all_stderr = []
    success = True
    failure_reason = ""

    for _ in range(num_passes):
        cmd = [
            engine.value,
            "-interaction=nonstopmode",
            "-halt-on-error",
            "-file-line-error",
            f"-output-directory={output_dir}",
            str(tex_file),
        ]

        try:
            result = subprocess.run(
                cmd,
                cwd=tex_file.parent,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
                timeout=timeout,
            )
        except FileNotFoundError:
            success = False
            failure_reason = f"{engine.value} not found. Please install a LaTeX distribution."
            break
        except subprocess.TimeoutExpired:
            success = False
            failure_reason = f"{engine.value} timed out after {timeout:.0f}s"
            break

        all_stdout.append(result.stdout)
        all_stderr.append(result.stderr)

        if result.returncode != 0:
            success = False
            break

    log_file = output_dir / f"{stem}.log"
    if log_file.exists():
        # Engines write logs in latin-1 (font metadata contains non-UTF-8)
        log_text = log_file.read_text(encoding="latin-1")
    else:
        log_text = failure_reason or "\n".join(all_stdout) or "Error log not available"

    pdf_path = output_dir / f"{stem}.pdf"
    if not pdf_path.exists():
        success = False

    return EngineRun(
        engine=engine,
        success=success,
        pdf_path=pdf_path if pdf_path.exists() else None,
        log_text=log_text,
        stdout="\n".join(all_stdout),
        stderr="\n".join(all_stderr),
    )
