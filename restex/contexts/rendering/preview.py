"""
Template preview generation.

Builds the preview source for a template, compiles it inside a per-run
directory under TEMP_PATH, rasterizes the first page into the thumbnails
directory, and removes the run directory on every exit path.

Run directories are named by run_token() (timestamp + random suffix), so
concurrent previews never share files. sweep_stale_runs() removes directories
left behind by processes that died mid-run.
"""

import os
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from dotenv import load_dotenv

from restex.contexts.rendering.cache import PreviewCache
from restex.contexts.rendering.compiler import CompilationAttempt, CompilationOrchestrator
from restex.contexts.rendering.logger import _log_debug, _log_info, _log_success, _log_warning
from restex.contexts.rendering.rasterizer import rasterize_preview, thumbnail_paths
from restex.contexts.templating.defaults import SAMPLE_CONTENT
from restex.contexts.templating.preview_template import PreviewOptions, generate_preview_template
from restex.contexts.templating.template_registry import PROJECT_ROOT, Template
from restex.contexts.templating.transformer import render_template, transform_content
from restex.contexts.templating.transforms import TransformRegistry
from restex.utils.pdf_processing import page_count
from restex.utils.timestamp import run_token

load_dotenv()
THUMBNAILS_PATH = Path(os.getenv("THUMBNAILS_PATH", PROJECT_ROOT / "public" / "templates" / "thumbnails"))
TEMP_PATH = Path(os.getenv("TEMP_PATH", PROJECT_ROOT / "outs" / "tmp"))
LOGS_PATH = Path(os.getenv("LOGS_PATH", PROJECT_ROOT / "outs" / "logs"))
PREVIEW_CACHE_PATH = Path(os.getenv("PREVIEW_CACHE_PATH", PROJECT_ROOT / "outs" / "preview_cache"))

STALE_RUN_AGE = 24 * 60 * 60

Rasterizer = Callable[[bytes, Path, str], Tuple[Path, Path]]


@dataclass
class PreviewResult:
    """
    Result of compiling a template preview.

    Attributes:
        template_id: Template that was previewed
        pdf_bytes: Compiled PDF
        image_paths: (standard, double-density) thumbnails
        page_count: Pages in the PDF (None if unreadable)
        attempts: Compile attempts (empty when served from cache)
        from_cache: Whether the PDF came from the preview cache
    """

    template_id: str
    pdf_bytes: bytes
    image_paths: Tuple[Path, Path]
    page_count: Optional[int] = None
    attempts: List[CompilationAttempt] = field(default_factory=list)
    from_cache: bool = False


def build_preview_source(
    template: Template,
    content: Optional[str] = None,
    transforms: Optional[TransformRegistry] = None,
) -> str:
    """
    Full LaTeX source to compile for a preview.

    Templates with a content placeholder get the content (or sample content)
    placed into their own source. Templates without one go through the preview
    template generator, keeping their own body unless content is given.
    """
    if template.content_placeholder in template.latex_source:
        return render_template(template, content if content is not None else SAMPLE_CONTENT, transforms)

    options = PreviewOptions()
    if content is not None:
        options.content = transform_content(template, content, transforms)
    return generate_preview_template(template.latex_source, options)


def compile_preview(
    template: Template,
    content: Optional[str] = None,
    orchestrator: Optional[CompilationOrchestrator] = None,
    rasterize: Rasterizer = rasterize_preview,
    thumbnails_dir: Path = THUMBNAILS_PATH,
    temp_dir: Path = TEMP_PATH,
    logs_dir: Path = LOGS_PATH,
    cache: Optional[PreviewCache] = None,
    transforms: Optional[TransformRegistry] = None,
) -> PreviewResult:
    """
    Compile a template preview and rasterize it.

    Args:
        template: Template to preview
        content: Resume content (defaults to sample content / template body)
        orchestrator: Compilation orchestrator (defaults to a new one)
        rasterize: (pdf_bytes, output_dir, name) -> (standard, retina) paths
        thumbnails_dir: Directory for the PNG thumbnails
        temp_dir: Parent of the per-run working directory
        logs_dir: Parent of the per-run log directory (failed-attempt logs)
        cache: Optional preview cache (keyed on the source that gets compiled)
        transforms: Rewrite strategies (defaults to the built-in set)

    Returns:
        PreviewResult

    Raises:
        LatexCompilationError: If every compile attempt failed
        RasterizationError: If the PDF could not be rasterized
    """
    if orchestrator is None:
        orchestrator = CompilationOrchestrator()

    source = build_preview_source(template, content, transforms)
    name = template.normalized_id

    cache_key = None
    pdf_bytes = None
    if cache is not None:
        cache_key = cache.key(source)
        pdf_bytes = cache.get(cache_key)
        if pdf_bytes is not None:
            _log_info(f"{template.id}: using cached preview")

    token = run_token()
    run_dir = Path(temp_dir) / token
    run_dir.mkdir(parents=True, exist_ok=False)
    _log_debug(f"Created run directory: {run_dir}")

    attempts: List[CompilationAttempt] = []
    try:
        from_cache = pdf_bytes is not None
        if not from_cache:
            tex_file = run_dir / f"{name}.tex"
            tex_file.write_text(source, encoding="utf-8")

            outcome = orchestrator.run(tex_file, run_dir, Path(logs_dir) / f"preview_{token}")
            pdf_bytes = outcome.pdf_bytes
            attempts = outcome.attempts

            if cache is not None:
                cache.put(cache_key, pdf_bytes)

        image_paths = rasterize(pdf_bytes, Path(thumbnails_dir), name)
    finally:
        shutil.rmtree(run_dir, ignore_errors=True)
        _log_debug(f"Removed run directory: {run_dir}")

    _log_success(f"{template.id}: preview written to {image_paths[0]}")
    return PreviewResult(
        template_id=template.id,
        pdf_bytes=pdf_bytes,
        image_paths=tuple(image_paths),
        page_count=page_count(pdf_bytes),
        attempts=attempts,
        from_cache=from_cache,
    )


def sweep_stale_runs(
    temp_dir: Path = TEMP_PATH,
    max_age_seconds: float = STALE_RUN_AGE,
    clock: Callable[[], float] = time.time,
) -> int:
    """
    Remove run directories older than max_age_seconds.

    Returns:
        Number of directories removed
    """
    temp_dir = Path(temp_dir)
    if not temp_dir.is_dir():
        return 0

    removed = 0
    cutoff = clock() - max_age_seconds
    for run_dir in temp_dir.iterdir():
        if not run_dir.is_dir() or run_dir.stat().st_mtime >= cutoff:
            continue
        try:
            shutil.rmtree(run_dir)
            removed += 1
        except OSError as e:
            _log_warning(f"Could not remove stale run directory {run_dir}: {e}")

    if removed:
        _log_info(f"Swept {removed} stale run director{'y' if removed == 1 else 'ies'} from {temp_dir}")
    return removed


def thumbnails_up_to_date(template: Template, thumbnails_dir: Path = THUMBNAILS_PATH) -> bool:
    """True when both thumbnails exist and are newer than the template source."""
    paths = thumbnail_paths(thumbnails_dir, template.normalized_id)
    if not all(path.exists() for path in paths):
        return False

    try:
        source_mtime = Path(template.source_path).stat().st_mtime
    except OSError:
        return False
    return all(path.stat().st_mtime >= source_mtime for path in paths)
