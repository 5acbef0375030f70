"""
Compilation Orchestrator

Compiles a .tex file to PDF with a bounded retry loop over two engines:
attempt n uses xelatex when n is odd and pdflatex when n is even. Each failed
attempt has its log classified and copied to the log directory, then the loop
waits n * base_delay before trying again.

Retries are driven by tenacity, so a cancellation event plugs straight into
the stop strategy (checked between attempts only).
"""

import os
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import load_dotenv
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_when_event_set,
    wait_incrementing,
)

from restex.contexts.rendering.exceptions import AttemptFailed, ErrorKind, LatexCompilationError
from restex.contexts.rendering.logger import (
    _log_debug,
    log_attempt_failure,
    log_attempt_start,
    log_compilation_result,
    log_compilation_start,
    log_retry_wait,
)
from restex.contexts.rendering.toolchain import Engine, EngineRun, remove_artifacts, run_engine

load_dotenv()
MAX_RETRIES = 3
RETRY_BASE_DELAY = float(os.getenv("RETRY_BASE_DELAY", "1.0"))

EngineRunner = Callable[[Engine, Path, Path], EngineRun]


@dataclass
class CompilationAttempt:
    """
    One try at compiling a source file.

    Attributes:
        attempt_number: 1..MAX_RETRIES
        engine: Engine used for this attempt
        error_log: Engine log text (empty on success)
        classified_kind: Classification of the failure (NONE on success)
    """

    attempt_number: int
    engine: Engine
    error_log: str = ""
    classified_kind: ErrorKind = ErrorKind.NONE


@dataclass
class CompilationOutcome:
    """PDF bytes of a successful compile, with every attempt it took."""

    pdf_bytes: bytes
    attempts: List[CompilationAttempt] = field(default_factory=list)


def classify_error(log_text: str) -> ErrorKind:
    """
    Classify a failed compile from its log.

    Package errors take precedence over font errors when both appear.
    """
    if "Package" in log_text and "not found" in log_text:
        return ErrorKind.PACKAGE_ERROR
    if "Font" in log_text and "not found" in log_text:
        return ErrorKind.FONT_ERROR
    return ErrorKind.COMPILATION_ERROR


def engine_for_attempt(attempt_number: int) -> Engine:
    """xelatex on odd attempts, pdflatex on even ones."""
    return Engine.XELATEX if attempt_number % 2 == 1 else Engine.PDFLATEX


class CompilationOrchestrator:
    """
    Bounded retry state machine over the two LaTeX engines.

    Args:
        run_engine: Callable (engine, tex_file, output_dir) -> EngineRun
        base_delay: Seconds of backoff per attempt number
        sleep: Sleep function used between attempts
        max_retries: Total number of attempts
        cancel_event: When set, no further attempt is started
    """

    def __init__(
        self,
        run_engine: EngineRunner = run_engine,
        base_delay: float = RETRY_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        max_retries: int = MAX_RETRIES,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.run_engine = run_engine
        self.base_delay = base_delay
        self.sleep = sleep
        self.max_retries = max_retries
        self.cancel_event = cancel_event

    def _retrying(self, file_name: str) -> Retrying:
        stop = stop_after_attempt(self.max_retries)
        if self.cancel_event is not None:
            stop = stop | stop_when_event_set(self.cancel_event)

        def _before_sleep(retry_state: RetryCallState) -> None:
            failure = retry_state.outcome.exception()
            log_retry_wait(file_name, retry_state.next_action.sleep, failure.attempt.classified_kind)

        return Retrying(
            sleep=self.sleep,
            stop=stop,
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            retry=retry_if_exception_type(AttemptFailed),
            before_sleep=_before_sleep,
            reraise=True,
        )

    def _attempt(
        self,
        tex_file: Path,
        output_dir: Path,
        log_dir: Path,
        attempts: List[CompilationAttempt],
    ) -> bytes:
        attempt_number = len(attempts) + 1
        engine = engine_for_attempt(attempt_number)
        log_attempt_start(tex_file.name, attempt_number, self.max_retries, engine)

        run = self.run_engine(engine, tex_file, output_dir)

        if run.success and run.pdf_path is not None:
            attempts.append(CompilationAttempt(attempt_number, engine))
            return Path(run.pdf_path).read_bytes()

        attempt = CompilationAttempt(
            attempt_number=attempt_number,
            engine=engine,
            error_log=run.log_text,
            classified_kind=classify_error(run.log_text),
        )
        attempts.append(attempt)
        log_attempt_failure(tex_file.name, attempt)

        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"{tex_file.stem}-error-{attempt_number}.log"
        log_path.write_text(run.log_text, encoding="utf-8")
        _log_debug(f"Saved error log: {log_path}")

        raise AttemptFailed(attempt, log_path)

    def run(self, tex_file: Path, output_dir: Path, log_dir: Path) -> CompilationOutcome:
        """
        Compile a source file, retrying across engines.

        Args:
            tex_file: Source file to compile
            output_dir: Directory for the engine's outputs
            log_dir: Directory failed-attempt logs are copied to

        Returns:
            CompilationOutcome with the PDF bytes and all attempts

        Raises:
            LatexCompilationError: When every attempt failed
        """
        tex_file = Path(tex_file)
        output_dir = Path(output_dir)
        log_dir = Path(log_dir)
        attempts: List[CompilationAttempt] = []

        log_compilation_start(tex_file.stem, tex_file, output_dir)
        start_time = time.time()

        try:
            pdf_bytes = self._retrying(tex_file.name)(
                self._attempt, tex_file, output_dir, log_dir, attempts
            )
        except AttemptFailed as e:
            log_compilation_result(tex_file.stem, False, time.time() - start_time, len(attempts))
            if self.cancel_event is not None and self.cancel_event.is_set():
                message = f"Compilation of {tex_file.name} cancelled after {len(attempts)} attempt(s)"
            else:
                message = f"Failed to compile {tex_file.name} after {len(attempts)} attempts"
            raise LatexCompilationError(
                message,
                kind=e.attempt.classified_kind,
                log_path=e.log_path,
                attempts=attempts,
            ) from e
        finally:
            remove_artifacts(tex_file, output_dir)

        log_compilation_result(tex_file.stem, True, time.time() - start_time, len(attempts))
        return CompilationOutcome(pdf_bytes=pdf_bytes, attempts=attempts)

    def compile(self, tex_file: Path, output_dir: Path, log_dir: Path) -> bytes:
        """Compile a source file and return the PDF bytes."""
        return self.run(tex_file, output_dir, log_dir).pdf_bytes
