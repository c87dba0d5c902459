#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Job runner: render every selected file, sequentially or in a process pool.

Each file is an independent unit of work (validate, preprocess, render)
handled by :func:`csvpreview.sections.render_file_section`. Parallel results
are collected as they complete and then put back into candidate order, so
both modes produce the same report.
"""

from __future__ import annotations

import logging
import multiprocessing
from concurrent.futures import Executor, Future, ProcessPoolExecutor, as_completed
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Callable, Optional, Sequence

from csvpreview.config import RunConfig
from csvpreview.progress import ProgressCallback, ProgressEvent
from csvpreview.sections import FileSection, render_file_section
from csvpreview.selection import FileCandidate
from csvpreview.tools import Toolkit

logger = logging.getLogger(__name__)

ExecutorFactory = Callable[..., Executor]


def log_progress(event: ProgressEvent) -> None:
    """Default progress callback: report events through the logger."""
    if event.event_type == "error":
        logger.debug(event.message)
    else:
        logger.info(event.message)


def _emit(callback: ProgressCallback, event: ProgressEvent) -> None:
    try:
        callback(event)
    except Exception as exc:
        logger.warning(f"Progress callback failed: {exc}", exc_info=True)


def _item_event(section: FileSection, done: int, total: int) -> ProgressEvent:
    percent = done * 100 // total
    return ProgressEvent(
        "item_done",
        f"Processing file {done} of {total}: {section.candidate.display_name} ({percent}%)",
        current=done,
        total=total,
        metadata={"item_type": "file", "path": section.candidate.display_name, "percent": percent},
    )


def _report_section(callback: ProgressCallback, section: FileSection, done: int, total: int) -> None:
    if not section.is_valid:
        _emit(
            callback,
            ProgressEvent(
                "error",
                f"Skipped {section.candidate.display_name}: {section.reason}",
                current=done,
                total=total,
                metadata={"path": section.candidate.display_name, "error": section.reason},
            ),
        )
    _emit(callback, _item_event(section, done, total))


def run_sequential(
    candidates: Sequence[FileCandidate], config: RunConfig, toolkit: Toolkit, callback: ProgressCallback
) -> list[FileSection]:
    sections = []
    total = len(candidates)
    for index, candidate in enumerate(candidates, start=1):
        section = render_file_section(candidate, config, toolkit)
        sections.append(section)
        _report_section(callback, section, index, total)
    return sections


def init_worker_logging(log_queue: Any, level: int) -> None:
    """Route a worker process's log records to the parent through ``log_queue``.

    Used as the executor initializer. Worker threads share the parent's
    handlers already, so nothing changes outside a child process.
    """
    if multiprocessing.parent_process() is None:
        return
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(QueueHandler(log_queue))
    root_logger.setLevel(level)


def run_parallel(
    candidates: Sequence[FileCandidate],
    config: RunConfig,
    toolkit: Toolkit,
    callback: ProgressCallback,
    executor_factory: ExecutorFactory = ProcessPoolExecutor,
) -> list[FileSection]:
    total = len(candidates)
    results: dict[int, FileSection] = {}

    root_logger = logging.getLogger()
    log_queue: Any = multiprocessing.Queue()
    listener = QueueListener(log_queue, *root_logger.handlers, respect_handler_level=True)
    listener.start()
    try:
        with executor_factory(
            max_workers=config.workers,
            initializer=init_worker_logging,
            initargs=(log_queue, root_logger.getEffectiveLevel()),
        ) as executor:
            futures: dict[Future[FileSection], int] = {
                executor.submit(render_file_section, candidate, config, toolkit): index
                for index, candidate in enumerate(candidates)
            }
            for done, future in enumerate(as_completed(futures), start=1):
                section = future.result()
                results[futures[future]] = section
                _report_section(callback, section, done, total)
    finally:
        listener.stop()
        log_queue.close()

    return [results[index] for index in range(total)]


def run_jobs(
    candidates: Sequence[FileCandidate],
    config: RunConfig,
    toolkit: Toolkit,
    progress_callback: Optional[ProgressCallback] = None,
    executor_factory: ExecutorFactory = ProcessPoolExecutor,
) -> list[FileSection]:
    """Render all candidates and return their sections in candidate order.

    Parameters
    ----------
    candidates : sequence of FileCandidate
        Files to render, already sorted
    config : RunConfig
        Run configuration; ``parallel`` and ``workers`` select the mode
    toolkit : Toolkit
        External tools; must be picklable in parallel mode
    progress_callback : ProgressCallback, optional
        Receives progress events. Defaults to logging them at INFO level.
    executor_factory : callable, default ProcessPoolExecutor
        Builds the executor for parallel mode from ``max_workers``

    Returns
    -------
    list[FileSection]
        One section per candidate, skipped files included

    """
    callback = progress_callback or log_progress
    total = len(candidates)
    mode = "parallel" if config.parallel else "sequential"

    _emit(callback, ProgressEvent("started", f"Processing {total} file(s) ({mode})", total=total))

    if config.parallel:
        sections = run_parallel(candidates, config, toolkit, callback, executor_factory)
    else:
        sections = run_sequential(candidates, config, toolkit, callback)

    _emit(callback, ProgressEvent("finished", f"Rendered {total} file(s)", current=total, total=total))
    return sections
