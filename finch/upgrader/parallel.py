"""
Parallel processing module for the upgrader package.

Runs the single-file upgrade across many files with a bounded thread pool,
progress tracking and callback support. A failure in one file never stops
the others.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Callable, Any

from ..api import create_client
from ..models import FileOutcome, RunStats, UpgradeOptions, STATUS_FAILED
from .dependencies import HAS_TQDM, _tqdm_class
from .worker import SearchClient, process_file


def upgrade_images_parallel(
    filepaths: list[str],
    options: UpgradeOptions,
    client: Optional[SearchClient] = None,
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
    logger: Optional[logging.Logger] = None,
) -> tuple[list[FileOutcome], RunStats]:
    """
    Upgrade multiple images in parallel.

    Args:
        filepaths: Image paths to process; each path must appear once
        options: Shared run options
        client: Search/fetch collaborator shared by all workers (created if None)
        max_workers: Number of parallel workers (defaults to options.workers)
        progress_callback: Optional callback(current, total) for progress updates
        show_progress: Whether to show tqdm progress bar
        logger: Optional logger for status messages

    Returns:
        Tuple of (list of FileOutcome objects in completion order, RunStats)
    """
    stats = RunStats(total_files=len(filepaths))
    if not filepaths:
        return [], stats

    workers = max_workers or options.workers
    owns_client = client is None
    if owns_client:
        client = create_client(pool_size=workers, timeout=options.timeout)

    results: list[FileOutcome] = []
    start = time.time()

    pbar: Optional[Any] = None
    if HAS_TQDM and show_progress and _tqdm_class is not None:
        pbar = _tqdm_class(
            total=len(filepaths),
            desc="Upgrading images",
            unit="img",
            ncols=80,
        )

    try:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(process_file, path, options, client): path
                for path in filepaths
            }

            for i, future in enumerate(as_completed(futures)):
                try:
                    outcome = future.result()
                except Exception as e:
                    filepath = futures[future]
                    outcome = FileOutcome(path=filepath, status=STATUS_FAILED, error=str(e))
                    if logger:
                        logger.warning(f"Failed to process {filepath}, continuing... ({e})")

                results.append(outcome)
                stats.record(outcome)

                if logger and outcome.upgraded:
                    logger.info(f"Upgraded {outcome.path} ({outcome.resolution_change})")

                if pbar is not None:
                    pbar.update(1)

                if progress_callback:
                    progress_callback(i + 1, len(filepaths))
    finally:
        if pbar is not None:
            pbar.close()
        if owns_client:
            client.close()

    stats.elapsed = time.time() - start
    return results, stats


__all__ = ['upgrade_images_parallel']
