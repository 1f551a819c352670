"""
CLI workflow orchestration for Finch.

Provides the CLIOrchestrator class that coordinates the entire CLI workflow
from argument parsing through final reporting.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..api import create_client
from ..models import UpgradeOptions
from ..upgrader import find_image_files, upgrade_images_parallel
from .arg_parser import parse_arguments
from .reporting import print_upgrade_report


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI workflow.

    Manages the complete lifecycle from argument parsing through scanning,
    upgrading and reporting. Per-file failures never change the exit code;
    only an unusable directory or invalid options do.
    """

    def __init__(self, argv=None):
        """Initialize the orchestrator."""
        self.argv = argv
        self.logger = None
        self.args = None
        self.options = None
        self.directory = None
        self.image_files = []
        self.outcomes = []
        self.stats = None

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error)
        """
        self._setup_phase()

        exit_code = self._validate_phase()
        if exit_code != 0:
            return exit_code

        exit_code = self._scan_phase()
        if exit_code != 0:
            return exit_code

        self._upgrade_phase()
        self._report_phase()
        return 0

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

    def _validate_phase(self) -> int:
        """
        Phase 2: Validate arguments and build run options.

        Returns:
            0 for success, 1 for validation error
        """
        # Relative directories are resolved against the working directory
        try:
            self.directory = (Path.cwd() / self.args.directory).resolve()
        except OSError as e:
            self.logger.error(f"The current working directory is invalid: {e}")
            return 1

        if not self.directory.is_dir():
            self.logger.error(f"Directory not found: {self.directory}")
            return 1

        try:
            self.options = UpgradeOptions(
                api_key=self.args.api_key or "",
                tolerance=self.args.tolerance,
                workers=self.args.workers,
                timeout=self.args.timeout,
            )
        except ValueError as e:
            self.logger.error(str(e))
            return 1

        return 0

    def _scan_phase(self) -> int:
        """
        Phase 3: Find uploadable images.

        Returns:
            0 for success, 1 if the directory cannot be read
        """
        self.logger.info(f"Scanning {self.directory}...")
        try:
            self.image_files = find_image_files(
                self.directory,
                recursive=not self.args.no_recursive,
            )
        except OSError as e:
            self.logger.error(f"Cannot scan {self.directory}: {e}")
            return 1

        self.logger.info(f"Found {len(self.image_files):,} images")
        return 0

    def _upgrade_phase(self) -> None:
        """Phase 4: Upgrade every image with the worker pool."""
        if not self.image_files:
            self.outcomes, self.stats = [], None
            return

        with create_client(pool_size=self.options.workers, timeout=self.options.timeout) as client:
            self.outcomes, self.stats = upgrade_images_parallel(
                self.image_files,
                self.options,
                client=client,
                show_progress=not self.args.no_progress,
                logger=self.logger,
            )

    def _report_phase(self) -> None:
        """Phase 5: Print the summary."""
        if self.stats is None:
            self.logger.info("No images to process")
            return
        print_upgrade_report(self.outcomes, self.stats)


__all__ = ['CLIOrchestrator', 'setup_logging']
