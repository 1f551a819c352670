"""
Data models for Finch.

Contains dataclasses for search candidates, run options, evaluator verdicts
and per-file outcomes.
"""

from dataclasses import dataclass
from typing import Any, Optional
import os

from .config import DEFAULT_TIMEOUT, DEFAULT_TOLERANCE, DEFAULT_WORKERS


@dataclass(frozen=True)
class CandidateImage:
    """A remote copy of an image returned by the reverse image search."""
    url: str


@dataclass(frozen=True)
class UpgradeOptions:
    """
    Read-only options shared by every worker.

    Attributes:
        api_key: Google Vision API key
        tolerance: Minimum similarity (exclusive) for a candidate to be accepted
        workers: Size of the worker pool
        timeout: Seconds to wait on each HTTP request
    """
    api_key: str
    tolerance: float = DEFAULT_TOLERANCE
    workers: int = DEFAULT_WORKERS
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        if not self.api_key:
            raise ValueError("An API key is required")
        if not 0.0 <= self.tolerance <= 1.0:
            raise ValueError(f"Tolerance must be between 0 and 1, got {self.tolerance}")
        if self.workers < 1:
            raise ValueError(f"Workers must be at least 1, got {self.workers}")


@dataclass
class UpgradeVerdict:
    """
    Result of scanning the candidates for one reference image.

    When accepted, `image` holds the already decoded candidate so the
    caller can write it without fetching again.
    """
    accepted: bool = False
    index: Optional[int] = None
    candidate: Optional[CandidateImage] = None
    image: Any = None
    similarity: Optional[float] = None
    checked: int = 0
    skipped: int = 0
    rejected: int = 0


STATUS_UPGRADED = "upgraded"
STATUS_UNCHANGED = "unchanged"
STATUS_FAILED = "failed"


@dataclass
class FileOutcome:
    """Per-file result collected by the coordinator."""
    path: str
    status: str = STATUS_UNCHANGED
    old_width: int = 0
    old_height: int = 0
    new_width: int = 0
    new_height: int = 0
    url: Optional[str] = None
    similarity: Optional[float] = None
    error: Optional[str] = None

    @property
    def filename(self) -> str:
        """Return just the filename portion of the path."""
        return os.path.basename(self.path)

    @property
    def upgraded(self) -> bool:
        return self.status == STATUS_UPGRADED

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAILED

    @property
    def resolution_change(self) -> str:
        """Return 'WxH -> WxH' for upgraded files, 'WxH' otherwise."""
        old = f"{self.old_width}x{self.old_height}"
        if not self.upgraded:
            return old
        return f"{old} -> {self.new_width}x{self.new_height}"


@dataclass
class RunStats:
    """Counts for a whole run."""
    total_files: int = 0
    upgraded: int = 0
    unchanged: int = 0
    failed: int = 0
    elapsed: float = 0.0

    def record(self, outcome: FileOutcome) -> None:
        if outcome.status == STATUS_UPGRADED:
            self.upgraded += 1
        elif outcome.status == STATUS_FAILED:
            self.failed += 1
        else:
            self.unchanged += 1

    @property
    def processed(self) -> int:
        return self.upgraded + self.unchanged + self.failed

    @property
    def upgrade_rate(self) -> float:
        """Percentage of processed files that were upgraded."""
        if self.processed == 0:
            return 0.0
        return (self.upgraded / self.processed) * 100
