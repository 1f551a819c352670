"""
Error taxonomy for Finch.

Candidate-scoped errors (TransportError, HTTPStatusError, DecodeError) are
skipped by the evaluator. File-scoped failures surface as ProcessError.
"""

from __future__ import annotations

from typing import Optional


class FinchError(Exception):
    """Base class for all Finch errors."""


class TransportError(FinchError):
    """Raised when a network request could not be completed."""


class HTTPStatusError(FinchError):
    """Raised when a server answers with a non-success status code."""

    def __init__(self, status_code: int, url: str = "") -> None:
        super().__init__(f"Server returned status {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class SearchError(FinchError):
    """Raised when the reverse image search rejects a request (auth, quota...)."""

    def __init__(self, message: str, kind: Optional[str] = None) -> None:
        super().__init__(f"[{kind}] {message}" if kind else message)
        self.kind = kind
        self.message = message


class DecodeError(FinchError):
    """Raised when bytes cannot be decoded as a supported image."""


class ProcessError(FinchError):
    """
    Raised when a single file cannot be processed.

    Attributes:
        path: The file being processed
        stage: Where it failed ('read', 'decode', 'search' or 'write')
    """

    def __init__(self, path: str, stage: str, message: str) -> None:
        super().__init__(f"{stage} failed for {path}: {message}")
        self.path = path
        self.stage = stage


__all__ = [
    'FinchError',
    'TransportError',
    'HTTPStatusError',
    'SearchError',
    'DecodeError',
    'ProcessError',
]
