"""
Single-file upgrade for the upgrader package.

Reads one local image, asks the reverse image search for copies of it and
overwrites the file with the first candidate the evaluator accepts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol

from ..errors import DecodeError, FinchError, ProcessError
from ..models import (
    CandidateImage,
    FileOutcome,
    UpgradeOptions,
    STATUS_UPGRADED,
)
from .codec import decode_image, save_image
from .dependencies import Image, _logger
from .evaluation import evaluate_candidates


class SearchClient(Protocol):
    """What the worker needs from the network layer."""

    def search(self, data: bytes, api_key: str) -> list[CandidateImage]: ...

    def fetch(self, url: str) -> bytes: ...


def process_file(
    filepath: str | Path,
    options: UpgradeOptions,
    client: SearchClient,
    decode: Callable[[bytes], Image.Image] = decode_image,
) -> FileOutcome:
    """
    Upgrade one file in place if a better copy exists.

    The file is written at most once, and only after every candidate
    decision has been made.

    Args:
        filepath: Local image to upgrade
        options: Shared run options (API key, tolerance)
        client: Search and fetch collaborator
        decode: Bytes to image decoder

    Returns:
        FileOutcome with status 'upgraded' or 'unchanged'

    Raises:
        ProcessError: If the file cannot be read, decoded, searched or written
    """
    filepath = str(filepath)

    # NOT FATAL: the file might be unreadable due to a permissions error
    try:
        with open(filepath, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise ProcessError(filepath, 'read', str(e)) from e

    try:
        reference = decode(data)
    except DecodeError as e:
        raise ProcessError(filepath, 'decode', str(e)) from e

    outcome = FileOutcome(
        path=filepath,
        old_width=reference.width,
        old_height=reference.height,
    )

    # NOT FATAL: the image might not be known to exist anywhere else
    try:
        candidates = client.search(data, options.api_key)
    except FinchError as e:
        raise ProcessError(filepath, 'search', str(e)) from e

    if not candidates:
        _logger.debug(f"No matching images found for {filepath}")
        return outcome

    verdict = evaluate_candidates(
        reference,
        candidates,
        options.tolerance,
        fetch=client.fetch,
        decode=decode,
    )

    if not verdict.accepted:
        _logger.debug(
            f"No upgrade for {filepath} "
            f"({verdict.checked} checked, {verdict.skipped} skipped, {verdict.rejected} rejected)"
        )
        return outcome

    img = verdict.image
    _logger.debug(f"Saving version {verdict.candidate.url} for {filepath}")

    # NOT FATAL: other files may still be saved successfully
    try:
        written = save_image(img, filepath)
    except (OSError, ValueError) as e:
        raise ProcessError(filepath, 'write', str(e)) from e

    outcome.status = STATUS_UPGRADED
    outcome.new_width, outcome.new_height = written
    outcome.url = verdict.candidate.url
    outcome.similarity = verdict.similarity
    return outcome


__all__ = ['SearchClient', 'process_file']
