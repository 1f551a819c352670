"""
Candidate evaluation for the upgrader package.

Decides which, if any, of the reverse image search results should replace a
local file. Candidates must arrive sorted by resolution in descending order;
that ordering is trusted and never re-checked, which is what allows the scan
to stop at the first candidate that is not larger than the reference.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from ..errors import DecodeError, HTTPStatusError, TransportError
from ..models import CandidateImage, UpgradeVerdict
from .dependencies import Image, imagehash, _logger
from .hashing import marr_hash, similarity

# Errors that only rule out the current candidate
SKIPPABLE_ERRORS = (TransportError, HTTPStatusError, DecodeError)


def is_larger(candidate: tuple[int, int], reference: tuple[int, int]) -> bool:
    """
    Whether a (width, height) pair beats the reference.

    Width is compared first and height only breaks ties, so a wider but
    shorter image still counts as larger.
    """
    return candidate > reference


def evaluate_candidates(
    reference: Image.Image,
    candidates: Iterable[CandidateImage],
    tolerance: float,
    fetch: Callable[[str], bytes],
    decode: Callable[[bytes], Image.Image],
    hasher: Callable[[Image.Image], imagehash.ImageHash] = marr_hash,
) -> UpgradeVerdict:
    """
    Scan candidates in order and pick the first acceptable upgrade.

    Args:
        reference: The decoded local image
        candidates: Search results, highest resolution first
        tolerance: A candidate is accepted when its similarity is strictly above this
        fetch: Downloads a URL; may raise TransportError or HTTPStatusError
        decode: Decodes bytes; may raise DecodeError
        hasher: Digest function (Marr wavelet by default)

    Returns:
        UpgradeVerdict; when accepted it carries the decoded candidate image
    """
    verdict = UpgradeVerdict()
    reference_size = reference.size
    reference_hash: Optional[imagehash.ImageHash] = None

    for index, candidate in enumerate(candidates):
        _logger.debug(f"Checking version {candidate.url}")
        verdict.checked += 1

        try:
            data = fetch(candidate.url)
            img = decode(data)
        except SKIPPABLE_ERRORS as e:
            _logger.debug(f"Skipping version {candidate.url}: {e}")
            verdict.skipped += 1
            continue

        if not is_larger(img.size, reference_size):
            # Nothing after this one can be larger either
            _logger.debug(
                f"Version {candidate.url} is {img.width}x{img.height}, "
                f"not larger than {reference.width}x{reference.height}; stopping"
            )
            break

        _logger.debug(f"Comparing version {candidate.url}")

        # Only calculate the hashes once we know it's a higher resolution
        if reference_hash is None:
            reference_hash = hasher(reference)
        score = similarity(reference_hash, hasher(img))

        # Watermarked, cropped or placeholder images score lower
        if score > tolerance:
            verdict.accepted = True
            verdict.index = index
            verdict.candidate = candidate
            verdict.image = img
            verdict.similarity = score
            return verdict

        _logger.debug(f"Rejected version {candidate.url} (similarity {score:.3f})")
        verdict.rejected += 1

    return verdict


__all__ = [
    'SKIPPABLE_ERRORS',
    'is_larger',
    'evaluate_candidates',
]
