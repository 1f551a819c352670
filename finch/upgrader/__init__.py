"""
Upgrader package for Finch.

Replaces local images with higher resolution copies found by a reverse image
search, but only when the copy is strictly larger and perceptually
near-identical to the original.

Public API:
- find_image_files: Discover uploadable images in directories
- perceptual_hash: Average or Marr wavelet hash of a decoded image
- hash_samples: Hash a normalised 8x8 grayscale grid
- hamming_distance / similarity: Compare two digests
- evaluate_candidates: Pick the first acceptable candidate for one image
- process_file: Upgrade a single file in place
- upgrade_images_parallel: Upgrade many files with a worker pool
"""

from __future__ import annotations

from .file_discovery import find_image_files
from .hashing import (
    Algorithm,
    sample_grid,
    hash_samples,
    perceptual_hash,
    average_hash,
    marr_hash,
    hamming_distance,
    similarity,
    digest_to_int,
    digest_from_int,
)
from .codec import decode_image, save_image
from .evaluation import evaluate_candidates, is_larger
from .worker import process_file
from .parallel import upgrade_images_parallel


__all__ = [
    # File discovery
    'find_image_files',
    # Hashing
    'Algorithm',
    'sample_grid',
    'hash_samples',
    'perceptual_hash',
    'average_hash',
    'marr_hash',
    'hamming_distance',
    'similarity',
    'digest_to_int',
    'digest_from_int',
    # Codec
    'decode_image',
    'save_image',
    # Evaluation
    'evaluate_candidates',
    'is_larger',
    # Processing
    'process_file',
    'upgrade_images_parallel',
]
