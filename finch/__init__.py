"""
Finch
=====
Replaces local images with higher resolution copies of the same picture.

Features:
- Reverse image search via the Google Cloud Vision API
- Marr wavelet perceptual hashing to reject watermarked or unrelated copies
- Only ever replaces a file with a strictly larger version
- Parallel processing with per-file failure isolation
"""

__version__ = "0.3.0"
__author__ = "finch contributors"

from .models import CandidateImage, UpgradeOptions, UpgradeVerdict, FileOutcome, RunStats
from .config import SUPPORTED_EXTENSIONS, MAX_FILESIZE, DEFAULT_TOLERANCE, DEFAULT_WORKERS
from .errors import (
    FinchError,
    TransportError,
    HTTPStatusError,
    SearchError,
    DecodeError,
    ProcessError,
)
from .upgrader import (
    Algorithm,
    perceptual_hash,
    hash_samples,
    hamming_distance,
    similarity,
    evaluate_candidates,
    find_image_files,
    process_file,
    upgrade_images_parallel,
)
from .api import VisionClient, create_client

__all__ = [
    "CandidateImage",
    "UpgradeOptions",
    "UpgradeVerdict",
    "FileOutcome",
    "RunStats",
    "SUPPORTED_EXTENSIONS",
    "MAX_FILESIZE",
    "DEFAULT_TOLERANCE",
    "DEFAULT_WORKERS",
    "FinchError",
    "TransportError",
    "HTTPStatusError",
    "SearchError",
    "DecodeError",
    "ProcessError",
    "Algorithm",
    "perceptual_hash",
    "hash_samples",
    "hamming_distance",
    "similarity",
    "evaluate_candidates",
    "find_image_files",
    "process_file",
    "upgrade_images_parallel",
    "VisionClient",
    "create_client",
]
