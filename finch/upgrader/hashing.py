"""
Hashing module for the upgrader package.

Provides the perceptual hashes used to decide whether a remote candidate is
the same picture as a local file.

Both algorithms share the same preprocessing: the image is resampled to an
8x8 grid with nearest-neighbour interpolation and converted to grayscale,
discarding aspect ratio and fine detail. The 64 samples are then passed
through an algorithm-specific kernel and thresholded against their mean.
"""

from __future__ import annotations

import math
from enum import Enum

from ..config import HASH_BITS, HASH_DIMENSION
from .codec import reduce_to_8bit
from .dependencies import Image, imagehash, np


class Algorithm(Enum):
    """Perceptual hash algorithms."""
    AVERAGE = "average"
    MARR = "marr"


def _marr_weights(size: int = HASH_DIMENSION) -> np.ndarray:
    # Laplacian-of-Gaussian over grid-index distance from the origin, sigma^2 = sample count
    sigma2 = float(size * size)
    ys, xs = np.mgrid[0:size, 0:size]
    d2 = (xs ** 2 + ys ** 2).astype(np.float64)
    ratio = d2 / (2.0 * sigma2)
    return (1.0 / (math.pi * sigma2)) * (1.0 - ratio) * np.exp(-ratio)


_MARR_WEIGHTS = _marr_weights()
_MARR_WEIGHTS.setflags(write=False)


def sample_grid(image: Image.Image) -> np.ndarray:
    """
    Downsample an image to the 8x8 grayscale grid used by every hash.

    Args:
        image: Any decoded PIL image, regardless of size or mode

    Returns:
        8x8 float64 array of intensities in 0-255, row-major
    """
    small = image.resize((HASH_DIMENSION, HASH_DIMENSION), Image.Resampling.NEAREST)
    small = reduce_to_8bit(small)
    if small.mode != 'L':
        if small.mode == 'P':
            small = small.convert('RGBA')
        small = small.convert('L')
    return np.asarray(small, dtype=np.float64).reshape(HASH_DIMENSION, HASH_DIMENSION)


def hash_samples(samples, algorithm: Algorithm = Algorithm.MARR) -> imagehash.ImageHash:
    """
    Hash a grid of 64 grayscale samples.

    Args:
        samples: 64 intensities, flat or 8x8, in row-major order
        algorithm: Kernel to apply before thresholding

    Returns:
        ImageHash over an 8x8 boolean array; a cell is set only when its
        transformed value is strictly greater than the mean

    Raises:
        ValueError: If samples does not hold exactly 64 values
    """
    grid = np.asarray(samples, dtype=np.float64)
    if grid.size != HASH_BITS:
        raise ValueError(f"Expected {HASH_BITS} samples, got {grid.size}")
    grid = grid.reshape(HASH_DIMENSION, HASH_DIMENSION)

    if algorithm is Algorithm.MARR:
        grid = grid * _MARR_WEIGHTS

    return imagehash.ImageHash(grid > grid.mean())


def perceptual_hash(image: Image.Image, algorithm: Algorithm = Algorithm.MARR) -> imagehash.ImageHash:
    """Calculate the perceptual hash of a decoded image."""
    return hash_samples(sample_grid(image), algorithm)


def average_hash(image: Image.Image) -> imagehash.ImageHash:
    return perceptual_hash(image, Algorithm.AVERAGE)


def marr_hash(image: Image.Image) -> imagehash.ImageHash:
    return perceptual_hash(image, Algorithm.MARR)


def hamming_distance(a: imagehash.ImageHash, b: imagehash.ImageHash) -> int:
    """Number of differing bits between two digests (0-64)."""
    return int(a - b)


def similarity(a: imagehash.ImageHash, b: imagehash.ImageHash) -> float:
    """
    Similarity of two digests as a float between 0 and 1.

    1.0 means identical digests, 0.0 means one is the bitwise inverse of the other.
    """
    return 1.0 - hamming_distance(a, b) / HASH_BITS


def digest_to_int(digest: imagehash.ImageHash) -> int:
    """Pack a digest into a 64-bit integer where bit y*8+x holds cell (x, y)."""
    value = 0
    for i, bit in enumerate(digest.hash.flatten()):
        if bit:
            value |= 1 << i
    return value


def digest_from_int(value: int) -> imagehash.ImageHash:
    """Inverse of digest_to_int."""
    if not 0 <= value < (1 << HASH_BITS):
        raise ValueError(f"Digest must fit in {HASH_BITS} bits")
    bits = np.array([(value >> i) & 1 for i in range(HASH_BITS)], dtype=bool)
    return imagehash.ImageHash(bits.reshape(HASH_DIMENSION, HASH_DIMENSION))


__all__ = [
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
]
