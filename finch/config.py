"""
Configuration constants for Finch.

This module contains all configurable settings including:
- Image extensions accepted by both the Vision API and Pillow
- Upload limits and network defaults for the reverse image search
"""

# Supported image extensions (Vision API and Pillow overlap)
SUPPORTED_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.webp', '.gif', '.ico', '.bmp',
}

# Maximum file size to upload (10MB), defined by the Vision API
MAX_FILESIZE = 10 * 1024 * 1024

# Default similarity tolerance (0-1 range)
# A candidate must score strictly above this to replace the original
# Higher = stricter matching
DEFAULT_TOLERANCE = 0.9

# Default number of parallel workers
DEFAULT_WORKERS = 4

# Seconds to wait on any single HTTP request
DEFAULT_TIMEOUT = 30.0

# Reverse image search (Google Cloud Vision web detection)
VISION_ENDPOINT = 'https://vision.googleapis.com/v1/images:annotate'
MAX_RESULTS = 1000

USER_AGENT = 'finch-upscaler'

# Perceptual hash grid (8x8 = 64-bit digest)
HASH_DIMENSION = 8
HASH_BITS = HASH_DIMENSION * HASH_DIMENSION
