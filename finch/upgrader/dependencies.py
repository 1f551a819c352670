"""
Dependency initialization for the upgrader package.

Handles PIL, imagehash, numpy and tqdm imports with proper error handling
and configuration.
"""

from __future__ import annotations

import warnings
import logging
from typing import Optional, Any

# Module-level logger
_logger = logging.getLogger(__name__)

# Check for required dependencies
try:
    from PIL import Image, UnidentifiedImageError
    import imagehash
    import numpy as np
except ImportError:
    raise ImportError(
        "Required packages not found!\n"
        "Install with: pip install Pillow imagehash numpy"
    )

# Remote candidates can be large scans; allow up to 500MP before refusing
Image.MAX_IMAGE_PIXELS = 500_000_000

# Over the raised limit Pillow still raises DecompressionBombError, which we handle
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

# Optional: tqdm for progress bars
HAS_TQDM = False
_tqdm_class: Optional[Any] = None

try:
    from tqdm import tqdm as _tqdm_import
    HAS_TQDM = True
    _tqdm_class = _tqdm_import
except ImportError:
    pass


__all__ = [
    'Image',
    'UnidentifiedImageError',
    'imagehash',
    'np',
    'HAS_TQDM',
    '_tqdm_class',
    '_logger',
]
