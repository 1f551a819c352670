"""
Pytest configuration and shared fixtures for test suite.
"""

import io
import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image

from finch.errors import SearchError
from finch.models import CandidateImage, UpgradeOptions


def _split_image(size, dark_left=True, mode='RGB'):
    """Half black, half white image split down the middle."""
    width, height = size
    img = Image.new(mode, size, color='white')
    dark = Image.new(mode, (width // 2, height), color='black')
    img.paste(dark, (0, 0) if dark_left else (width - width // 2, 0))
    return img


def _to_bytes(img, fmt='PNG'):
    buf = io.BytesIO()
    img.save(buf, fmt)
    return buf.getvalue()


class FakeClient:
    """
    Stand-in for VisionClient.

    Args:
        candidates: Search results as (url, payload) pairs, in order
        errors: url -> exception raised by fetch
        search_error: Exception raised by search
    """

    def __init__(self, candidates=(), errors=None, search_error=None):
        self.candidates = [CandidateImage(url=url) for url, _ in candidates]
        self.payloads = {url: payload for url, payload in candidates}
        self.errors = errors or {}
        self.search_error = search_error
        self.searches = []
        self.fetched = []
        self.closed = False

    def search(self, data, api_key):
        self.searches.append((data, api_key))
        if self.search_error is not None:
            raise self.search_error
        return list(self.candidates)

    def fetch(self, url):
        self.fetched.append(url)
        if url in self.errors:
            raise self.errors[url]
        return self.payloads[url]

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def split_image():
    """Factory for half-black/half-white images of any size."""
    return _split_image


@pytest.fixture
def to_bytes():
    """Encode a PIL image to bytes (PNG by default)."""
    return _to_bytes


@pytest.fixture
def fake_client():
    """Factory for FakeClient instances."""
    return FakeClient


@pytest.fixture
def options():
    """Run options with the default tolerance."""
    return UpgradeOptions(api_key="test-key", tolerance=0.9, workers=2)


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a set of sample images on disk.

    Returns:
        dict with paths to:
        - reference.png (100x100, dark left half)
        - second.png (100x100, dark left half)
        - corrupted.png (not an image)
        and bytes for:
        - same_large (200x200, dark left half)
        - mirrored_large (200x200, dark right half)
    """
    images = {}

    ref = _split_image((100, 100))
    path = temp_dir / "reference.png"
    ref.save(path, 'PNG')
    images['reference'] = str(path)

    path = temp_dir / "second.png"
    ref.save(path, 'PNG')
    images['second'] = str(path)

    path = temp_dir / "corrupted.png"
    path.write_text("not an image")
    images['corrupted'] = str(path)

    images['same_large'] = _to_bytes(_split_image((200, 200)))
    images['mirrored_large'] = _to_bytes(_split_image((200, 200), dark_left=False))

    return images


@pytest.fixture
def search_failure():
    return SearchError("API key not valid", kind="400")


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    """Point the user config at an empty directory and clear FINCH_* env vars."""
    from finch.user_config import get_user_config

    for var in ('FINCH_API_KEY', 'FINCH_TOLERANCE', 'FINCH_WORKERS', 'FINCH_TIMEOUT'):
        monkeypatch.delenv(var, raising=False)
    config_dir = temp_dir / "config"
    monkeypatch.setenv('FINCH_CONFIG_DIR', str(config_dir))

    config = get_user_config()
    config.reload()
    yield config
    config.reload()
