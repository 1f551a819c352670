"""
Unit tests for the single-file upgrade.
"""

from pathlib import Path

import pytest
from PIL import Image

from finch.errors import ProcessError, TransportError
from finch.upgrader import worker as worker_module
from finch.upgrader.worker import process_file


class TestProcessFile:
    """Test process_file function."""

    def test_upgrades_similar_larger_copy(self, sample_images, options, fake_client):
        client = fake_client([("http://a/big.png", sample_images['same_large'])])

        outcome = process_file(sample_images['reference'], options, client)

        assert outcome.upgraded
        assert (outcome.old_width, outcome.old_height) == (100, 100)
        assert (outcome.new_width, outcome.new_height) == (200, 200)
        assert outcome.url == "http://a/big.png"
        assert outcome.similarity == 1.0
        with Image.open(sample_images['reference']) as img:
            assert img.size == (200, 200)

    def test_dissimilar_copy_leaves_file(self, sample_images, options, fake_client):
        before = Path(sample_images['reference']).read_bytes()
        client = fake_client([("http://a/other.png", sample_images['mirrored_large'])])

        outcome = process_file(sample_images['reference'], options, client)

        assert not outcome.upgraded
        assert outcome.status == "unchanged"
        assert Path(sample_images['reference']).read_bytes() == before

    def test_sends_file_bytes_and_key(self, sample_images, options, fake_client):
        client = fake_client()
        process_file(sample_images['reference'], options, client)

        data, key = client.searches[0]
        assert data == Path(sample_images['reference']).read_bytes()
        assert key == "test-key"

    def test_no_matches(self, sample_images, options, fake_client):
        client = fake_client()
        outcome = process_file(sample_images['reference'], options, client)
        assert outcome.status == "unchanged"
        assert client.fetched == []

    def test_missing_file(self, temp_dir, options, fake_client):
        client = fake_client()
        with pytest.raises(ProcessError) as exc_info:
            process_file(temp_dir / "missing.png", options, client)
        assert exc_info.value.stage == 'read'
        assert client.searches == []

    def test_undecodable_file(self, sample_images, options, fake_client):
        client = fake_client()
        with pytest.raises(ProcessError) as exc_info:
            process_file(sample_images['corrupted'], options, client)
        assert exc_info.value.stage == 'decode'
        assert client.searches == []

    def test_search_failure(self, sample_images, options, fake_client, search_failure):
        client = fake_client(search_error=search_failure)
        with pytest.raises(ProcessError) as exc_info:
            process_file(sample_images['reference'], options, client)
        assert exc_info.value.stage == 'search'
        assert "API key not valid" in str(exc_info.value)

    def test_search_transport_failure(self, sample_images, options, fake_client):
        client = fake_client(search_error=TransportError("timed out"))
        with pytest.raises(ProcessError) as exc_info:
            process_file(sample_images['reference'], options, client)
        assert exc_info.value.stage == 'search'

    def test_write_failure(self, sample_images, options, fake_client, monkeypatch):
        def failing_save(img, path):
            raise OSError("disk full")

        monkeypatch.setattr(worker_module, 'save_image', failing_save)
        before = Path(sample_images['reference']).read_bytes()
        client = fake_client([("http://a/big.png", sample_images['same_large'])])

        with pytest.raises(ProcessError) as exc_info:
            process_file(sample_images['reference'], options, client)

        assert exc_info.value.stage == 'write'
        assert Path(sample_images['reference']).read_bytes() == before

    def test_writes_once_after_decision(self, sample_images, options, fake_client, monkeypatch):
        writes = []
        def recording_save(img, path):
            writes.append((img.size, path))
            return img.size

        monkeypatch.setattr(worker_module, 'save_image', recording_save)
        client = fake_client([
            ("http://a/other.png", sample_images['mirrored_large']),
            ("http://a/big.png", sample_images['same_large']),
        ])

        outcome = process_file(sample_images['reference'], options, client)

        assert outcome.upgraded
        assert outcome.url == "http://a/big.png"
        assert writes == [((200, 200), sample_images['reference'])]

    def test_cmyk_candidate_written_to_png(self, temp_dir, options, fake_client, split_image, to_bytes):
        path = temp_dir / "photo.png"
        split_image((100, 100)).save(path)
        candidate = to_bytes(split_image((128, 128)).convert('CMYK'), fmt='TIFF')
        client = fake_client([("http://a/print.tif", candidate)])

        outcome = process_file(path, options, client)

        assert outcome.upgraded
        with Image.open(path) as img:
            assert img.format == 'PNG'
            assert img.size == (128, 128)

    def test_oversized_icon_fails_write(self, temp_dir, options, fake_client, to_bytes):
        path = temp_dir / "icon.ico"
        Image.new('RGB', (64, 64), color='red').save(path)
        client = fake_client([("http://a/huge.png", to_bytes(Image.new('RGB', (512, 512), color='red')))])

        with pytest.raises(ProcessError) as exc_info:
            process_file(path, options, client)

        assert exc_info.value.stage == 'write'
        with Image.open(path) as img:
            assert img.size == (64, 64)

    def test_reports_size_on_disk(self, temp_dir, options, fake_client, to_bytes):
        path = temp_dir / "icon.ico"
        Image.new('RGB', (64, 64), color='red').save(path)
        client = fake_client([("http://a/big.png", to_bytes(Image.new('RGB', (200, 200), color='red')))])

        outcome = process_file(path, options, client)

        assert outcome.resolution_change == "64x64 -> 200x200"
        with Image.open(path) as img:
            assert img.size == (200, 200)
