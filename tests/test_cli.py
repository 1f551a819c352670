"""
Unit tests for the CLI and user configuration.
"""

import json
from pathlib import Path

from PIL import Image

from finch.cli import main
from finch.cli import orchestrator as orchestrator_module
from finch.cli.arg_parser import parse_arguments


class TestParseArguments:
    """Test argument parsing."""

    def test_defaults(self, isolated_config):
        args = parse_arguments([])
        assert args.directory == Path('.')
        assert args.api_key is None
        assert args.tolerance == 0.9
        assert args.workers == 4
        assert not args.no_recursive

    def test_options(self, isolated_config):
        args = parse_arguments(['/photos', '-k', 'KEY', '-t', '0.95', '-w', '8'])
        assert args.directory == Path('/photos')
        assert args.api_key == 'KEY'
        assert args.tolerance == 0.95
        assert args.workers == 8

    def test_key_from_environment(self, isolated_config, monkeypatch):
        monkeypatch.setenv('FINCH_API_KEY', 'ENVKEY')
        assert parse_arguments([]).api_key == 'ENVKEY'


class TestUserConfig:
    """Test layered configuration."""

    def test_file_values(self, isolated_config):
        isolated_config.config_dir.mkdir(parents=True)
        isolated_config.config_file_path.write_text(
            json.dumps({"default_tolerance": 0.97, "default_workers": 2})
        )
        isolated_config.reload()

        assert isolated_config.default_tolerance == 0.97
        assert isolated_config.default_workers == 2

    def test_environment_wins(self, isolated_config, monkeypatch):
        isolated_config.config_dir.mkdir(parents=True)
        isolated_config.config_file_path.write_text(json.dumps({"default_workers": 2}))
        isolated_config.reload()
        monkeypatch.setenv('FINCH_WORKERS', '6')

        assert isolated_config.default_workers == 6

    def test_broken_file_falls_back(self, isolated_config):
        isolated_config.config_dir.mkdir(parents=True)
        isolated_config.config_file_path.write_text("{not json")
        isolated_config.reload()

        assert isolated_config.default_tolerance == 0.9

    def test_create_example_config(self, isolated_config):
        assert isolated_config.create_example_config()
        data = json.loads(isolated_config.config_file_path.read_text())
        assert data["default_tolerance"] == 0.9
        assert data["api_key"] is None


class TestMain:
    """Test the complete CLI workflow."""

    def test_missing_directory(self, temp_dir, isolated_config):
        assert main([str(temp_dir / "missing"), '-k', 'KEY']) == 1

    def test_missing_api_key(self, temp_dir, isolated_config):
        assert main([str(temp_dir)]) == 1

    def test_invalid_tolerance(self, temp_dir, isolated_config):
        assert main([str(temp_dir), '-k', 'KEY', '-t', '2']) == 1

    def test_empty_directory(self, temp_dir, isolated_config, monkeypatch, fake_client):
        monkeypatch.setattr(orchestrator_module, 'create_client', lambda **kwargs: fake_client())
        assert main([str(temp_dir), '-k', 'KEY', '--no-progress']) == 0

    def test_upgrades_and_reports(
        self, temp_dir, isolated_config, monkeypatch, fake_client, split_image, to_bytes, capsys
    ):
        photos = temp_dir / "photos"
        photos.mkdir()
        split_image((100, 100)).save(photos / "good.png")
        (photos / "broken.png").write_text("not an image")

        client = fake_client([("http://a/big.png", to_bytes(split_image((200, 200))))])
        monkeypatch.setattr(orchestrator_module, 'create_client', lambda **kwargs: client)

        exit_code = main([str(photos), '-k', 'KEY', '--no-progress', '-w', '2'])

        # Per-file failures do not change the exit code
        assert exit_code == 0
        with Image.open(photos / "good.png") as img:
            assert img.size == (200, 200)

        output = capsys.readouterr().out
        assert "UPGRADED" in output
        assert "FAILED" in output
        assert "100x100 -> 200x200" in output
        assert client.closed
