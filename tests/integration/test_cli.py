"""
Integration tests for the maintenance command line.
"""

import json
from pathlib import Path

import pytest

from feedcache.__main__ import main
from feedcache.app import create_storage
from feedcache.config import load_config
from feedcache.services.feed_cache import FeedCacheService


@pytest.fixture
def restore_root_logger():
    import logging

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def seeded_config(temp_config_file: Path, account, videos) -> Path:
    """Config file whose cache already holds one feed."""
    config = load_config(str(temp_config_file))
    service = FeedCacheService(create_storage(config.feed.disk))
    service.store_feed(account, videos)
    service.storage.close()
    return temp_config_file


@pytest.mark.integration
@pytest.mark.usefixtures("restore_root_logger")
class TestCli:
    """Tests for python -m feedcache."""

    def test_stats(self, seeded_config: Path, capsys):
        assert main(["--config", str(seeded_config), "stats"]) == 0

        stats = json.loads(capsys.readouterr().out)
        assert stats["total_size_bytes"] > 0
        assert stats["caches"]["feed"]["storage"]["disk"]["entry_count"] == 2

    def test_clear(self, seeded_config: Path, capsys):
        assert main(["--config", str(seeded_config), "clear"]) == 0
        assert "of cached feeds" in capsys.readouterr().out

        assert main(["--config", str(seeded_config), "stats"]) == 0
        assert json.loads(capsys.readouterr().out)["total_size_bytes"] == 0

    def test_prune(self, seeded_config: Path, capsys):
        assert main(["--config", str(seeded_config), "prune"]) == 0

        assert capsys.readouterr().out.strip() == "Removed 0 expired entries"

    def test_bad_config(self, temp_dir: Path, capsys):
        path = temp_dir / "bad.yaml"
        path.write_text("feed: [unclosed")

        assert main(["--config", str(path), "stats"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_unknown_command(self, seeded_config: Path):
        with pytest.raises(SystemExit):
            main(["--config", str(seeded_config), "explode"])
