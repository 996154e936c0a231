"""
feedcache Test Configuration

Shared fixtures and configuration for all tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedcache import config as config_module
from feedcache.cache.storage import Storage
from feedcache.config import DiskCacheConfig, MemoryCacheConfig
from feedcache.services.feed_cache import FeedCacheService

from tests.fixtures.factories import AccountFactory, VideoFactory


# ============ Temporary File Fixtures ============


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_file = temp_dir / "config.yaml"
    config_content = f"""
feed:
  limit: 25
  memory:
    max_entries: 100
  disk:
    name: "feed"
    directory: "{temp_dir / 'cache'}"

logging:
  level: "DEBUG"
  to_console: false
"""
    config_file.write_text(config_content)
    return config_file


# ============ Cache Fixtures ============


@pytest.fixture
def disk_config(temp_dir: Path) -> DiskCacheConfig:
    """Disk tier config pointing into the temp directory."""
    return DiskCacheConfig(name="feed", directory=str(temp_dir / "cache"))


@pytest.fixture
def storage(disk_config: DiskCacheConfig) -> Generator[Storage, None, None]:
    """Two-tier storage on a temporary SQLite file."""
    store = Storage(disk_config=disk_config, memory_config=MemoryCacheConfig())
    yield store
    store.close()


@pytest.fixture
def feed_cache(storage: Storage) -> FeedCacheService:
    """Feed cache service over the temporary storage."""
    return FeedCacheService(storage)


@pytest.fixture
def account():
    return AccountFactory.create("acct1")


@pytest.fixture
def other_account():
    return AccountFactory.create("acct2")


@pytest.fixture
def videos():
    return VideoFactory.create_batch(5)


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables and loaded config for each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("FEEDCACHE_"):
            del os.environ[key]

    config_module._config = None

    yield

    config_module._config = None
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
