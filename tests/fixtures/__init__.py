"""
Test Fixtures

Shared test data factories.
"""

from .factories import (
    AccountFactory,
    VideoFactory,
)

__all__ = [
    "AccountFactory",
    "VideoFactory",
]
