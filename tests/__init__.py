"""
feedcache Test Suite

Test Categories:
- unit/: Fast, isolated unit tests
- integration/: Persistence across store instances and concurrent callers
- fixtures/: Shared test data factories
"""
