"""Shared pytest fixtures."""

import pytest

from tagpurge import AsyncMemoryProvider, PurgeClient, create_purge


@pytest.fixture
def provider() -> AsyncMemoryProvider:
    """Create a fresh AsyncMemoryProvider for each test."""
    return AsyncMemoryProvider()


@pytest.fixture
def client(provider: AsyncMemoryProvider) -> PurgeClient:
    """Create a PurgeClient bound to the memory provider with library defaults."""
    return create_purge(provider)
