"""Tests for the memory provider."""

import pytest

from tagpurge import AsyncMemoryProvider, PurgeProvider


class TestAsyncMemoryProvider:
    """Tests for AsyncMemoryProvider."""

    def test_implements_protocol(self, provider: AsyncMemoryProvider) -> None:
        """Test that the provider satisfies PurgeProvider."""
        assert isinstance(provider, PurgeProvider)

    async def test_records_purges(self, provider: AsyncMemoryProvider) -> None:
        """Test that purges are recorded in order."""
        await provider.purge_cache(["a", "b"])
        await provider.purge_cache(["c"])
        assert provider.purges == [("a", "b"), ("c",)]
        assert provider.get_purge_time("a") is not None
        assert provider.get_purge_time("missing") is None

    async def test_purge_result(self, provider: AsyncMemoryProvider) -> None:
        """Test the returned outcome."""
        result = await provider.purge_cache(["a"])
        assert result.ok
        assert result.tags == ("a",)

    async def test_fail_with(self) -> None:
        """Test simulated failures."""
        provider = AsyncMemoryProvider(fail_with=TimeoutError("slow"))
        with pytest.raises(TimeoutError):
            await provider.purge_cache(["a"])
        assert provider.purges == []

    async def test_clear(self, provider: AsyncMemoryProvider) -> None:
        """Test forgetting recorded purges."""
        await provider.purge_cache(["a"])
        await provider.clear()
        assert provider.purges == []
        assert provider.get_purge_time("a") is None

    def test_headers(self) -> None:
        """Test the tag header, including a custom name."""
        assert AsyncMemoryProvider().get_cache_headers(["a", "b"]) == {
            "Cache-Tag": "a, b"
        }
        assert AsyncMemoryProvider(header_name="X-Tags").get_cache_headers(["a"]) == {
            "X-Tags": "a"
        }
        assert AsyncMemoryProvider().get_cache_headers([]) == {}

    def test_empty_header_name_rejected(self) -> None:
        """Test configuration validation."""
        with pytest.raises(ValueError, match="header_name"):
            AsyncMemoryProvider(header_name="")
