"""
Unit tests for the streaming bridge.
"""

from typing import List

import pytest

from generation_gateway.core.catalog import PROVIDER_DESCRIPTORS
from generation_gateway.core.errors import ProviderConnectionError, UpstreamError
from generation_gateway.core.streaming import split_fragments, stream_text
from generation_gateway.models.response import TextResult

from fakes import FakeProvider


class FailingProvider(FakeProvider):
    async def generate_text(self, system_prompt, history, user_input, options=None):
        return TextResult.fail("DeepSeek API error: 500", provider=self.key)


class NativeProvider(FakeProvider):
    def __init__(self, *args, fragments: List[str], fail_after: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self._fragments = fragments
        self._fail_after = fail_after

    @property
    def supports_streaming(self) -> bool:
        return True

    async def generate_text_stream(self, system_prompt, history, user_input, options=None):
        for fragment in self._fragments:
            yield fragment
        if self._fail_after:
            raise ProviderConnectionError("stream dropped", provider=self.key)


def fake(cls=FakeProvider, **kwargs):
    return cls("deepseek", PROVIDER_DESCRIPTORS["deepseek"], "test-key", **kwargs)


async def collect(provider) -> List[str]:
    return [f async for f in stream_text(provider, "sys", [], "hi", delay=0)]


class TestSplitFragments:
    """Test word/whitespace splitting."""

    def test_hello_world(self):
        assert split_fragments("hello world") == ["hello", " ", "world"]

    def test_preserves_whitespace_runs(self):
        text = "  a\n\tb  c "
        fragments = split_fragments(text)
        assert "".join(fragments) == text
        assert fragments == ["  ", "a", "\n\t", "b", "  ", "c", " "]

    def test_empty(self):
        assert split_fragments("") == []


class TestStreamText:
    """Test the bridge over native and non-native providers."""

    @pytest.mark.asyncio
    async def test_synthesized_stream_round_trip(self):
        """Concatenated fragments equal the non-streaming result."""
        reply = "The quick  brown\nfox."
        provider = fake(reply=reply)

        direct = await provider.generate_text("sys", [], "hi")
        fragments = await collect(provider)

        assert "".join(fragments) == direct.payload.text == reply
        assert len(fragments) > 1

    @pytest.mark.asyncio
    async def test_synthesized_hello_world(self):
        provider = fake(reply="hello world")
        assert await collect(provider) == ["hello", " ", "world"]

    @pytest.mark.asyncio
    async def test_failure_yields_single_error(self):
        """A failed generation yields exactly one error fragment."""
        fragments = await collect(fake(FailingProvider))
        assert fragments == ["[ERROR] DeepSeek API error: 500"]

    @pytest.mark.asyncio
    async def test_native_stream_forwarded(self):
        """Native fragments pass through unchanged and no full call is made."""
        provider = fake(NativeProvider, fragments=["Hel", "lo", " there"])
        fragments = await collect(provider)

        assert fragments == ["Hel", "lo", " there"]
        assert provider.text_calls == []

    @pytest.mark.asyncio
    async def test_native_stream_error_ends_sequence(self):
        """A mid-stream failure ends with one error fragment."""
        provider = fake(NativeProvider, fragments=["a", "b"], fail_after=True)
        fragments = await collect(provider)

        assert fragments == ["a", "b", "[ERROR] stream dropped"]

    @pytest.mark.asyncio
    async def test_default_native_stream_yields_full_text(self):
        """Without native streaming, generate_text_stream yields the whole reply once."""
        provider = fake(reply="hello world")
        fragments = [f async for f in provider.generate_text_stream("sys", [], "hi")]

        assert fragments == ["hello world"]
        assert provider.text_calls == ["hi"]

    @pytest.mark.asyncio
    async def test_default_native_stream_raises_on_failure(self):
        """A failed generation surfaces as UpstreamError from the default stream."""
        with pytest.raises(UpstreamError, match="DeepSeek API error: 500"):
            async for _ in fake(FailingProvider).generate_text_stream("sys", [], "hi"):
                pass

    @pytest.mark.asyncio
    async def test_early_abandon(self):
        """Consumers may stop early; closing the generator is clean."""
        stream = stream_text(fake(reply="one two three"), "sys", [], "hi", delay=0)
        first = await stream.__anext__()
        await stream.aclose()
        assert first == "one"
