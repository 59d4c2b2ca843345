"""
Unit tests for the generation gateway service.

Backends are real adapters talking to an httpx.MockTransport that routes
by host.
"""

import base64
import json

import httpx
import pytest

from generation_gateway.core.audio import WAV_HEADER_SIZE
from generation_gateway.core.errors import ProviderNotFoundError
from generation_gateway.core.gateway import GenerationGateway
from generation_gateway.models.request import ConversationTurn


def routes(table):
    """Build a transport answering from a {(host, path): response} table."""

    def handler(request: httpx.Request) -> httpx.Response:
        response = table.get((request.url.host, request.url.path))
        if response is None:
            return httpx.Response(404)
        if callable(response):
            return response(request)
        return httpx.Response(response.status_code, headers=response.headers, content=response.content)

    return httpx.MockTransport(handler)


class TestGenerationGateway:
    """Test the four gateway operations end to end."""

    @pytest.mark.asyncio
    async def test_no_credentials(self, make_settings):
        """Nothing configured: failure envelopes and an error fragment, no exceptions."""
        async with GenerationGateway(make_settings(), transport=routes({})) as gateway:
            text = await gateway.generate_text("sys", [], "hi")
            image = await gateway.generate_image("cat")
            audio = await gateway.generate_audio("hi")
            fragments = [f async for f in gateway.stream_text("sys", [], "hi")]

        assert text.success is False
        assert text.error == "No AI text provider available. Please configure API keys."
        assert image.error == "No AI image provider available. Please configure API keys."
        assert audio.error == "No AI audio provider available. Please configure API keys."
        assert fragments == ["[ERROR] No AI text provider available. Please configure API keys."]

    @pytest.mark.asyncio
    async def test_fallback_when_primary_unavailable(self, make_settings):
        """Primary probe fails, the configured fallback answers with zeroed usage."""
        seen = {}

        def chat(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "from fallback"}}]})

        transport = routes({
            ("openrouter.ai", "/api/v1/key"): httpx.Response(503),
            ("api.deepseek.com", "/v1/models"): httpx.Response(200, json={"data": []}),
            ("api.deepseek.com", "/v1/chat/completions"): chat,
        })
        settings = make_settings("openrouter", "deepseek", fallback_providers=("deepseek",))

        async with GenerationGateway(settings, transport=transport) as gateway:
            result = await gateway.generate_text(
                "sys",
                [{"role": "user", "content": "earlier"}, ConversationTurn(role="assistant", content="reply")],
                "now",
            )

        assert result.success is True
        assert result.payload.text == "from fallback"
        assert result.provider == "deepseek"
        assert (result.usage.prompt_tokens, result.usage.completion_tokens, result.usage.total_tokens) == (0, 0, 0)
        assert [m["content"] for m in seen["body"]["messages"]] == ["sys", "earlier", "reply", "now"]

    @pytest.mark.asyncio
    async def test_synthesized_stream(self, make_settings):
        """A non-streaming backend is paced out word by word."""
        transport = routes({
            ("api.deepseek.com", "/v1/models"): httpx.Response(200, json={"data": []}),
            ("api.deepseek.com", "/v1/chat/completions"): httpx.Response(
                200, json={"choices": [{"message": {"content": "hello world"}}]}
            ),
        })
        settings = make_settings("deepseek", global_provider="deepseek")

        async with GenerationGateway(settings, transport=transport) as gateway:
            fragments = [f async for f in gateway.stream_text("sys", [], "hi")]
            direct = await gateway.generate_text("sys", [], "hi")

        assert fragments == ["hello", " ", "world"]
        assert "".join(fragments) == direct.payload.text

    @pytest.mark.asyncio
    async def test_native_stream(self, make_settings):
        """OpenRouter's own stream is forwarded unchanged."""
        sse = "\n\n".join([
            'data: {"choices":[{"delta":{"content":"Hi"}}]}',
            'data: {"choices":[{"delta":{"content":" you"}}]}',
            "data: [DONE]",
        ])
        transport = routes({
            ("openrouter.ai", "/api/v1/key"): httpx.Response(200, json={"data": {}}),
            ("openrouter.ai", "/api/v1/chat/completions"): httpx.Response(200, text=sse),
        })

        async with GenerationGateway(make_settings("openrouter"), transport=transport) as gateway:
            fragments = [f async for f in gateway.stream_text("sys", [], "hi")]

        assert fragments == ["Hi", " you"]

    @pytest.mark.asyncio
    async def test_stream_upstream_failure(self, make_settings):
        """A failing native stream ends with one error fragment."""
        transport = routes({
            ("openrouter.ai", "/api/v1/key"): httpx.Response(200, json={"data": {}}),
            ("openrouter.ai", "/api/v1/chat/completions"): httpx.Response(500, json={"error": "down"}),
        })

        async with GenerationGateway(make_settings("openrouter"), transport=transport) as gateway:
            fragments = [f async for f in gateway.stream_text("sys", [], "hi")]

        assert len(fragments) == 1
        assert fragments[0].startswith("[ERROR] OpenRouter API error: 500")

    @pytest.mark.asyncio
    async def test_audio_smart_default(self, make_settings):
        """Only Gemini is configured: audio uses it, text stays unavailable."""
        pcm = b"\x00\x01" * 50
        transport = routes({
            ("generativelanguage.googleapis.com", "/v1beta/models"): httpx.Response(200, json={"models": []}),
            ("generativelanguage.googleapis.com", "/v1beta/models/gemini-2.5-flash-preview-tts:generateContent"):
                httpx.Response(200, json={"candidates": [{"content": {"parts": [{"inlineData": {
                    "data": base64.b64encode(pcm).decode("ascii"),
                }}]}}]}),
        })

        async with GenerationGateway(make_settings("gemini"), transport=transport) as gateway:
            audio = await gateway.generate_audio("read this")
            text = await gateway.generate_text("sys", [], "hi")

        assert audio.success is True
        assert audio.provider == "gemini"
        assert base64.b64decode(audio.payload.audio)[WAV_HEADER_SIZE:] == pcm
        assert text.success is False

    @pytest.mark.asyncio
    async def test_adapter_failure_envelope(self, make_settings):
        """An upstream error reaches the caller as a readable message."""
        transport = routes({
            ("api.anthropic.com", "/v1/messages"): lambda r: (
                httpx.Response(400) if json.loads(r.content)["max_tokens"] == 1
                else httpx.Response(529, json={"type": "overloaded_error"})
            ),
        })

        async with GenerationGateway(make_settings("claude", global_provider="claude"), transport=transport) as gateway:
            result = await gateway.generate_text("sys", [], "hi")

        assert result.success is False
        assert result.error.startswith("Anthropic Claude API error: 529")

    @pytest.mark.asyncio
    async def test_health_check(self, make_settings):
        transport = routes({
            ("api.deepseek.com", "/v1/models"): httpx.Response(200, json={"data": []}),
            ("api.together.xyz", "/v1/models"): httpx.Response(500),
        })

        async with GenerationGateway(make_settings("deepseek", "together"), transport=transport) as gateway:
            health = await gateway.health_check()

        assert health == {"deepseek": True, "together": False}

    def test_unknown_provider_in_settings(self, make_settings):
        """Configuration naming an unknown backend fails at construction."""
        with pytest.raises(ProviderNotFoundError):
            GenerationGateway(make_settings(fallback_providers=("deepseek", "nonexistent")))
