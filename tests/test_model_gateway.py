"""Tests for the LLM gateway using a fake OpenAI client."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from cv_portfolio.cv_pipeline.model_gateway import ModelGateway
from cv_portfolio.errors import GatewayError, GatewayTimeout


class _FakeCompletions:
    def __init__(self, content=None, exc=None, delay=0.0):
        self.content = content
        self.exc = exc
        self.delay = delay
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions: _FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_returns_completion_text() -> None:
    completions = _FakeCompletions(content='{"name": "Jane"}')
    gateway = ModelGateway(api_key="k", model="test-model", client=_client(completions))
    assert asyncio.run(gateway.complete("prompt")) == '{"name": "Jane"}'
    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["messages"] == [{"role": "user", "content": "prompt"}]
    assert "temperature" not in call


def test_empty_completion_returns_empty_string() -> None:
    gateway = ModelGateway(api_key="k", client=_client(_FakeCompletions(content=None)))
    assert asyncio.run(gateway.complete("prompt")) == ""


def test_missing_api_key_fails_before_calling() -> None:
    gateway = ModelGateway(api_key="")
    with pytest.raises(GatewayError):
        asyncio.run(gateway.complete("prompt"))


def test_provider_error_becomes_gateway_error() -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    exc = openai.APIConnectionError(request=request)
    gateway = ModelGateway(api_key="k", client=_client(_FakeCompletions(exc=exc)))
    with pytest.raises(GatewayError) as info:
        asyncio.run(gateway.complete("prompt"))
    assert not isinstance(info.value, GatewayTimeout)


def test_slow_call_times_out() -> None:
    gateway = ModelGateway(api_key="k", timeout=0.05, client=_client(_FakeCompletions(content="{}", delay=1.0)))
    with pytest.raises(GatewayTimeout):
        asyncio.run(gateway.complete("prompt"))
