"""
Unit tests for the OpenAI completion client.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from invoice_recorder.core.config import get_settings
from invoice_recorder.services.ai_client import AIResponse, OpenAIClient


def _completion(content, usage=None):
    response = Mock()
    response.choices = [Mock()]
    response.choices[0].message = Mock()
    response.choices[0].message.content = content
    response.model = "gpt-4-turbo"
    response.usage = usage
    return response


@pytest.fixture
def mock_client():
    client = AsyncMock()
    client.chat.completions.create = AsyncMock(return_value=_completion('{"key": "value"}'))
    return client


class TestOpenAIClient:
    """Tests for OpenAIClient."""

    @pytest.mark.asyncio
    async def test_generate(self, mock_client):
        """Test a chat completion request and response mapping."""
        client = OpenAIClient(client=mock_client)

        response = await client.generate("user prompt", system_prompt="system prompt")

        assert isinstance(response, AIResponse)
        assert response.content == '{"key": "value"}'
        assert response.model == "gpt-4-turbo"
        assert response.usage is None
        assert response.latency_ms >= 0

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "system prompt"},
            {"role": "user", "content": "user prompt"},
        ]
        assert kwargs["model"] == get_settings().openai_model

    @pytest.mark.asyncio
    async def test_overrides(self, mock_client):
        """Test per-call temperature and token overrides."""
        client = OpenAIClient(client=mock_client)

        await client.generate("prompt", temperature=0.2, max_tokens=2000, model="gpt-4o")

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 2000
        assert kwargs["model"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_usage_reported(self, mock_client):
        """Test token usage is copied when present."""
        usage = Mock(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        mock_client.chat.completions.create.return_value = _completion("{}", usage)
        client = OpenAIClient(client=mock_client)

        response = await client.generate("prompt")

        assert response.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}

    @pytest.mark.asyncio
    async def test_null_content(self, mock_client):
        """Test a null message content becomes an empty string."""
        mock_client.chat.completions.create.return_value = _completion(None)
        client = OpenAIClient(client=mock_client)

        response = await client.generate("prompt")

        assert response.content == ""

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, mock_client):
        """Test provider failures are not swallowed."""
        mock_client.chat.completions.create.side_effect = TimeoutError("timed out")
        client = OpenAIClient(client=mock_client)

        with pytest.raises(TimeoutError):
            await client.generate("prompt")

    def test_availability(self, monkeypatch):
        """Test availability follows the API key."""
        from invoice_recorder.core.config import reload_settings

        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert not OpenAIClient(reload_settings()).is_available()

        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert OpenAIClient(reload_settings()).is_available()

    @pytest.mark.asyncio
    async def test_close(self, mock_client):
        """Test closing releases the underlying client."""
        client = OpenAIClient(client=mock_client)

        await client.close()

        mock_client.close.assert_awaited_once()
        assert client._client is None

    def test_response_to_dict(self):
        """Test AIResponse serialization."""
        data = AIResponse(content="{}", model="m").to_dict()

        assert data["content"] == "{}"
        assert data["model"] == "m"
        assert "timestamp" in data
