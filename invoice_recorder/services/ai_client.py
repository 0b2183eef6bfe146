"""
AI Client

Thin async wrapper around the OpenAI chat-completions API. A single
best-effort request per call: provider errors propagate to the caller.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from invoice_recorder.core.config import Settings, get_settings
from invoice_recorder.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AIResponse:
    """Standardized AI response."""
    content: str
    model: str
    usage: Optional[Dict[str, int]] = None
    latency_ms: Optional[float] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "content": self.content,
            "model": self.model,
            "usage": self.usage,
            "latency_ms": self.latency_ms,
            "timestamp": self.timestamp.isoformat(),
        }


class BaseAIClient(ABC):
    """Abstract base class for completion clients."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate a response from the AI."""
        pass

    def is_available(self) -> bool:
        """Check if the client is properly configured and available."""
        return True

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        pass


class OpenAIClient(BaseAIClient):
    """OpenAI API client."""

    def __init__(self, settings: Optional[Settings] = None, client=None):
        self.settings = settings or get_settings()
        self.model = self.settings.openai_model
        self.max_tokens = self.settings.openai_max_tokens
        self.temperature = self.settings.openai_temperature
        self._client = client

    def is_available(self) -> bool:
        """Check if OpenAI API key is configured."""
        return self._client is not None or bool(self.settings.openai_api_key)

    def initialize(self) -> None:
        """Create the underlying AsyncOpenAI client."""
        if self._client is not None:
            return
        from openai import AsyncOpenAI
        self._client = AsyncOpenAI(api_key=self.settings.openai_api_key)
        logger.info("OpenAI client initialized", model=self.model)

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate response using OpenAI."""
        if self._client is None:
            self.initialize()

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        start_time = time.time()

        try:
            response = await self._client.chat.completions.create(
                model=kwargs.get("model", self.model),
                messages=messages,
                max_tokens=kwargs.get("max_tokens", self.max_tokens),
                temperature=kwargs.get("temperature", self.temperature),
            )
        except Exception as e:
            logger.error(f"OpenAI generation failed: {e}")
            raise

        latency = (time.time() - start_time) * 1000

        usage = None
        if getattr(response, "usage", None) is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return AIResponse(
            content=response.choices[0].message.content or "",
            model=getattr(response, "model", None) or self.model,
            usage=usage,
            latency_ms=latency,
        )

    async def close(self) -> None:
        """Close OpenAI client."""
        if self._client:
            await self._client.close()
            self._client = None
