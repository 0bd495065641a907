"""
Completion Backends - Wire Formats of the Completion APIs
=========================================================

The relay sends one prompt and expects one JSON document back. Only the
envelope differs between providers:

- chat:   OpenAI-compatible chat completions (DeepSeek, OpenRouter, ...)
          answer in choices[0].message.content
- gemini: Google generateContent
          answer in candidates[0].content.parts[0].text
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..config import LLMSettings


@dataclass(frozen=True)
class CompletionRequest:
    """Everything requests.post needs for one call."""

    url: str
    json: dict
    headers: dict = field(default_factory=dict)
    params: dict = field(default_factory=dict)


class CompletionBackend(ABC):
    """Builds the HTTP request for one prompt."""

    name: str = "backend"

    def __init__(self, settings: LLMSettings):
        self._settings = settings

    @abstractmethod
    def build_request(self, prompt: str) -> CompletionRequest:
        ...


class ChatCompletionsBackend(CompletionBackend):
    """OpenAI-compatible /chat/completions endpoint with bearer auth."""

    name = "chat"

    def build_request(self, prompt: str) -> CompletionRequest:
        s = self._settings
        return CompletionRequest(
            url=s.api_url,
            headers={
                "Authorization": f"Bearer {s.api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": s.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": s.temperature,
                "max_tokens": s.max_tokens,
                "response_format": {"type": "json_object"},
            },
        )


class GeminiBackend(CompletionBackend):
    """Google generateContent endpoint; the key travels as a query parameter."""

    name = "gemini"

    def build_request(self, prompt: str) -> CompletionRequest:
        s = self._settings
        return CompletionRequest(
            url=f"{s.api_url.rstrip('/')}/{s.model}:generateContent",
            headers={"Content-Type": "application/json"},
            params={"key": s.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": s.temperature,
                    "topK": 40,
                    "topP": 0.95,
                    "maxOutputTokens": s.max_tokens,
                    "responseMimeType": "application/json",
                },
            },
        )


BACKENDS = {
    "deepseek": ChatCompletionsBackend,
    "gemini": GeminiBackend,
}


def create_backend(settings: LLMSettings) -> CompletionBackend:
    try:
        backend_cls = BACKENDS[settings.backend]
    except KeyError:
        raise ValueError(f"Unknown LLM backend: {settings.backend}") from None
    return backend_cls(settings)


def extract_completion_text(data: dict) -> str:
    """Extract text content from either response envelope."""
    try:
        choices = data.get("choices") or []
        if choices:
            message = choices[0].get("message") or {}
            return (message.get("content") or "").strip()

        candidates = data.get("candidates") or []
        if candidates:
            parts = (candidates[0].get("content") or {}).get("parts") or []
            if parts:
                return (parts[0].get("text") or "").strip()
    except (AttributeError, IndexError, TypeError):
        pass
    return ""
