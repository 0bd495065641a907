# LLM Relay
# =========
# Prompt templates, completion API wire formats and the remote analysis
# provider built on them.

from .prompt_builder import build_prompt
from .completion_backends import ChatCompletionsBackend, GeminiBackend, create_backend
from .market_analysis_service import RemoteModelProvider, parse_analysis, strip_code_fences

__all__ = [
    "build_prompt",
    "ChatCompletionsBackend",
    "GeminiBackend",
    "create_backend",
    "RemoteModelProvider",
    "parse_analysis",
    "strip_code_fences",
]
