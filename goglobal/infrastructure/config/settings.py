"""
Settings - Environment Configuration for the Analysis Service
=============================================================

ARCHITECTURAL DECISION:
- Every knob comes from the environment (.env in development); API keys
  never live in code
- Three frozen groups: completion API (llm), provider choice and pacing
  (analysis), HTTP server (server)
- validate() reports problems instead of raising, so the entry points
  decide whether a problem stops startup

EXTENSIBILITY:
- To add another completion API: add its defaults to BACKEND_DEFAULTS
- To share rate limits across processes: swap the store, not the settings
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file if present (development convenience)
load_dotenv()


BACKEND_DEFAULTS = {
    "deepseek": {
        "api_url": "https://api.deepseek.com/v1/chat/completions",
        "model": "deepseek-chat",
        "max_tokens": 4000,
        "prompt_variant": "compact",
        "key_env": "DEEPSEEK_API_KEY",
    },
    "gemini": {
        "api_url": "https://generativelanguage.googleapis.com/v1beta/models",
        "model": "gemini-1.5-pro",
        "max_tokens": 8192,
        "prompt_variant": "detailed",
        "key_env": "GEMINI_API_KEY",
    },
}

ANALYSIS_PROVIDERS = ("remote", "heuristic")
PROMPT_VARIANTS = ("compact", "detailed")


def _backend() -> str:
    return os.getenv("LLM_BACKEND", "deepseek").strip().lower()


def _backend_default(key: str):
    defaults = BACKEND_DEFAULTS.get(_backend(), BACKEND_DEFAULTS["deepseek"])
    return defaults[key]


def _api_key() -> str:
    return os.getenv("LLM_API_KEY") or os.getenv(_backend_default("key_env"), "")


@dataclass(frozen=True)
class LLMSettings:
    """Completion API settings for the remote analysis provider."""

    backend: str = field(default_factory=_backend)
    api_key: str = field(default_factory=_api_key)
    api_url: str = field(
        default_factory=lambda: os.getenv("LLM_API_URL") or _backend_default("api_url")
    )
    model: str = field(
        default_factory=lambda: os.getenv("LLM_MODEL") or _backend_default("model")
    )

    temperature: float = field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.7"))
    )
    max_tokens: int = field(
        default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS") or _backend_default("max_tokens"))
    )
    timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
    )

    prompt_variant: str = field(
        default_factory=lambda: os.getenv("PROMPT_VARIANT") or _backend_default("prompt_variant")
    )

    @property
    def key_preview(self) -> str:
        """First characters of the key, safe for startup logs."""
        if not self.api_key:
            return "(not set)"
        return f"{self.api_key[:8]}..."


@dataclass(frozen=True)
class AnalysisSettings:
    """Which provider runs the analysis and how markets are paced."""

    provider: str = field(
        default_factory=lambda: os.getenv("ANALYSIS_PROVIDER", "remote").strip().lower()
    )

    # Pause between consecutive markets to respect upstream rate limits
    market_delay_seconds: float = field(
        default_factory=lambda: float(os.getenv("MARKET_REQUEST_DELAY_SECONDS", "1.0"))
    )


@dataclass(frozen=True)
class ServerSettings:
    """HTTP server settings."""

    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    frontend_url: str = field(
        default_factory=lambda: os.getenv("FRONTEND_URL", "http://localhost:5173")
    )
    environment: str = field(
        default_factory=lambda: os.getenv("APP_ENV", "production").strip().lower()
    )

    # Fixed one-minute window per client IP
    max_requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("MAX_REQUESTS_PER_MINUTE", "10"))
    )
    rate_limit_window_seconds: float = 60.0

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@dataclass(frozen=True)
class Settings:
    """
    Service configuration: completion API, analysis provider and HTTP server.

    Usage:
        from goglobal.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.llm.model)
    """

    llm: LLMSettings = field(default_factory=LLMSettings)
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)
    server: ServerSettings = field(default_factory=ServerSettings)

    service_name: str = "GOGLOBAL Market Analysis API"
    version: str = "1.0.0"

    def validate(self) -> list[str]:
        """
        Check the combination of settings; one message per problem.
        Issues starting with "ERROR:" must stop the process.
        An empty list means the service can start as configured.
        """
        issues = []

        if self.llm.backend not in BACKEND_DEFAULTS:
            issues.append(
                f"ERROR: Unknown LLM_BACKEND '{self.llm.backend}'. "
                f"Use one of: {', '.join(BACKEND_DEFAULTS)}."
            )

        if self.analysis.provider not in ANALYSIS_PROVIDERS:
            issues.append(
                f"ERROR: Unknown ANALYSIS_PROVIDER '{self.analysis.provider}'. "
                f"Use one of: {', '.join(ANALYSIS_PROVIDERS)}."
            )

        if self.llm.prompt_variant not in PROMPT_VARIANTS:
            issues.append(
                f"ERROR: Unknown PROMPT_VARIANT '{self.llm.prompt_variant}'. "
                f"Use one of: {', '.join(PROMPT_VARIANTS)}."
            )

        if self.analysis.provider == "remote" and not self.llm.api_key:
            issues.append(
                "ERROR: LLM_API_KEY is not set. "
                "Create a .env file with your completion API key."
            )

        if self.server.max_requests_per_minute <= 0:
            issues.append("ERROR: MAX_REQUESTS_PER_MINUTE must be a positive integer.")

        if self.analysis.provider == "heuristic":
            issues.append(
                "WARNING: ANALYSIS_PROVIDER=heuristic. "
                "Reports come from local rule tables, not from the model."
            )

        if self.analysis.market_delay_seconds < 0:
            issues.append(
                "WARNING: MARKET_REQUEST_DELAY_SECONDS is negative; no pause will be applied."
            )

        return issues

    def errors(self) -> list[str]:
        """Only the issues that must stop the process."""
        return [issue for issue in self.validate() if issue.startswith("ERROR:")]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Settings read from the environment on first call.
    Later calls return the same object; tests build Settings directly.
    """
    return Settings()
