# Domain Layer
# ============
# Pure business types and rules (no network, no framework):
# - models:     ProductInput, MarketAnalysisResult, recommendation bands
# - provider:   AnalysisProvider interface
# - heuristics: local rule-table scorer and its provider
# - report:     cross-market summary and text rendering
# - errors:     exception hierarchy

from .errors import (
    MarketAnalysisError,
    RequestValidationError,
    RateLimitExceededError,
    ModelResponseError,
    ConfigurationError,
)
from .models import ProductInput, MarketAnalysisResult, Recommendation, utc_timestamp
from .provider import AnalysisProvider
from .heuristics import HeuristicScorer, HeuristicProvider, Verdict
from .report import summarize, render_text_report

__all__ = [
    "MarketAnalysisError",
    "RequestValidationError",
    "RateLimitExceededError",
    "ModelResponseError",
    "ConfigurationError",
    "ProductInput",
    "MarketAnalysisResult",
    "Recommendation",
    "utc_timestamp",
    "AnalysisProvider",
    "HeuristicScorer",
    "HeuristicProvider",
    "Verdict",
    "summarize",
    "render_text_report",
]
