"""
Analysis Provider - Abstraction Layer for Market Analysis Strategies
====================================================================

Provides a unified interface for producing one MarketAnalysisResult per
(product, market) pair. Two implementations exist:

- RemoteModelProvider (infrastructure.llm): relays to a completion API
- HeuristicProvider (domain.heuristics): local rule tables, no network

USAGE:
    provider = create_provider(settings)
    result = provider.analyze_market(product, "Germany")
"""

from abc import ABC, abstractmethod

from .models import MarketAnalysisResult, ProductInput


class AnalysisProvider(ABC):
    """
    Abstract base class for analysis strategies.
    Implement this interface to add new analysis backends.

    Contract: analyze_market returns a well-typed result for the requested
    market. Implementations recover from their own failures where they can;
    the orchestrator substitutes a fallback record for anything that escapes.
    """

    name: str = "provider"

    @abstractmethod
    def analyze_market(self, product: ProductInput, market: str) -> MarketAnalysisResult:
        """Analyze one product for one target market."""
        ...
