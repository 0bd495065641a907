# Application Layer
# =================
# Use cases and orchestration (no business rules):
# - validation:   raw request body -> ProductInput
# - orchestrator: sequential multi-market runs
# - providers:    configured AnalysisProvider

from .validation import validate_analysis_request
from .orchestrator import MarketAnalysisOrchestrator
from .providers import create_provider

__all__ = ["validate_analysis_request", "MarketAnalysisOrchestrator", "create_provider"]
