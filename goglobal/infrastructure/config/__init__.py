# Configuration
# =============
# Environment-driven, immutable settings shared by the web server and the CLI.

from .settings import Settings, LLMSettings, AnalysisSettings, ServerSettings, get_settings

__all__ = ["Settings", "LLMSettings", "AnalysisSettings", "ServerSettings", "get_settings"]
