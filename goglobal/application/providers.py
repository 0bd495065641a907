"""
Provider Factory
================

Picks the analysis strategy named by ANALYSIS_PROVIDER.
"""

import logging
from typing import Optional

from goglobal.domain.heuristics import HeuristicProvider
from goglobal.domain.provider import AnalysisProvider
from goglobal.infrastructure.config import Settings, get_settings
from goglobal.infrastructure.llm import RemoteModelProvider

logger = logging.getLogger(__name__)


def create_provider(settings: Optional[Settings] = None) -> AnalysisProvider:
    settings = settings or get_settings()
    name = settings.analysis.provider

    if name == "heuristic":
        logger.info("Using local heuristic analysis provider")
        return HeuristicProvider()
    if name == "remote":
        logger.info(f"Using remote analysis provider ({settings.llm.backend}, {settings.llm.model})")
        return RemoteModelProvider(settings.llm)

    raise ValueError(f"Unknown analysis provider: {name}")
