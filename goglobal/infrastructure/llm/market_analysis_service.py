"""
Market Analysis Service - LLM Relay for Market Entry Analysis
=============================================================

ARCHITECTURAL DECISION:
- One HTTP call per (product, market); the prompt is the only content
- The model is asked for JSON; markdown fences are stripped if it adds them
- Minimal shape check (market string, numeric overallScore), then the
  pydantic model coerces the rest
- ANY failure becomes a zero-score fallback record. The caller never sees
  an exception; full detail goes to the server log

No retries. A persistently failing upstream degrades every market to the
fallback record but never stops the run.
"""

import json
import logging
import re
from typing import Optional

import requests
from pydantic import ValidationError

from goglobal.domain.errors import ModelResponseError
from goglobal.domain.models import MarketAnalysisResult, ProductInput
from goglobal.domain.provider import AnalysisProvider

from ..config import LLMSettings, get_settings
from .completion_backends import CompletionBackend, create_backend, extract_completion_text
from .prompt_builder import build_prompt

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\n?")


def strip_code_fences(content: str) -> str:
    """Remove markdown code fences the model may wrap around its JSON."""
    return _CODE_FENCE.sub("", content).strip()


def parse_analysis(content: str, market: str) -> MarketAnalysisResult:
    """
    Parse the model's text into a MarketAnalysisResult.

    Raises:
        ModelResponseError: if the text is not JSON or lacks the minimal shape.
    """
    cleaned = strip_code_fences(content)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ModelResponseError(f"Invalid JSON response from model: {e}") from e

    if not isinstance(data, dict):
        raise ModelResponseError("Model response is not a JSON object")

    reported_market = data.get("market")
    if not isinstance(reported_market, str) or not reported_market.strip():
        raise ModelResponseError("Invalid response structure: missing market")

    score = data.get("overallScore")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ModelResponseError("Invalid response structure: overallScore is not a number")

    if reported_market != market:
        logger.warning(f"Model labelled {market} as '{reported_market}', keeping requested name")
        data["market"] = market

    try:
        return MarketAnalysisResult.model_validate(data)
    except ValidationError as e:
        raise ModelResponseError(f"Model response does not match the result schema: {e}") from e


class RemoteModelProvider(AnalysisProvider):
    """
    Market analysis through an external completion API.

    USAGE:
        provider = RemoteModelProvider()
        result = provider.analyze_market(product, "Germany")
        print(result.overall_score)

    FALLBACK BEHAVIOR:
    - Network error or timeout: fallback record
    - Non-2xx status: fallback record
    - Unparsable or malformed JSON: fallback record
    """

    name = "remote"

    def __init__(
        self,
        settings: Optional[LLMSettings] = None,
        backend: Optional[CompletionBackend] = None,
    ):
        """Initialize relay with settings."""
        self._settings = settings or get_settings().llm
        self._backend = backend or create_backend(self._settings)
        self._timeout = self._settings.timeout_seconds
        self._prompt_variant = self._settings.prompt_variant

        if not self._settings.api_key:
            logger.warning("No LLM API key set. Every market will return the fallback record.")

    def analyze_market(self, product: ProductInput, market: str) -> MarketAnalysisResult:
        """
        Analyze one market.

        Returns:
            The model's analysis, or the fallback record on any failure.
        """
        tag = self._backend.name
        try:
            logger.info(f"[{tag}] Analyzing {market}...")
            result = self._analyze_with_llm(product, market)
            logger.info(f"[{tag}] Analyzed {market} (score: {result.overall_score})")
            return result

        except requests.Timeout:
            logger.warning(f"[{tag}] API timeout for {market}, returning fallback record")

        except requests.RequestException as e:
            logger.warning(f"[{tag}] API error for {market}: {e}, returning fallback record")

        except ModelResponseError as e:
            logger.warning(f"[{tag}] Unusable response for {market}: {e}, returning fallback record")

        except Exception as e:
            logger.exception(f"[{tag}] Unexpected error analyzing {market}: {e}")

        return MarketAnalysisResult.fallback(market)

    def _analyze_with_llm(self, product: ProductInput, market: str) -> MarketAnalysisResult:
        prompt = build_prompt(product, market, variant=self._prompt_variant)
        request = self._backend.build_request(prompt)

        response = requests.post(
            request.url,
            headers=request.headers,
            params=request.params or None,
            json=request.json,
            timeout=self._timeout,
        )
        if not response.ok:
            logger.error(
                f"[{self._backend.name}] API error for {market}: "
                f"{response.status_code} - {response.text[:500]}"
            )
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise ModelResponseError(f"Completion API returned non-JSON body: {e}") from e

        content = extract_completion_text(data)
        if not content:
            raise ModelResponseError("No content in completion response")

        try:
            return parse_analysis(content, market)
        except ModelResponseError:
            logger.debug(f"Raw model output for {market}: {content[:2000]}")
            raise
