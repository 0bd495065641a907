import json
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path to allow `import goglobal`
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from goglobal.domain.models import MarketAnalysisResult, ProductInput, Recommendation  # noqa: E402
from goglobal.domain.provider import AnalysisProvider  # noqa: E402
from goglobal.infrastructure.config import (  # noqa: E402
    AnalysisSettings,
    LLMSettings,
    ServerSettings,
    Settings,
)


class RecordingProvider(AnalysisProvider):
    """Provider double: remembers the markets it was asked for."""

    name = "recording"

    def __init__(self, score: int = 80, fail_on=()):
        self.calls: list[str] = []
        self._score = score
        self._fail_on = set(fail_on)

    def analyze_market(self, product, market):
        self.calls.append(market)
        if market in self._fail_on:
            raise RuntimeError(f"provider exploded on {market}")
        return MarketAnalysisResult(
            market=market,
            overall_score=self._score,
            recommendation=Recommendation.for_score(self._score),
        )


def analysis_document(market: str = "Germany", score: int = 82) -> dict:
    """A well-formed model answer for one market."""
    return {
        "market": market,
        "overallScore": score,
        "recommendation": "recommended",
        "scores": {
            "legalCompliance": 75,
            "competitiveAnalysis": 82,
            "marketDemand": 90,
            "pricingStrategy": 78,
            "culturalAdaptation": 85,
        },
        "legalCompliance": {
            "score": 75,
            "riskLevel": "Medium",
            "regulations": ["Regulation (EC) No 178/2002"],
            "certifications": ["EU Organic"],
            "labelingRequirements": ["German language label"],
            "prohibitions": [],
        },
        "competitiveAnalysis": {
            "score": 82,
            "competitors": [{"name": "Teekanne", "priceRange": "€3-€6", "marketShare": "18%"}],
            "competitionIntensity": "Medium",
            "marketShareDistribution": "Top 3 brands hold 50%",
        },
        "marketDemand": {
            "score": 90,
            "marketSize": "€1.2B annually",
            "growthTrend": "Growing at 4% YoY",
            "consumerPreferences": ["Organic"],
            "seasonalFactors": ["Winter peak"],
        },
        "pricingStrategy": {
            "score": 78,
            "recommendedPriceRange": {"min": 17, "max": 23, "currency": "EUR"},
            "tariffEstimate": "3.2% import duty",
            "logisticsCost": "€1 per unit",
            "profitMargin": "35%",
        },
        "culturalAdaptation": {
            "score": 85,
            "localizationRequirements": ["German packaging"],
            "culturalConsiderations": ["Sustainability matters"],
            "marketingRecommendations": ["Health food stores"],
        },
        "keyFindings": ["Strong organic demand"],
        "actionItems": ["Start certification"],
        "riskAlerts": ["Intense competition"],
        "opportunities": ["Online tea subscriptions"],
        "sources": ["Statista"],
        "lastUpdated": "2026-01-01T00:00:00+00:00",
    }


@pytest.fixture
def analysis_json():
    def _make(market: str = "Germany", score: int = 82) -> str:
        return json.dumps(analysis_document(market, score))
    return _make


@pytest.fixture
def product_payload() -> dict:
    return {
        "productName": "Organic Green Tea",
        "category": "Food & Beverage",
        "description": "Hand-picked organic green tea",
        "costPrice": 5,
        "sellingPrice": 20,
        "targetMarkets": ["United States", "Germany"],
        "currentMarket": "China",
        "productionCapacity": "Small (< 1,000 units/month)",
        "certifications": "EU Organic, ISO 22000",
        "shelfLife": "24 months",
        "experience": "No prior export experience",
    }


@pytest.fixture
def product(product_payload) -> ProductInput:
    return ProductInput.model_validate(product_payload)


@pytest.fixture
def make_settings():
    """Settings built without reading the environment."""

    def _make(
        backend: str = "deepseek",
        api_key: str = "sk-test-key",
        provider: str = "remote",
        environment: str = "production",
        max_requests_per_minute: int = 10,
        prompt_variant: str = "compact",
    ) -> Settings:
        api_url = (
            "https://llm.test/v1/chat/completions"
            if backend == "deepseek"
            else "https://llm.test/v1beta/models"
        )
        return Settings(
            llm=LLMSettings(
                backend=backend,
                api_key=api_key,
                api_url=api_url,
                model="deepseek-chat" if backend == "deepseek" else "gemini-1.5-pro",
                temperature=0.7,
                max_tokens=4000,
                timeout_seconds=5,
                prompt_variant=prompt_variant,
            ),
            analysis=AnalysisSettings(provider=provider, market_delay_seconds=0),
            server=ServerSettings(
                host="127.0.0.1",
                port=3000,
                frontend_url="http://localhost:5173",
                environment=environment,
                max_requests_per_minute=max_requests_per_minute,
            ),
        )

    return _make


@pytest.fixture
def recording_provider() -> RecordingProvider:
    return RecordingProvider()
