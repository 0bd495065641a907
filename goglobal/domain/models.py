"""
Domain Models - Product Input and Market Analysis Result
========================================================

ARCHITECTURAL DECISION:
- Pydantic models validate once at the boundary; everything downstream
  trusts the types
- snake_case in Python, camelCase on the wire (the frontend contract)
- Results are frozen: a re-run replaces them wholesale

All scores are integers clamped into [0, 100].
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel


def utc_timestamp() -> str:
    """Current time as an ISO 8601 string in UTC."""
    return datetime.now(timezone.utc).isoformat()


def _clamp_score(value: Any) -> Any:
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return value  # pydantic reports it
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(max(0, min(100, round(value))))
    return value


Score = Annotated[int, BeforeValidator(_clamp_score)]


class Recommendation(str, Enum):
    """Four-tier recommendation used by every provider's result."""

    STRONGLY_RECOMMENDED = "strongly-recommended"
    RECOMMENDED = "recommended"
    CONSIDER_CAREFULLY = "consider-carefully"
    NOT_RECOMMENDED = "not-recommended"

    @classmethod
    def for_score(cls, score: float) -> "Recommendation":
        """Map an overall score onto its band (90 / 70 / 50)."""
        if score >= 90:
            return cls.STRONGLY_RECOMMENDED
        if score >= 70:
            return cls.RECOMMENDED
        if score >= 50:
            return cls.CONSIDER_CAREFULLY
        return cls.NOT_RECOMMENDED


RECOMMENDATION_LABELS = {
    Recommendation.STRONGLY_RECOMMENDED: "GO - Strongly Recommended",
    Recommendation.RECOMMENDED: "GO - Recommended",
    Recommendation.CONSIDER_CAREFULLY: "CAUTION - Consider Carefully",
    Recommendation.NOT_RECOMMENDED: "NO-GO - Not Recommended",
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _ResultPart(BaseModel):
    # Models add fields we do not model (opportunities, entryBarriers, ...)
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow", frozen=True
    )


# ── Input ──────────────────────────────────────────────────────────

class ProductInput(_CamelModel):
    """Product data submitted for one analysis run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_name: str
    category: str
    description: str
    cost_price: float = Field(default=0, ge=0)
    selling_price: float = Field(default=0, ge=0)
    target_markets: tuple[str, ...] = Field(min_length=1)
    current_market: str
    production_capacity: str = ""
    certifications: str = ""
    shelf_life: str = ""
    experience: str = ""

    @field_validator("production_capacity", "certifications", "shelf_life", "experience", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def profit_margin(self) -> float:
        """Gross margin in percent of the selling price."""
        if self.selling_price <= 0:
            return 0.0
        return (self.selling_price - self.cost_price) / self.selling_price * 100


# ── Result ─────────────────────────────────────────────────────────

class ScoreBreakdown(_ResultPart):
    legal_compliance: Score = 0
    competitive_analysis: Score = 0
    market_demand: Score = 0
    pricing_strategy: Score = 0
    cultural_adaptation: Score = 0


class LegalCompliance(_ResultPart):
    score: Score = 0
    risk_level: str = "Medium"
    regulations: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    labeling_requirements: list[str] = Field(default_factory=list)
    prohibitions: list[str] = Field(default_factory=list)


class Competitor(_ResultPart):
    name: str
    price_range: str = ""
    market_share: Optional[str] = None


class CompetitiveAnalysis(_ResultPart):
    score: Score = 0
    competitors: list[Competitor] = Field(default_factory=list)
    competition_intensity: str = "Medium"
    market_share_distribution: str = ""


class MarketDemand(_ResultPart):
    score: Score = 0
    market_size: str = ""
    growth_trend: str = ""
    consumer_preferences: list[str] = Field(default_factory=list)
    seasonal_factors: list[str] = Field(default_factory=list)


class PriceRange(_ResultPart):
    min: float = 0
    max: float = 0
    currency: str = "USD"


class PricingStrategy(_ResultPart):
    score: Score = 0
    recommended_price_range: PriceRange = Field(default_factory=PriceRange)
    tariff_estimate: str = ""
    logistics_cost: str = ""
    profit_margin: str = ""


class CulturalAdaptation(_ResultPart):
    score: Score = 0
    localization_requirements: list[str] = Field(default_factory=list)
    cultural_considerations: list[str] = Field(default_factory=list)
    marketing_recommendations: list[str] = Field(default_factory=list)


class MarketAnalysisResult(_ResultPart):
    """
    Analysis of one product in one target market.

    Produced once per (product, market) pair by an AnalysisProvider.
    """

    market: str
    overall_score: Score
    # Missing or unknown labels are derived from overall_score
    recommendation: Recommendation = Field(default=None, validate_default=True)

    scores: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    legal_compliance: LegalCompliance = Field(default_factory=LegalCompliance)
    competitive_analysis: CompetitiveAnalysis = Field(default_factory=CompetitiveAnalysis)
    market_demand: MarketDemand = Field(default_factory=MarketDemand)
    pricing_strategy: PricingStrategy = Field(default_factory=PricingStrategy)
    cultural_adaptation: CulturalAdaptation = Field(default_factory=CulturalAdaptation)

    key_findings: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)
    risk_alerts: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    last_updated: str = Field(default_factory=utc_timestamp)

    @field_validator("recommendation", mode="before")
    @classmethod
    def _known_recommendation(cls, value: Any, info: ValidationInfo) -> Recommendation:
        """Missing or unknown labels fall back to the band of the overall score."""
        try:
            return Recommendation(value)
        except (TypeError, ValueError):
            return Recommendation.for_score(info.data.get("overall_score", 0))

    @classmethod
    def fallback(cls, market: str) -> "MarketAnalysisResult":
        """Zero-score placeholder used when a market could not be analyzed."""
        return cls(
            market=market,
            overall_score=0,
            recommendation=Recommendation.NOT_RECOMMENDED,
            legal_compliance=LegalCompliance(
                risk_level="High",
                regulations=["Error: Unable to fetch regulatory information"],
            ),
            competitive_analysis=CompetitiveAnalysis(
                competition_intensity="High",
                market_share_distribution="Unknown",
            ),
            market_demand=MarketDemand(market_size="Unknown", growth_trend="Unknown"),
            pricing_strategy=PricingStrategy(
                tariff_estimate="Unknown",
                logistics_cost="Unknown",
                profit_margin="Unknown",
            ),
            key_findings=[f"Analysis failed for {market}. Please try again later."],
            action_items=["Contact support if the issue persists."],
            risk_alerts=["Unable to complete market analysis due to technical error."],
        )

    @property
    def recommendation_label(self) -> str:
        return RECOMMENDATION_LABELS[self.recommendation]

    def to_wire(self) -> dict:
        """JSON-ready dict with the frontend's camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")
