"""
Heuristic Scorer - Local, Network-Free Market Scoring
=====================================================

ARCHITECTURAL DECISION:
- Deterministic: same input, same report; no API key needed
- Six sub-scores start from a baseline and move by fixed deltas when the
  category or market is in one of the rule tables below
- Each sub-score has a parallel list of reasons produced by re-running
  the same checks

KNOWN QUIRK (kept on purpose, see DESIGN.md):
The overall score is the weighted sum of the NUMBER of reasons per
sub-score, not of the sub-scores themselves, so it stays in single digits
and the "go" threshold is practically unreachable.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .models import (
    CompetitiveAnalysis,
    CulturalAdaptation,
    LegalCompliance,
    MarketAnalysisResult,
    MarketDemand,
    PriceRange,
    PricingStrategy,
    ProductInput,
    Recommendation,
    ScoreBreakdown,
)
from .provider import AnalysisProvider


# ── Rule tables ────────────────────────────────────────────────────

HIGH_DEMAND_CATEGORIES = {
    "Electronics", "Food & Beverage", "Beauty & Cosmetics", "Health & Wellness",
}
SATURATED_CATEGORIES = {
    "Electronics", "Fashion & Apparel", "Beauty & Cosmetics",
}
REGULATED_CATEGORIES = {
    "Food & Beverage", "Health & Wellness", "Beauty & Cosmetics", "Toys & Games", "Automotive",
}

LARGE_CONSUMER_MARKETS = {
    "United States", "China", "Germany", "Japan", "India", "United Kingdom",
}
COMPETITIVE_MARKETS = {
    "United States", "China", "Japan", "United Kingdom", "Germany",
}
STRICT_REGULATORY_MARKETS = {
    "United States", "Germany", "France", "United Kingdom", "Japan", "China",
    "South Korea", "Australia",
}
HEAVY_LOCALIZATION_MARKETS = {
    "Japan", "China", "South Korea", "United Arab Emirates", "Brazil",
}

# Two markets are "near" when they share a region
MARKET_REGIONS = {
    "United States": "North America",
    "Canada": "North America",
    "Mexico": "Latin America",
    "Brazil": "Latin America",
    "United Kingdom": "Europe",
    "Germany": "Europe",
    "France": "Europe",
    "Japan": "East Asia",
    "South Korea": "East Asia",
    "China": "East Asia",
    "Singapore": "Southeast Asia",
    "India": "South Asia",
    "United Arab Emirates": "Middle East",
    "Australia": "Oceania",
}

PERISHABLE_MARKERS = ("day", "week")
CERTIFICATION_DETAIL_LENGTH = 10

SCORE_WEIGHTS = {
    "market_demand": 0.25,
    "competition": 0.20,
    "regulatory": 0.15,
    "profitability": 0.15,
    "logistics": 0.15,
    "cultural_fit": 0.10,
}

# Per-unit costs as a share of the selling price
SHIPPING_AND_DUTIES_RATE = 0.10
PLATFORM_FEES_RATE = 0.05
MARKETING_CAC_RATE = 0.20

# One-off market entry costs in USD
FIXED_ENTRY_COSTS = {
    "certification": 5000,
    "market_research": 3000,
    "initial_marketing": 10000,
    "legal_and_registration": 2000,
}


class Verdict(str, Enum):
    """Three-tier verdict of the heuristic path."""

    GO = "go"
    CAUTION = "caution"
    NO_GO = "no-go"

    @classmethod
    def for_score(cls, score: float) -> "Verdict":
        if score >= 70:
            return cls.GO
        if score >= 50:
            return cls.CAUTION
        return cls.NO_GO


@dataclass(frozen=True)
class SubScore:
    score: int
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class CostBreakdown:
    """Per-unit costs in the selling currency."""

    selling_price: float
    manufacturing: float
    shipping_and_duties: float
    platform_fees: float
    marketing_cac: float
    fixed_costs: float = field(default_factory=lambda: float(sum(FIXED_ENTRY_COSTS.values())))

    @property
    def total_per_unit(self) -> float:
        return round(
            self.manufacturing + self.shipping_and_duties + self.platform_fees + self.marketing_cac, 2
        )

    @property
    def net_profit_per_unit(self) -> float:
        return round(self.selling_price - self.total_per_unit, 2)

    @property
    def break_even_units(self) -> Optional[int]:
        """Units needed to recover the fixed costs; None when not profitable."""
        if self.net_profit_per_unit <= 0:
            return None
        return math.ceil(self.fixed_costs / self.net_profit_per_unit)

    @property
    def break_even_label(self) -> str:
        units = self.break_even_units
        if units is None:
            return "not profitable"
        return f"{units:,} units"

    def to_dict(self) -> dict:
        return {
            "manufacturingCost": self.manufacturing,
            "shippingAndDuties": self.shipping_and_duties,
            "platformFees": self.platform_fees,
            "marketingCac": self.marketing_cac,
            "totalPerUnit": self.total_per_unit,
            "netProfitPerUnit": self.net_profit_per_unit,
            "fixedCosts": self.fixed_costs,
            "breakEvenUnits": self.break_even_units,
        }


@dataclass(frozen=True)
class HeuristicReport:
    market: str
    market_demand: SubScore
    competition: SubScore
    regulatory: SubScore
    profitability: SubScore
    logistics: SubScore
    cultural_fit: SubScore
    overall_score: float
    verdict: Verdict
    costs: CostBreakdown

    def sub_scores(self) -> dict[str, SubScore]:
        return {name: getattr(self, name) for name in SCORE_WEIGHTS}


# ── Checks ─────────────────────────────────────────────────────────

def _clamp(value: int, floor: int = 0, ceiling: int = 100) -> int:
    return max(floor, min(ceiling, value))


def _has_certification_detail(product: ProductInput) -> bool:
    return len(product.certifications.strip()) > CERTIFICATION_DETAIL_LENGTH


def _is_near(product: ProductInput, market: str) -> bool:
    home = MARKET_REGIONS.get(product.current_market)
    return home is not None and home == MARKET_REGIONS.get(market)


def _is_perishable(product: ProductInput) -> bool:
    shelf_life = product.shelf_life.lower()
    return any(marker in shelf_life for marker in PERISHABLE_MARKERS)


def _capacity_adjustment(product: ProductInput) -> int:
    capacity = product.production_capacity.lower()
    if capacity.startswith("small"):
        return -10
    if capacity.startswith("large") or capacity.startswith("very large"):
        return 10
    return 0


def _is_experienced(product: ProductInput) -> bool:
    return product.experience.lower().startswith("extensive")


# ── Sub-scores ─────────────────────────────────────────────────────

def market_demand_score(product: ProductInput, market: str) -> int:
    score = 50
    if product.category in HIGH_DEMAND_CATEGORIES:
        score += 20
    if market in LARGE_CONSUMER_MARKETS:
        score += 15
    if _has_certification_detail(product):
        score += 5
    return _clamp(score, ceiling=95)


def market_demand_reasons(product: ProductInput, market: str) -> list[str]:
    reasons = []
    if product.category in HIGH_DEMAND_CATEGORIES:
        reasons.append(f"{product.category} is a high-demand category in export markets")
    if market in LARGE_CONSUMER_MARKETS:
        reasons.append(f"{market} is one of the largest consumer markets")
    if _has_certification_detail(product):
        reasons.append("Existing certifications make the product easier to list with distributors")
    return reasons


def competition_score(product: ProductInput, market: str) -> int:
    score = 60
    if product.category in SATURATED_CATEGORIES:
        score -= 20
    if market in COMPETITIVE_MARKETS:
        score -= 15
    if _is_experienced(product):
        score += 10
    return _clamp(score, floor=30)


def competition_reasons(product: ProductInput, market: str) -> list[str]:
    reasons = []
    if product.category in SATURATED_CATEGORIES:
        reasons.append(f"{product.category} is crowded with established brands")
    if market in COMPETITIVE_MARKETS:
        reasons.append(f"{market} is a highly competitive retail market")
    if _is_experienced(product):
        reasons.append("Extensive export experience helps against incumbents")
    return reasons


def regulatory_score(product: ProductInput, market: str) -> int:
    score = 70
    if market in STRICT_REGULATORY_MARKETS:
        score -= 25
    if product.category in REGULATED_CATEGORIES:
        score -= 20
    if _has_certification_detail(product):
        score += 15
    return _clamp(score, floor=25)


def regulatory_reasons(product: ProductInput, market: str) -> list[str]:
    reasons = []
    if market in STRICT_REGULATORY_MARKETS:
        reasons.append(f"{market} enforces strict import and product safety rules")
    if product.category in REGULATED_CATEGORIES:
        reasons.append(f"{product.category} products need category-specific approvals")
    if _has_certification_detail(product):
        reasons.append("Listed certifications cover part of the compliance work")
    return reasons


def profitability_score(product: ProductInput, market: str) -> int:
    score = 50
    margin = product.profit_margin
    if margin > 50:
        score += 30
    elif margin > 30:
        score += 20
    elif margin > 15:
        score += 10
    else:
        score -= 20
    if product.selling_price > 100:
        score += 10
    return _clamp(score)


def profitability_reasons(product: ProductInput, market: str) -> list[str]:
    reasons = []
    margin = product.profit_margin
    if margin > 50:
        reasons.append(f"Excellent gross margin of {margin:.0f}%")
    elif margin > 30:
        reasons.append(f"Healthy gross margin of {margin:.0f}%")
    elif margin > 15:
        reasons.append(f"Moderate gross margin of {margin:.0f}%")
    else:
        reasons.append(f"Thin gross margin of {margin:.0f}% leaves little room for export costs")
    if product.selling_price > 100:
        reasons.append("Premium price point absorbs per-unit logistics costs")
    return reasons


def logistics_score(product: ProductInput, market: str) -> int:
    score = 60
    if _is_near(product, market):
        score += 15
    if _is_perishable(product):
        score -= 15
    score += _capacity_adjustment(product)
    return _clamp(score, floor=20, ceiling=90)


def logistics_reasons(product: ProductInput, market: str) -> list[str]:
    reasons = []
    if _is_near(product, market):
        reasons.append(f"{market} is close to {product.current_market}")
    if _is_perishable(product):
        reasons.append(f"Short shelf life ({product.shelf_life}) needs fast shipping")
    adjustment = _capacity_adjustment(product)
    if adjustment < 0:
        reasons.append("Small production capacity limits shipment sizes")
    elif adjustment > 0:
        reasons.append("Production capacity supports container-sized shipments")
    return reasons


def cultural_fit_score(product: ProductInput, market: str) -> int:
    score = 65
    if _is_near(product, market):
        score += 15
    if market in HEAVY_LOCALIZATION_MARKETS:
        score -= 15
    return _clamp(score, ceiling=95)


def cultural_fit_reasons(product: ProductInput, market: str) -> list[str]:
    reasons = []
    if _is_near(product, market):
        reasons.append(f"Consumers in {market} share tastes with {product.current_market}")
    if market in HEAVY_LOCALIZATION_MARKETS:
        reasons.append(f"{market} expects localized packaging and marketing")
    return reasons


def overall_score(reasons: dict[str, list[str]]) -> float:
    """Weighted sum of reason counts per sub-score."""
    return round(sum(len(reasons[name]) * weight for name, weight in SCORE_WEIGHTS.items()), 2)


def cost_breakdown(product: ProductInput) -> CostBreakdown:
    selling = product.selling_price
    return CostBreakdown(
        selling_price=selling,
        manufacturing=product.cost_price,
        shipping_and_duties=round(selling * SHIPPING_AND_DUTIES_RATE, 2),
        platform_fees=round(selling * PLATFORM_FEES_RATE, 2),
        marketing_cac=round(selling * MARKETING_CAC_RATE, 2),
    )


_RULES = {
    "market_demand": (market_demand_score, market_demand_reasons),
    "competition": (competition_score, competition_reasons),
    "regulatory": (regulatory_score, regulatory_reasons),
    "profitability": (profitability_score, profitability_reasons),
    "logistics": (logistics_score, logistics_reasons),
    "cultural_fit": (cultural_fit_score, cultural_fit_reasons),
}


class HeuristicScorer:
    """
    Scores a product for one market from the rule tables above.

    USAGE:
        report = HeuristicScorer().score(product, "Germany")
        print(report.verdict, report.costs.break_even_label)
    """

    def score(self, product: ProductInput, market: str) -> HeuristicReport:
        sub_scores = {}
        reasons = {}
        for name, (score_fn, reasons_fn) in _RULES.items():
            reasons[name] = reasons_fn(product, market)
            sub_scores[name] = SubScore(score=score_fn(product, market), reasons=tuple(reasons[name]))

        overall = overall_score(reasons)
        return HeuristicReport(
            market=market,
            overall_score=overall,
            verdict=Verdict.for_score(overall),
            costs=cost_breakdown(product),
            **sub_scores,
        )


def _level(score: int) -> str:
    if score >= 70:
        return "Low"
    if score >= 50:
        return "Medium"
    return "High"


class HeuristicProvider(AnalysisProvider):
    """Adapts HeuristicReport onto the common MarketAnalysisResult shape."""

    name = "heuristic"

    def __init__(self, scorer: Optional[HeuristicScorer] = None):
        self._scorer = scorer or HeuristicScorer()

    def analyze_market(self, product: ProductInput, market: str) -> MarketAnalysisResult:
        report = self._scorer.score(product, market)
        return self.to_result(product, report)

    @staticmethod
    def to_result(product: ProductInput, report: HeuristicReport) -> MarketAnalysisResult:
        costs = report.costs
        selling = product.selling_price

        findings = [reason for sub in report.sub_scores().values() for reason in sub.reasons]
        risks = [
            f"Low {name.replace('_', ' ')} score ({sub.score}/100)"
            for name, sub in report.sub_scores().items()
            if sub.score < 50
        ]
        if costs.break_even_units is None:
            actions = ["Not profitable at current pricing: revisit cost or selling price"]
        else:
            actions = [f"Plan for break-even at {costs.break_even_label}"]

        return MarketAnalysisResult(
            market=report.market,
            overall_score=report.overall_score,
            recommendation=Recommendation.for_score(report.overall_score),
            scores=ScoreBreakdown(
                legal_compliance=report.regulatory.score,
                competitive_analysis=report.competition.score,
                market_demand=report.market_demand.score,
                pricing_strategy=report.profitability.score,
                cultural_adaptation=report.cultural_fit.score,
            ),
            legal_compliance=LegalCompliance(
                score=report.regulatory.score,
                risk_level=_level(report.regulatory.score),
                regulations=list(report.regulatory.reasons),
            ),
            competitive_analysis=CompetitiveAnalysis(
                score=report.competition.score,
                competition_intensity=_level(report.competition.score),
                market_share_distribution="Not assessed by local heuristic",
            ),
            market_demand=MarketDemand(
                score=report.market_demand.score,
                market_size="Not estimated by local heuristic",
                growth_trend="Not estimated by local heuristic",
                consumer_preferences=list(report.market_demand.reasons),
            ),
            pricing_strategy=PricingStrategy(
                score=report.profitability.score,
                recommended_price_range=PriceRange(
                    min=round(selling * 0.85), max=round(selling * 1.15), currency="USD"
                ),
                tariff_estimate=f"~{SHIPPING_AND_DUTIES_RATE:.0%} of selling price incl. shipping",
                logistics_cost=f"${costs.shipping_and_duties:.2f} per unit",
                profit_margin=f"{product.profit_margin:.1f}%",
            ),
            cultural_adaptation=CulturalAdaptation(
                score=report.cultural_fit.score,
                localization_requirements=list(report.cultural_fit.reasons),
            ),
            key_findings=findings,
            action_items=actions,
            risk_alerts=risks,
            sources=["GOGLOBAL local heuristic rule tables"],
            verdict=report.verdict.value,
            logistics={"score": report.logistics.score, "reasons": list(report.logistics.reasons)},
            costBreakdown=costs.to_dict(),
        )
