"""Heuristic scorer tests."""

import pytest

from goglobal.domain.heuristics import (
    COMPETITIVE_MARKETS,
    HIGH_DEMAND_CATEGORIES,
    MARKET_REGIONS,
    REGULATED_CATEGORIES,
    SATURATED_CATEGORIES,
    HeuristicProvider,
    HeuristicScorer,
    Verdict,
    competition_score,
    cost_breakdown,
    cultural_fit_score,
    logistics_score,
    market_demand_score,
    overall_score,
    profitability_score,
    regulatory_score,
)
from goglobal.domain.models import Recommendation

CATEGORIES = sorted(HIGH_DEMAND_CATEGORIES | SATURATED_CATEGORIES | REGULATED_CATEGORIES | {"Home & Garden"})
MARKETS = sorted(set(MARKET_REGIONS) | {"Nigeria"})


def _priced(product, cost, selling):
    return product.model_copy(update={"cost_price": cost, "selling_price": selling})


class TestSubScores:

    def test_fixture_product_in_united_states(self, product):
        report = HeuristicScorer().score(product, "United States")

        assert report.market_demand.score == 90
        assert report.competition.score == 45
        assert report.regulatory.score == 40
        assert report.profitability.score == 80
        assert report.logistics.score == 50
        assert report.cultural_fit.score == 65

    def test_nearby_market(self, product):
        # China and Japan share a region
        assert logistics_score(product, "Japan") == 65
        assert cultural_fit_score(product, "Japan") == 65

    def test_perishable_product(self, product):
        fresh = product.model_copy(update={"shelf_life": "10 days", "production_capacity": "Medium"})
        assert logistics_score(fresh, "United States") == 45

    def test_experienced_exporter(self, product):
        seasoned = product.model_copy(update={"experience": "Extensive (10+ years)"})
        assert competition_score(seasoned, "Brazil") == 70

    @pytest.mark.parametrize(
        "cost, selling, expected",
        [
            (5, 20, 80),
            (50, 200, 90),
            (12, 20, 70),
            (16, 20, 60),
            (19, 20, 30),
            (0, 0, 30),
        ],
    )
    def test_profitability(self, product, cost, selling, expected):
        assert profitability_score(_priced(product, cost, selling), "Germany") == expected

    @pytest.mark.parametrize("category", CATEGORIES)
    @pytest.mark.parametrize("market", MARKETS)
    def test_bounds_hold_everywhere(self, product, category, market):
        variant = product.model_copy(update={"category": category, "certifications": ""})

        assert market_demand_score(variant, market) <= 95
        assert competition_score(variant, market) >= 30
        assert regulatory_score(variant, market) >= 25
        assert 20 <= logistics_score(variant, market) <= 90
        assert cultural_fit_score(variant, market) <= 95
        assert 0 <= profitability_score(variant, market) <= 100

    def test_saturated_competitive_floor(self, product):
        gadget = product.model_copy(update={"category": "Electronics"})
        assert competition_score(gadget, "United States") == 30
        assert "United States" in COMPETITIVE_MARKETS


class TestOverallScore:

    def test_counts_reasons_not_scores(self, product):
        report = HeuristicScorer().score(product, "United States")

        assert report.overall_score == pytest.approx(1.7)
        assert report.verdict is Verdict.NO_GO

    def test_weighting(self):
        reasons = {
            "market_demand": ["a", "b"],
            "competition": ["a"],
            "regulatory": [],
            "profitability": ["a"],
            "logistics": [],
            "cultural_fit": ["a", "b"],
        }
        assert overall_score(reasons) == pytest.approx(1.05)

    @pytest.mark.parametrize(
        "score, verdict",
        [(70, Verdict.GO), (69.9, Verdict.CAUTION), (50, Verdict.CAUTION), (49, Verdict.NO_GO)],
    )
    def test_verdict_bands(self, score, verdict):
        assert Verdict.for_score(score) is verdict


class TestCostBreakdown:

    def test_profitable(self, product):
        costs = cost_breakdown(product)

        assert costs.shipping_and_duties == 2.0
        assert costs.platform_fees == 1.0
        assert costs.marketing_cac == 4.0
        assert costs.total_per_unit == 12.0
        assert costs.net_profit_per_unit == 8.0
        assert costs.fixed_costs == 20000
        assert costs.break_even_units == 2500
        assert costs.break_even_label == "2,500 units"

    def test_not_profitable(self, product):
        costs = cost_breakdown(_priced(product, 18, 20))

        assert costs.net_profit_per_unit == -5.0
        assert costs.break_even_units is None
        assert costs.break_even_label == "not profitable"
        assert costs.to_dict()["breakEvenUnits"] is None

    def test_break_even_rounds_up(self, product):
        # 3 + 1 + 0.5 + 2 per unit, net 3.5
        costs = cost_breakdown(_priced(product, 3, 10))
        assert costs.break_even_units == 5715


class TestHeuristicProvider:

    def test_maps_onto_common_result(self, product):
        result = HeuristicProvider().analyze_market(product, "United States")

        assert result.market == "United States"
        assert result.overall_score == 2
        assert result.recommendation is Recommendation.NOT_RECOMMENDED
        assert result.scores.market_demand == 90
        assert result.scores.legal_compliance == 40
        assert result.scores.pricing_strategy == 80
        assert result.legal_compliance.risk_level == "High"
        assert result.pricing_strategy.recommended_price_range.min == 17
        assert result.pricing_strategy.recommended_price_range.max == 23

    def test_keeps_heuristic_extras(self, product):
        wire = HeuristicProvider().analyze_market(product, "United States").to_wire()

        assert wire["verdict"] == "no-go"
        assert wire["logistics"]["score"] == 50
        assert wire["costBreakdown"]["breakEvenUnits"] == 2500

    def test_risks_and_actions(self, product):
        result = HeuristicProvider().analyze_market(_priced(product, 18, 20), "United States")

        assert "Low competition score (45/100)" in result.risk_alerts
        assert result.action_items == ["Not profitable at current pricing: revisit cost or selling price"]

    def test_is_deterministic(self, product):
        provider = HeuristicProvider()
        first = provider.analyze_market(product, "Germany").to_wire()
        second = provider.analyze_market(product, "Germany").to_wire()
        first.pop("lastUpdated")
        second.pop("lastUpdated")

        assert first == second
