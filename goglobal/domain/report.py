"""
Report Summary - Cross-Market Overview
======================================

Condenses the per-market results of one analysis run into the headline
numbers shown at the top of a report.
"""

from dataclasses import dataclass
from typing import Optional

from .models import RECOMMENDATION_LABELS, MarketAnalysisResult, Recommendation


@dataclass(frozen=True)
class ReportSummary:
    """Headline numbers for one analysis run."""

    market_count: int
    average_score: int
    recommendation: Recommendation
    best_market: Optional[str]

    @property
    def recommendation_label(self) -> str:
        return RECOMMENDATION_LABELS[self.recommendation]


def overall_recommendation(average_score: float) -> Recommendation:
    """Three bands only: a portfolio is never "strongly" recommended."""
    if average_score >= 70:
        return Recommendation.RECOMMENDED
    if average_score >= 50:
        return Recommendation.CONSIDER_CAREFULLY
    return Recommendation.NOT_RECOMMENDED


def summarize(results: dict[str, MarketAnalysisResult]) -> ReportSummary:
    if not results:
        return ReportSummary(0, 0, Recommendation.NOT_RECOMMENDED, None)

    scores = [r.overall_score for r in results.values()]
    average = round(sum(scores) / len(scores))
    best = max(results.values(), key=lambda r: r.overall_score)

    return ReportSummary(
        market_count=len(results),
        average_score=average,
        recommendation=overall_recommendation(average),
        best_market=best.market,
    )


def render_text_report(product_name: str, results: dict[str, MarketAnalysisResult]) -> str:
    """Plain-text report for terminals and log files."""
    summary = summarize(results)
    lines = [
        "=" * 60,
        f"   Market Expansion Report - {product_name}",
        "=" * 60,
        f"   Markets analyzed: {summary.market_count}",
        f"   Average score:    {summary.average_score}/100",
        f"   Recommendation:   {summary.recommendation_label}",
    ]
    if summary.best_market:
        lines.append(f"   Best market:      {summary.best_market}")

    for market, result in results.items():
        scores = result.scores
        lines += [
            "",
            "─" * 60,
            f"{market}: {result.recommendation_label} - Score: {result.overall_score}/100",
            f"   Legal compliance:     {scores.legal_compliance}",
            f"   Competitive analysis: {scores.competitive_analysis}",
            f"   Market demand:        {scores.market_demand}",
            f"   Pricing strategy:     {scores.pricing_strategy}",
            f"   Cultural adaptation:  {scores.cultural_adaptation}",
        ]
        for title, items in (
            ("Key findings", result.key_findings),
            ("Action items", result.action_items),
            ("Risk alerts", result.risk_alerts),
        ):
            if items:
                lines.append(f"   {title}:")
                lines += [f"     - {item}" for item in items]

    lines.append("=" * 60)
    return "\n".join(lines)
