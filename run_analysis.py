"""
Analysis Runner - Market Expansion Report from the Command Line
===============================================================

Analyzes one product for all of its target markets and prints the report.
No server needed.

Usage:
    python run_analysis.py product.json
    python run_analysis.py product.json --heuristic

product.json holds the same object the API expects under "productData"
(either bare or wrapped in {"productData": ...}).
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from goglobal.application import MarketAnalysisOrchestrator, create_provider, validate_analysis_request
from goglobal.domain import RequestValidationError, render_text_report
from goglobal.infrastructure.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_request(path: Path) -> dict:
    """Read a product file; a bare product object is wrapped for the validator."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and "productData" not in data:
        data = {"productData": data}
    return data


def run_analysis(path: Path, heuristic: bool = False) -> int:
    """Run the analysis and print the report. Returns the exit code."""

    print("\n" + "=" * 60)
    print("   GOGLOBAL - Analysis Runner")
    print("=" * 60 + "\n")

    settings = get_settings()
    if heuristic:
        settings = replace(settings, analysis=replace(settings.analysis, provider="heuristic"))

    errors = settings.errors()
    if errors:
        for issue in errors:
            print(f"  {issue}")
        return 1

    try:
        product = validate_analysis_request(load_request(path))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read {path}: {e}")
        return 1
    except RequestValidationError as e:
        print(f"Invalid product data: {e}")
        return 1

    print(f"Product: {product.product_name} ({product.category})")
    print(f"Markets: {', '.join(product.target_markets)}\n")

    orchestrator = MarketAnalysisOrchestrator(
        create_provider(settings),
        delay_seconds=settings.analysis.market_delay_seconds,
    )
    results = asyncio.run(orchestrator.analyze_product(product))

    print()
    print(render_text_report(product.product_name, results))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Market expansion analysis for one product")
    parser.add_argument("product_file", type=Path, help="JSON file with the product data")
    parser.add_argument(
        "--heuristic",
        action="store_true",
        help="use the local heuristic scorer instead of the completion API",
    )
    args = parser.parse_args()
    return run_analysis(args.product_file, heuristic=args.heuristic)


if __name__ == "__main__":
    sys.exit(main())
