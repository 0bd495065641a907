"""
Request Validation
==================

Checks a raw /api/analyze body before anything touches the network.
Checks run in order and the first failure wins.
"""

from typing import Any

from pydantic import ValidationError

from goglobal.domain.errors import RequestValidationError
from goglobal.domain.models import ProductInput

REQUIRED_FIELDS = ("productName", "category", "description", "targetMarkets", "currentMarket")


def _is_missing(value: Any) -> bool:
    # Lists count as present here so an empty targetMarkets gets its own message
    if isinstance(value, (list, tuple)):
        return False
    return value is None or value == "" or value is False or value == 0


def validate_analysis_request(body: Any) -> ProductInput:
    """
    Turn a raw request body into a ProductInput.

    Raises:
        RequestValidationError: naming the offending field(s).
    """
    product_data = body.get("productData") if isinstance(body, dict) else None
    if not isinstance(product_data, dict):
        raise RequestValidationError("Missing productData in request body", ["productData"])

    missing = [name for name in REQUIRED_FIELDS if _is_missing(product_data.get(name))]
    if missing:
        raise RequestValidationError(f"Missing required fields: {', '.join(missing)}", missing)

    markets = product_data.get("targetMarkets")
    if not isinstance(markets, list) or not markets:
        raise RequestValidationError("targetMarkets must be a non-empty array", ["targetMarkets"])

    try:
        return ProductInput.model_validate(product_data)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise RequestValidationError(
            f"Invalid value for fields: {', '.join(fields)}", fields
        ) from e
