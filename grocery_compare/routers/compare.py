"""
API Router for shopping-list price comparison.
"""

from fastapi import APIRouter, Depends

from grocery_compare.dependencies import get_comparison_engine
from grocery_compare.services.comparison_engine import ComparisonEngine
from grocery_compare.services.savings_calculator import SavingsCalculator
from grocery_compare.schemas.comparison import (
    CompareRequest,
    CompareResponse,
    ComparisonResult,
)

router = APIRouter(prefix="/compare", tags=["Price Comparison"])


def build_compare_response(result: ComparisonResult) -> CompareResponse:
    """Attach the savings summary to an engine result"""
    return CompareResponse(
        status=result.diagnostics.status,
        breakdowns=result.breakdowns,
        diagnostics=result.diagnostics,
        summary=SavingsCalculator.summarize(result.breakdowns),
    )


@router.post("/", response_model=CompareResponse)
async def compare_shopping_list(
    request: CompareRequest,
    engine: ComparisonEngine = Depends(get_comparison_engine),
):
    """
    Compare the total cost of a shopping list across stores within max_distance.

    **Request body:**
    - list_items: [{product_name, quantity, checked}]
    - max_distance: Maximum store distance in miles (required)

    Stores are ranked by total price (lowest first, ties by store ID). Items a
    store does not carry are marked not_available and excluded from its total.

    **status:**
    - ok: stores were compared
    - no_stores_found: no store within max_distance (try a larger distance)
    - no_items: the list is empty (add items)
    """
    result = await engine.compare_shopping_list(request.list_items, request.max_distance)
    return build_compare_response(result)
