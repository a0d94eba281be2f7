"""Serialization of solved plans into JSON-ready dicts.

The UI consumes these dicts directly; nutrient keys use the display names
of the nutrient enums ("Saturated Fat", "Fiber", ...).
"""

from __future__ import annotations

from typing import Any

from mealplanner.data.products import Product
from mealplanner.optimizer.models import (
    DayResult,
    MealResult,
    ProductResult,
    Solution,
)


def serialize_product(product: Product) -> dict[str, Any]:
    """Convert a Product to a JSON-serializable dict.

    Absent micro nutrients are omitted rather than written as zero.
    """
    return {
        "id": product.id,
        "name": product.name,
        "brand": product.brand,
        "macro_elements": {str(kind): value for kind, value in product.macro_elements},
        "micro_nutrients": {
            str(kind): value for kind, value in product.micro_nutrients.present().items()
        },
        "allowed_units": {
            str(unit): {"amount": data.amount, "divider": data.divider}
            for unit, data in product.allowed_units.items()
        },
    }


def _serialize_product_result(result: ProductResult) -> dict[str, Any]:
    return {
        "product": result.product.id,
        "brand": result.product.brand,
        "grams": result.amount_grams,
        "unit": str(result.unit),
        "amount": {
            "numerator": result.amount_unit.numerator,
            "denominator": result.amount_unit.denominator,
        },
    }


def _serialize_meal(meal: MealResult) -> dict[str, Any]:
    return {
        "name": meal.name,
        "products": [_serialize_product_result(p) for p in meal.products],
    }


def _serialize_day(day: DayResult) -> dict[str, Any]:
    return {
        "name": day.name,
        "meals": [_serialize_meal(m) for m in day.meals],
    }


def serialize_solution(solution: Solution) -> dict[str, Any]:
    """Convert a Solution to a nested dict mirroring Week -> Day -> Meal -> Product.

    Args:
        solution: A solved plan

    Returns:
        Dictionary that can be JSON-serialized
    """
    return {"days": [_serialize_day(d) for d in solution.week.days]}
