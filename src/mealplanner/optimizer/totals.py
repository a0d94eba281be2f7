"""Nutrient totals of a solved plan at any scope."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from mealplanner.data.nutrients import MacroElements, MicroNutrients
from mealplanner.optimizer.models import (
    DayResult,
    MealResult,
    ProductResult,
    Solution,
    SolutionEntry,
    WeekResult,
)


@dataclass
class NutrientTotals:
    """Absolute nutrient amounts (not per 100g) summed over a scope."""

    macros: MacroElements = field(default_factory=MacroElements)
    micros: MicroNutrients = field(default_factory=MicroNutrients)


def iter_product_results(entry: SolutionEntry) -> Iterator[ProductResult]:
    """Yield every product result under ``entry`` in plan order."""
    if isinstance(entry, ProductResult):
        yield entry
    elif isinstance(entry, MealResult):
        yield from entry.products
    elif isinstance(entry, DayResult):
        for meal in entry.meals:
            yield from meal.products
    elif isinstance(entry, WeekResult):
        for day in entry.days:
            yield from iter_product_results(day)
    elif isinstance(entry, Solution):
        yield from iter_product_results(entry.week)
    else:
        raise TypeError(f"Not a solution entry: {type(entry).__name__}")


def calculate_nutrient_totals(entry: SolutionEntry) -> NutrientTotals:
    """Sum ``grams * per_100g / 100`` for every product under ``entry``.

    Micro nutrients that no product declares stay absent in the totals.
    """
    macros = MacroElements()
    micros = MicroNutrients()
    for result in iter_product_results(entry):
        factor = result.amount_grams / 100.0
        macros = macros + result.product.macro_elements.scale(factor)
        micros = micros + result.product.micro_nutrients.scale(factor)
    return NutrientTotals(macros=macros, micros=micros)
