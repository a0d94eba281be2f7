"""Optimization engine for meal planning."""

from mealplanner.optimizer.models import (
    DayMealPlanConstraint,
    DayResult,
    Fraction,
    InfeasibleDietError,
    InvalidConstraintError,
    MealConstraint,
    MealPlanError,
    MealResult,
    MissingDataError,
    NutrientConstraint,
    ObjectiveDirection,
    ProductConstraint,
    ProductResult,
    Solution,
    SolverError,
    UnboundedDietError,
    WeekResult,
)
from mealplanner.optimizer.serialization import serialize_product, serialize_solution
from mealplanner.optimizer.solver import ConstraintsSolver, solve_day
from mealplanner.optimizer.swap import (
    get_amount_of_swapped_product,
    get_grams_of_swapped_product,
)
from mealplanner.optimizer.totals import NutrientTotals, calculate_nutrient_totals

__all__ = [
    "ObjectiveDirection",
    "NutrientConstraint",
    "ProductConstraint",
    "MealConstraint",
    "DayMealPlanConstraint",
    "Fraction",
    "ProductResult",
    "MealResult",
    "DayResult",
    "WeekResult",
    "Solution",
    "MealPlanError",
    "InvalidConstraintError",
    "MissingDataError",
    "SolverError",
    "InfeasibleDietError",
    "UnboundedDietError",
    "ConstraintsSolver",
    "solve_day",
    "get_amount_of_swapped_product",
    "get_grams_of_swapped_product",
    "NutrientTotals",
    "calculate_nutrient_totals",
    "serialize_solution",
    "serialize_product",
]
