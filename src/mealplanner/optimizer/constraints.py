"""Compile a day plan constraint tree into a mixed-integer linear problem.

Decision variables, per product occurrence p:
    g_p = grams of the product (continuous)
    u_p = quantity in 1/divider steps of the requested unit (integer)

linked by ``u_p * amount / divider - g_p = 0``. The same product in two
meals gets two independent pairs.

Nutrient constraints at meal or day scope sum ``g_p * nutrient_per_100g / 100``
over every product occurrence in scope. The objective sums the target
nutrient the same way over the whole day.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from mealplanner.config.settings import SolverConfig
from mealplanner.data.nutrients import Nutrient
from mealplanner.data.products import AllowedUnitsType, Product, UnitData
from mealplanner.optimizer.models import (
    DayMealPlanConstraint,
    MealConstraint,
    NutrientConstraint,
    ProductConstraint,
)
from mealplanner.optimizer.problem import ComparisonOp, LinearProblem

logger = logging.getLogger(__name__)


@dataclass
class ProductVariable:
    """Leaf of the variable tree: one product occurrence and its two variables."""

    name: str
    product: Product
    unit: AllowedUnitsType
    grams_var: int
    unit_count_var: int

    @property
    def unit_data(self) -> UnitData:
        return self.product.allowed_units[self.unit]


@dataclass
class ProductsContainer:
    """Named inner node of the variable tree (a day or a meal)."""

    name: str
    entries: list[ProductEntry] = field(default_factory=list)


ProductEntry = Union[ProductVariable, ProductsContainer]


def collect_product_variables(entry: ProductEntry) -> list[ProductVariable]:
    """Flatten a subtree to its product variables in declaration order."""
    if isinstance(entry, ProductVariable):
        return [entry]
    variables: list[ProductVariable] = []
    for child in entry.entries:
        variables.extend(collect_product_variables(child))
    return variables


def nutrient_coefficient(product: Product, nutrient: Nutrient) -> float:
    """Amount of ``nutrient`` per gram of ``product``; absent counts as zero."""
    amount = product.get_nutrient_amount(nutrient)
    return (amount or 0.0) / 100.0


class DayConstraintBuilder:
    """Builds variables and constraints for one day into a LinearProblem.

    Attributes:
        problem: Problem receiving variables and constraints
        nutrient_to_optimize: Nutrient summed by the objective
        config: Solver limits (maximum grams and unit count)
    """

    def __init__(
        self,
        problem: LinearProblem,
        nutrient_to_optimize: Nutrient,
        config: SolverConfig,
    ):
        self.problem = problem
        self.nutrient_to_optimize = nutrient_to_optimize
        self.config = config

    def build(self, day_constraints: DayMealPlanConstraint, day_name: str) -> ProductsContainer:
        """Add every meal and day-level constraint to the problem.

        Returns:
            The day container holding one subcontainer per meal
        """
        day = ProductsContainer(name=day_name)

        for meal_name, meal in day_constraints.meals.items():
            day.entries.append(self._add_meal(meal_name, meal, scope=day_name))

        for nutrient_constraint in day_constraints.nutrients:
            self._add_nutrient_constraint(nutrient_constraint, day, scope=day_name)

        logger.debug(
            "Built day '%s': %d meals, %d product variables, %d constraints",
            day_name,
            len(day.entries),
            len(collect_product_variables(day)),
            self.problem.n_constraints,
        )
        return day

    def _add_meal(self, meal_name: str, meal: MealConstraint, scope: str) -> ProductsContainer:
        container = ProductsContainer(name=meal_name)
        meal_scope = f"{scope}/{meal_name}"

        # Products first, as they own the variables
        for product_constraint in meal.products:
            container.entries.append(self._add_product(product_constraint, meal_scope))

        for nutrient_constraint in meal.nutrients:
            self._add_nutrient_constraint(nutrient_constraint, container, scope=meal_scope)

        return container

    def _add_product(self, product_constraint: ProductConstraint, scope: str) -> ProductVariable:
        product = product_constraint.product
        unit_data = product.allowed_units[product_constraint.unit]

        low = product_constraint.low_bound
        high = product_constraint.high_bound
        grams_var = self.problem.add_var(
            nutrient_coefficient(product, self.nutrient_to_optimize),
            (
                float(low) if low is not None else 0.0,
                float(high) if high is not None else float(self.config.max_grams),
            ),
        )
        unit_count_var = self.problem.add_integer_var(
            0.0, (0, self.config.max_unit_count)
        )

        # unit_count * grams_per_step - grams = 0
        self.problem.add_constraint(
            [(unit_count_var, unit_data.grams_per_step()), (grams_var, -1.0)],
            ComparisonOp.EQ,
            0.0,
            name=f"{scope}/{product.id}_units",
        )

        return ProductVariable(
            name=product.id,
            product=product,
            unit=product_constraint.unit,
            grams_var=grams_var,
            unit_count_var=unit_count_var,
        )

    def _add_nutrient_constraint(
        self,
        nutrient_constraint: NutrientConstraint,
        entry: ProductEntry,
        scope: str,
    ) -> None:
        nutrient = nutrient_constraint.nutrient
        terms = [
            (variable.grams_var, nutrient_coefficient(variable.product, nutrient))
            for variable in collect_product_variables(entry)
        ]
        label = f"{scope}/{nutrient.name.lower()}"

        if nutrient_constraint.min_value is not None:
            self.problem.add_constraint(
                terms, ComparisonOp.GE, nutrient_constraint.min_value, name=f"{label}_min"
            )
        if nutrient_constraint.max_value is not None:
            self.problem.add_constraint(
                terms, ComparisonOp.LE, nutrient_constraint.max_value, name=f"{label}_max"
            )
