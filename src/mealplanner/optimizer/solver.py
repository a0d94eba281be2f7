"""Day plan solver: compile, solve once, and extract the meal plan.

The problem is formulated as a MILP:
    min/max  sum_p g_p * target_p / 100
    s.t.     u_p * amount_p / divider_p - g_p = 0       per product occurrence
             min <= sum_{p in scope} g_p * n_p / 100 <= max   per nutrient constraint
             low_p <= g_p <= high_p,  0 <= u_p <= 65535, u_p integer
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from mealplanner.config.settings import SolverConfig, get_settings
from mealplanner.data.nutrients import Nutrient, nutrient_label
from mealplanner.optimizer.constraints import (
    DayConstraintBuilder,
    ProductsContainer,
    ProductVariable,
)
from mealplanner.optimizer.models import (
    DayMealPlanConstraint,
    DayResult,
    Fraction,
    InfeasibleDietError,
    MealResult,
    ObjectiveDirection,
    ProductResult,
    Solution,
    SolverError,
    UnboundedDietError,
    WeekResult,
)
from mealplanner.optimizer.problem import (
    LinearProblem,
    ProblemSolution,
    SolveStatus,
)

logger = logging.getLogger(__name__)


class ConstraintsSolver:
    """Single-use solver for one day of meals.

    Attributes:
        problem: The underlying problem; extra variables may be added before
            ``solve_day`` is called
        nutrient_to_optimize: Nutrient summed by the objective
        config: Solver limits and defaults
    """

    def __init__(
        self,
        direction: ObjectiveDirection,
        nutrient_to_optimize: Nutrient,
        config: Optional[SolverConfig] = None,
    ):
        self.config = config or get_settings().solver
        self.nutrient_to_optimize = nutrient_to_optimize
        self.problem = LinearProblem(
            direction=direction,
            presolve=self.config.presolve,
            time_limit=self.config.time_limit,
        )
        self.variables = ProductsContainer(name="root")
        self._used = False

    def solve_day(
        self,
        day_constraints: DayMealPlanConstraint,
        day_name: Optional[str] = None,
    ) -> Solution:
        """Solve the day plan and return the solved quantities.

        Args:
            day_constraints: Meals, products and nutrient bounds for the day
            day_name: Name of the resulting day node (default from config)

        Returns:
            Solution with one week holding one day

        Raises:
            InfeasibleDietError: No quantities satisfy every constraint
            UnboundedDietError: The objective can grow without limit
            SolverError: Any other solver failure
        """
        if self._used:
            raise RuntimeError("ConstraintsSolver instances are single-use")
        self._used = True

        day_name = day_name or self.config.default_day_name
        builder = DayConstraintBuilder(self.problem, self.nutrient_to_optimize, self.config)
        self.variables.entries.append(builder.build(day_constraints, day_name))

        result = self.problem.solve()

        if result.status == SolveStatus.INFEASIBLE:
            logger.warning("Day '%s': %s", day_name, result.message)
            raise InfeasibleDietError()
        if result.status == SolveStatus.UNBOUNDED:
            logger.warning("Day '%s': %s", day_name, result.message)
            raise UnboundedDietError()
        if result.status != SolveStatus.OPTIMAL:
            logger.warning("Day '%s': %s", day_name, result.message)
            raise SolverError(f"Solving error: {result.status.value}: {result.message}")

        logger.info(
            "Solved day '%s' (%s %s = %.3f) in %.3fs",
            day_name,
            self.problem.direction.value,
            nutrient_label(self.nutrient_to_optimize),
            result.objective_value,
            result.elapsed_seconds,
        )
        return self._solution_to_output(result)

    def _solution_to_output(self, result: ProblemSolution) -> Solution:
        """Mirror the variable tree as Week -> Day -> Meal -> Product results."""
        days = []
        for day in self.variables.entries:
            if not isinstance(day, ProductsContainer):
                raise TypeError("Expected day container")
            meals = []
            for meal in day.entries:
                if not isinstance(meal, ProductsContainer):
                    raise TypeError("Expected meal container")
                products = []
                for variable in meal.entries:
                    if not isinstance(variable, ProductVariable):
                        raise TypeError("Expected product variable")
                    products.append(self._product_result(variable, result))
                meals.append(MealResult(name=meal.name, products=products))
            days.append(DayResult(name=day.name, meals=meals))

        return Solution(week=WeekResult(days=days))

    def _product_result(
        self, variable: ProductVariable, result: ProblemSolution
    ) -> ProductResult:
        unit_count = truncate_unit_count(
            result.var_value(variable.unit_count_var),
            self.config.integrality_tolerance,
            self.config.max_unit_count,
        )
        return ProductResult(
            product=variable.product,
            amount_grams=result.var_value(variable.grams_var),
            unit=variable.unit,
            amount_unit=Fraction(unit_count, variable.unit_data.divider),
        )


def truncate_unit_count(value: float, tolerance: float = 1e-6, maximum: int = 65535) -> int:
    """Convert a solved unit count to an int by truncation.

    Values within ``tolerance`` of an integer are snapped to it first, since
    HiGHS reports integer columns as floats such as 49.9999999.
    """
    nearest = round(value)
    if abs(value - nearest) <= tolerance:
        value = nearest
    return min(max(math.trunc(value), 0), maximum)


def solve_day(
    day_constraints: DayMealPlanConstraint,
    direction: ObjectiveDirection,
    nutrient: Nutrient,
    day_name: Optional[str] = None,
    config: Optional[SolverConfig] = None,
) -> Solution:
    """Solve one day plan with a fresh solver.

    Args:
        day_constraints: Meals, products and nutrient bounds for the day
        direction: Minimize or maximize the target nutrient
        nutrient: Nutrient summed by the objective
        day_name: Name of the resulting day node (default "Day1")
        config: Solver configuration (default from settings)

    Returns:
        Solution with one week holding one day
    """
    solver = ConstraintsSolver(direction, nutrient, config)
    return solver.solve_day(day_constraints, day_name)
