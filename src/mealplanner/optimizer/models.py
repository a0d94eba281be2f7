"""Data models for day plan constraints and solved meal plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from mealplanner.data.nutrients import Nutrient, is_macro
from mealplanner.data.products import AllowedUnitsType, Product

# Largest quantity a product bound or unit count may take
MAX_QUANTITY = 65535


class ObjectiveDirection(Enum):
    """Whether the target nutrient is minimized or maximized."""

    MINIMIZE = "min"
    MAXIMIZE = "max"


# Custom exceptions


class MealPlanError(Exception):
    """Base exception for meal planner errors."""

    pass


class InvalidConstraintError(MealPlanError, ValueError):
    """Raised when a constraint record is built from invalid values."""

    pass


class MissingDataError(MealPlanError):
    """Raised when a product lacks a nutrient or unit needed by a calculation."""

    pass


class SolverError(MealPlanError):
    """Raised when the optimizer does not return an optimal solution."""

    status = "error"

    def __init__(self, message: str, status: Optional[str] = None):
        super().__init__(message)
        if status is not None:
            self.status = status


class InfeasibleDietError(SolverError):
    """Raised when no assignment satisfies every bound and equality."""

    status = "infeasible"

    def __init__(self, message: str = "Constraints are infeasible"):
        super().__init__(message)


class UnboundedDietError(SolverError):
    """Raised when the objective can grow without limit."""

    status = "unbounded"

    def __init__(self, message: str = "Problem is unbounded"):
        super().__init__(message)


# Constraint records


@dataclass(frozen=True)
class NutrientConstraint:
    """Bounds on the amount of one nutrient within a meal or a day.

    Either bound may be omitted. Bounds are absolute amounts (grams for
    macros, kcal for calories) summed over every product in scope.
    """

    nutrient: Nutrient
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    def __post_init__(self) -> None:
        is_macro(self.nutrient)  # rejects anything that is not a nutrient
        if self.min_value is not None and self.min_value < 0:
            raise InvalidConstraintError("Nutrient minimum cannot be negative")
        if self.max_value is not None and self.max_value < 0:
            raise InvalidConstraintError("Nutrient maximum cannot be negative")
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise InvalidConstraintError(
                f"Nutrient minimum {self.min_value} exceeds maximum {self.max_value}"
            )

    @classmethod
    def new(
        cls,
        nutrient: Nutrient,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
    ) -> Optional[NutrientConstraint]:
        """Build a constraint, returning None instead of raising when invalid."""
        try:
            return cls(nutrient, min_value, max_value)
        except InvalidConstraintError:
            return None


@dataclass(frozen=True)
class ProductConstraint:
    """A product occurrence in a meal with optional quantity bounds.

    ``low_bound`` and ``high_bound`` are whole grams. ``unit`` selects how the
    solved quantity is reported and must be one of the product's allowed
    units.
    """

    product: Product
    low_bound: Optional[int] = None
    high_bound: Optional[int] = None
    unit: AllowedUnitsType = AllowedUnitsType.GRAM

    def __post_init__(self) -> None:
        if self.unit not in self.product.allowed_units:
            raise InvalidConstraintError(
                f"Product '{self.product.id}' does not allow unit '{self.unit.label}'"
            )
        for bound in (self.low_bound, self.high_bound):
            if bound is not None and not 0 <= bound <= MAX_QUANTITY:
                raise InvalidConstraintError(
                    f"Product bound {bound} outside 0..{MAX_QUANTITY}"
                )
        if (
            self.low_bound is not None
            and self.high_bound is not None
            and self.low_bound > self.high_bound
        ):
            raise InvalidConstraintError(
                f"Product low bound {self.low_bound} exceeds high bound {self.high_bound}"
            )

    @classmethod
    def new(
        cls,
        product: Product,
        low_bound: Optional[int] = None,
        high_bound: Optional[int] = None,
        unit: AllowedUnitsType = AllowedUnitsType.GRAM,
    ) -> Optional[ProductConstraint]:
        """Build a constraint, returning None instead of raising when invalid."""
        try:
            return cls(product, low_bound, high_bound, unit)
        except InvalidConstraintError:
            return None


@dataclass
class MealConstraint:
    """Products eaten in one meal and nutrient bounds scoped to that meal."""

    products: list[ProductConstraint] = field(default_factory=list)
    nutrients: list[NutrientConstraint] = field(default_factory=list)

    def update_product(self, index: int, constraint: ProductConstraint) -> None:
        """Replace the product constraint at ``index`` with a new record."""
        self.products[index] = constraint

    def update_nutrient(self, index: int, constraint: NutrientConstraint) -> None:
        """Replace the nutrient constraint at ``index`` with a new record."""
        self.nutrients[index] = constraint


@dataclass
class DayMealPlanConstraint:
    """Named meals of one day plus nutrient bounds over the whole day.

    Meals are planned in the insertion order of ``meals``.
    """

    meals: dict[str, MealConstraint] = field(default_factory=dict)
    nutrients: list[NutrientConstraint] = field(default_factory=list)


# Solution tree


@dataclass(frozen=True)
class Fraction:
    """A unit quantity kept as numerator/denominator.

    The denominator is the unit's divider and is never reduced, so
    ``Fraction(4, 2)`` reads as "four half units".
    """

    numerator: int
    denominator: int = 1

    @property
    def value(self) -> float:
        return self.numerator / self.denominator

    def __str__(self) -> str:
        if self.denominator == 1:
            return str(self.numerator)
        return f"{self.numerator}/{self.denominator}"


@dataclass
class ProductResult:
    """Solved quantity of a single product occurrence."""

    product: Product
    amount_grams: float
    unit: AllowedUnitsType
    amount_unit: Fraction


@dataclass
class MealResult:
    """Result for a single meal, products in declaration order."""

    name: str
    products: list[ProductResult] = field(default_factory=list)


@dataclass
class DayResult:
    """Result for a single day, meals in declaration order."""

    name: str
    meals: list[MealResult] = field(default_factory=list)


@dataclass
class WeekResult:
    """Outermost node of a solved plan."""

    days: list[DayResult] = field(default_factory=list)


@dataclass
class Solution:
    """Complete output of a successful solve."""

    week: WeekResult


SolutionEntry = Union[Solution, WeekResult, DayResult, MealResult, ProductResult]
