"""Tests for constraint records and the day constraint builder."""

from __future__ import annotations

import pytest

from mealplanner.config.settings import SolverConfig
from mealplanner.data.nutrients import MacroElementsType, MicroNutrientsType
from mealplanner.data.products import AllowedUnitsType, UnitData
from mealplanner.optimizer.constraints import (
    DayConstraintBuilder,
    ProductsContainer,
    ProductVariable,
    collect_product_variables,
    nutrient_coefficient,
)
from mealplanner.optimizer.models import (
    DayMealPlanConstraint,
    InvalidConstraintError,
    MealConstraint,
    NutrientConstraint,
    ObjectiveDirection,
    ProductConstraint,
)
from mealplanner.optimizer.problem import ComparisonOp, LinearProblem


class TestNutrientConstraint:
    """Tests for nutrient bound validation."""

    def test_valid_bounds(self):
        c = NutrientConstraint(MacroElementsType.PROTEIN, 20.0, 100.0)
        assert c.min_value == 20.0
        assert c.max_value == 100.0

    def test_open_bounds(self):
        assert NutrientConstraint(MicroNutrientsType.FIBER).min_value is None
        assert NutrientConstraint(MicroNutrientsType.FIBER, None, 0.0).max_value == 0.0

    def test_min_above_max_rejected(self):
        with pytest.raises(InvalidConstraintError):
            NutrientConstraint(MacroElementsType.FAT, 10.0, 5.0)

    def test_negative_bound_rejected(self):
        with pytest.raises(InvalidConstraintError):
            NutrientConstraint(MacroElementsType.FAT, -1.0, None)
        with pytest.raises(InvalidConstraintError):
            NutrientConstraint(MacroElementsType.FAT, None, -1.0)
        assert NutrientConstraint.new(MacroElementsType.FAT, None, -1.0) is None

    def test_equal_bounds_accepted(self):
        """An exact target is expressed as min == max."""
        c = NutrientConstraint.new(MacroElementsType.FAT, 5.0, 5.0)
        assert c is not None
        assert c.min_value == c.max_value == 5.0

    def test_new_returns_none_when_invalid(self):
        assert NutrientConstraint.new(MacroElementsType.FAT, 10.0, 5.0) is None
        assert NutrientConstraint.new(MacroElementsType.FAT, 5.0, 10.0) is not None

    def test_invalid_constraint_error_is_value_error(self):
        with pytest.raises(ValueError):
            NutrientConstraint(MacroElementsType.SUGAR, 3.0, 1.0)


class TestProductConstraint:
    """Tests for product bound and unit validation."""

    def test_defaults_to_grams(self, protein_powder):
        c = ProductConstraint(protein_powder)
        assert c.unit == AllowedUnitsType.GRAM
        assert c.low_bound is None
        assert c.high_bound is None

    def test_unit_must_be_allowed(self, protein_powder):
        with pytest.raises(InvalidConstraintError, match="Cup"):
            ProductConstraint(protein_powder, unit=AllowedUnitsType.CUP)
        assert ProductConstraint.new(protein_powder, unit=AllowedUnitsType.CUP) is None

    def test_low_above_high_rejected(self, protein_powder):
        with pytest.raises(InvalidConstraintError):
            ProductConstraint(protein_powder, 300, 200)

    def test_bound_range(self, protein_powder):
        assert ProductConstraint.new(protein_powder, 0, 65535) is not None
        assert ProductConstraint.new(protein_powder, -1, 10) is None
        assert ProductConstraint.new(protein_powder, 0, 65536) is None


class TestMealConstraint:
    def test_update_replaces_in_place(self, protein_powder, eggs):
        meal = MealConstraint(
            products=[ProductConstraint(protein_powder, 0, 100)],
            nutrients=[NutrientConstraint(MacroElementsType.PROTEIN, 10.0, None)],
        )
        meal.update_product(0, ProductConstraint(eggs, 50, 150))
        meal.update_nutrient(0, NutrientConstraint(MicroNutrientsType.FIBER, None, 5.0))

        assert len(meal.products) == 1
        assert meal.products[0].product.name == "Eggs"
        assert meal.products[0].high_bound == 150
        assert meal.nutrients == [NutrientConstraint(MicroNutrientsType.FIBER, None, 5.0)]

    def test_update_out_of_range(self, protein_powder):
        meal = MealConstraint()
        with pytest.raises(IndexError):
            meal.update_product(0, ProductConstraint(protein_powder))


class TestDayConstraintBuilder:
    """Tests for compiling a day into variables and rows."""

    @pytest.fixture
    def problem(self):
        return LinearProblem(direction=ObjectiveDirection.MINIMIZE)

    @pytest.fixture
    def builder(self, problem):
        return DayConstraintBuilder(problem, MacroElementsType.PROTEIN, SolverConfig())

    def test_tree_mirrors_meals(self, builder, eggs, beans, spinach):
        day = DayMealPlanConstraint(
            meals={
                "Breakfast": MealConstraint(products=[ProductConstraint(eggs)]),
                "Dinner": MealConstraint(
                    products=[ProductConstraint(beans), ProductConstraint(spinach)]
                ),
            }
        )
        tree = builder.build(day, "Day1")

        assert isinstance(tree, ProductsContainer)
        assert tree.name == "Day1"
        assert [meal.name for meal in tree.entries] == ["Breakfast", "Dinner"]
        names = [v.name for v in collect_product_variables(tree)]
        assert names == ["Eggs", "Beans", "Spinach"]

    def test_two_variables_per_product_occurrence(self, builder, problem, protein_powder):
        day = DayMealPlanConstraint(
            meals={
                "Breakfast": MealConstraint(products=[ProductConstraint(protein_powder)]),
                "Lunch": MealConstraint(products=[ProductConstraint(protein_powder)]),
            }
        )
        tree = builder.build(day, "Day1")
        first, second = collect_product_variables(tree)

        assert problem.n_vars == 4
        assert {first.grams_var, first.unit_count_var}.isdisjoint(
            {second.grams_var, second.unit_count_var}
        )

    def test_row_names_and_order(self, builder, problem, protein_powder):
        day = DayMealPlanConstraint(
            meals={
                "Breakfast": MealConstraint(
                    products=[ProductConstraint(protein_powder, 0, 200)],
                    nutrients=[NutrientConstraint(MacroElementsType.PROTEIN, 20.0, 100.0)],
                ),
            },
            nutrients=[NutrientConstraint(MicroNutrientsType.ALCOHOL, None, 0.0)],
        )
        builder.build(day, "Day1")

        assert problem.constraint_info == [
            ("Day1/Breakfast/ProteinPowder_units", 0.0),
            ("Day1/Breakfast/protein_min", 20.0),
            ("Day1/Breakfast/protein_max", 100.0),
            ("Day1/alcohol_max", 0.0),
        ]

    def test_unit_link_uses_grams_per_step(self, builder, problem, make_product):
        product = make_product("Bar", 40.0)
        product.allowed_units[AllowedUnitsType.CUSTOM] = UnitData(amount=250, divider=2)
        day = DayMealPlanConstraint(
            meals={
                "Snack": MealConstraint(
                    products=[ProductConstraint(product, unit=AllowedUnitsType.CUSTOM)]
                )
            }
        )
        (variable,) = collect_product_variables(builder.build(day, "Day1"))

        row = problem._rows[0]
        assert row.op == ComparisonOp.EQ
        assert row.terms == {variable.unit_count_var: 125.0, variable.grams_var: -1.0}
        assert variable.unit_data == UnitData(250, 2)

    def test_variable_bounds_and_objective(self, builder, problem, protein_powder):
        day = DayMealPlanConstraint(
            meals={
                "Breakfast": MealConstraint(
                    products=[ProductConstraint(protein_powder, 10, None)]
                )
            }
        )
        (variable,) = collect_product_variables(builder.build(day, "Day1"))

        assert problem._lower[variable.grams_var] == 10.0
        assert problem._upper[variable.grams_var] == 65535.0
        assert problem._objective[variable.grams_var] == pytest.approx(0.4)
        assert problem._integrality[variable.unit_count_var] == 1
        assert problem._objective[variable.unit_count_var] == 0.0

    def test_day_constraint_spans_all_meals(self, builder, problem, eggs, beans):
        day = DayMealPlanConstraint(
            meals={
                "Breakfast": MealConstraint(products=[ProductConstraint(eggs)]),
                "Dinner": MealConstraint(products=[ProductConstraint(beans)]),
            },
            nutrients=[NutrientConstraint(MicroNutrientsType.FIBER, 25.0, None)],
        )
        tree = builder.build(day, "Day1")
        egg_var, bean_var = collect_product_variables(tree)

        row = problem._rows[-1]
        assert row.name == "Day1/fiber_min"
        assert row.op == ComparisonOp.GE
        assert row.terms == pytest.approx(
            {egg_var.grams_var: 0.08, bean_var.grams_var: 0.05}
        )


class TestHelpers:
    def test_nutrient_coefficient_missing_micro_is_zero(self, protein_powder):
        assert nutrient_coefficient(protein_powder, MicroNutrientsType.ZINC) == 0.0
        assert nutrient_coefficient(protein_powder, MicroNutrientsType.FIBER) == pytest.approx(
            0.05
        )

    def test_collect_from_leaf(self, protein_powder):
        leaf = ProductVariable("ProteinPowder", protein_powder, AllowedUnitsType.GRAM, 0, 1)
        assert collect_product_variables(leaf) == [leaf]
