"""Nutrient and product data types."""

from mealplanner.data.nutrients import (
    MacroElements,
    MacroElementsType,
    MicroNutrients,
    MicroNutrientsType,
    Nutrient,
    nutrient_label,
)
from mealplanner.data.products import AllowedUnitsType, Product, UnitData

__all__ = [
    "MacroElementsType",
    "MicroNutrientsType",
    "Nutrient",
    "MacroElements",
    "MicroNutrients",
    "nutrient_label",
    "AllowedUnitsType",
    "UnitData",
    "Product",
]
