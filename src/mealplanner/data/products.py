"""Product records and the units a product can be measured in."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from mealplanner.data.nutrients import (
    MacroElements,
    MicroNutrients,
    Nutrient,
    is_macro,
)


class AllowedUnitsType(Enum):
    """Units a product quantity can be expressed in."""

    GRAM = "gram"
    PIECE = "piece"
    CUP = "cup"
    TABLESPOON = "tablespoon"
    TEASPOON = "teaspoon"
    BOX = "box"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Capitalized member name used in error messages, e.g. ``Cup``."""
        return self.name.capitalize()


@dataclass(frozen=True)
class UnitData:
    """Conversion rule for one allowed unit.

    ``amount`` is the weight in grams of one whole unit and ``divider`` the
    number of parts a unit can be split into (2 allows half units).
    """

    amount: int
    divider: int = 1

    def __post_init__(self) -> None:
        if self.amount <= 0 or self.divider <= 0:
            raise ValueError("Unit amount and divider must be positive")

    def grams_per_step(self) -> float:
        """Grams represented by one ``1/divider`` step of this unit."""
        return self.amount / self.divider


GRAM_UNIT = UnitData(amount=1, divider=1)


@dataclass
class Product:
    """A food product with per-100g nutrient values.

    Every product can be measured in grams: a Gram entry of ``UnitData(1, 1)``
    is added unless the caller supplied one.
    """

    name: str
    brand: Optional[str] = None
    macro_elements: MacroElements = field(default_factory=MacroElements)
    micro_nutrients: MicroNutrients = field(default_factory=MicroNutrients)
    allowed_units: dict[AllowedUnitsType, UnitData] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.allowed_units = dict(self.allowed_units)
        self.allowed_units.setdefault(AllowedUnitsType.GRAM, GRAM_UNIT)

    @property
    def id(self) -> str:
        """Identity shown to users: ``name`` or ``name (brand)``."""
        if self.brand:
            return f"{self.name} ({self.brand})"
        return self.name

    def get_nutrient_amount(self, nutrient: Nutrient) -> Optional[float]:
        """Return the per-100g amount of a macro or micro nutrient.

        Macro elements always have a value; micro nutrients return None when
        the product does not declare them.
        """
        if is_macro(nutrient):
            return self.macro_elements[nutrient]
        return self.micro_nutrients[nutrient]
