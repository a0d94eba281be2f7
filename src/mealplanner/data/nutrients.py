"""Macro and micro nutrient records.

All values are stored per 100g of product. Macro elements are always
present; calories are derived from fat, carbohydrates and protein and can
never be set directly. Micro nutrients are independently optional: an absent
entry means "unknown", which is not the same as zero.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional, Union


class MacroElementsType(Enum):
    """Bulk dietary components tracked for every product."""

    FAT = "Fat"
    SATURATED_FAT = "Saturated Fat"
    CARBS = "Carbohydrates"
    SUGAR = "Sugar"
    PROTEIN = "Protein"
    CALORIES = "Calories"

    def __str__(self) -> str:
        return self.value


class MicroNutrientsType(Enum):
    """Trace dietary components, each optional per product."""

    FIBER = "Fiber"
    ZINC = "Zinc"
    SODIUM = "Sodium"
    ALCOHOL = "Alcohol"

    def __str__(self) -> str:
        return self.value


# A nutrient is either kind of enum member; the enum class acts as the tag.
Nutrient = Union[MacroElementsType, MicroNutrientsType]

# kcal per gram of each energy-bearing macro
CALORIES_PER_GRAM: dict[MacroElementsType, float] = {
    MacroElementsType.FAT: 9.0,
    MacroElementsType.CARBS: 4.0,
    MacroElementsType.PROTEIN: 4.0,
}


def is_macro(nutrient: Nutrient) -> bool:
    """Return True for a macro element, False for a micro nutrient."""
    if isinstance(nutrient, MacroElementsType):
        return True
    if isinstance(nutrient, MicroNutrientsType):
        return False
    raise TypeError(f"Not a nutrient: {nutrient!r}")


def nutrient_label(nutrient: Nutrient) -> str:
    """Render a nutrient with its tag, e.g. ``Macro(SaturatedFat)``."""
    tag = "Macro" if is_macro(nutrient) else "Micro"
    kind = "".join(part.capitalize() for part in nutrient.name.split("_"))
    return f"{tag}({kind})"


class MacroElements:
    """Macro elements per 100g with derived calories."""

    _SETTABLE = (
        MacroElementsType.FAT,
        MacroElementsType.SATURATED_FAT,
        MacroElementsType.CARBS,
        MacroElementsType.SUGAR,
        MacroElementsType.PROTEIN,
    )

    def __init__(
        self,
        fat: float = 0.0,
        saturated_fat: float = 0.0,
        carbs: float = 0.0,
        sugar: float = 0.0,
        protein: float = 0.0,
    ):
        self._elements: dict[MacroElementsType, float] = {
            MacroElementsType.FAT: float(fat),
            MacroElementsType.SATURATED_FAT: float(saturated_fat),
            MacroElementsType.CARBS: float(carbs),
            MacroElementsType.SUGAR: float(sugar),
            MacroElementsType.PROTEIN: float(protein),
        }
        self._recompute_calories()

    def _recompute_calories(self) -> None:
        self._elements[MacroElementsType.CALORIES] = sum(
            self._elements[kind] * kcal for kind, kcal in CALORIES_PER_GRAM.items()
        )

    @property
    def calories(self) -> float:
        return self._elements[MacroElementsType.CALORIES]

    def set(self, kind: MacroElementsType, value: float) -> None:
        """Set one macro element and re-derive calories.

        Raises:
            ValueError: If ``kind`` is calories, which is always derived
        """
        if kind == MacroElementsType.CALORIES:
            raise ValueError("Cannot set calories directly")
        self._elements[kind] = float(value)
        self._recompute_calories()

    def __getitem__(self, kind: MacroElementsType) -> float:
        return self._elements[kind]

    def __iter__(self) -> Iterator[tuple[MacroElementsType, float]]:
        for kind in MacroElementsType:
            yield kind, self._elements[kind]

    def __add__(self, other: MacroElements) -> MacroElements:
        if not isinstance(other, MacroElements):
            return NotImplemented
        return MacroElements(
            *(self._elements[kind] + other._elements[kind] for kind in self._SETTABLE)
        )

    def scale(self, factor: float) -> MacroElements:
        """Return a copy with every element multiplied by ``factor``."""
        return MacroElements(*(self._elements[kind] * factor for kind in self._SETTABLE))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MacroElements):
            return NotImplemented
        return self._elements == other._elements

    def __repr__(self) -> str:
        fields = ", ".join(f"{kind.name.lower()}={value:g}" for kind, value in self)
        return f"MacroElements({fields})"


class MicroNutrients:
    """Micro nutrients per 100g; each entry may be absent."""

    def __init__(self, values: Optional[dict[MicroNutrientsType, float]] = None):
        self._elements: dict[MicroNutrientsType, float] = {}
        for kind, value in (values or {}).items():
            self[kind] = value

    def __getitem__(self, kind: MicroNutrientsType) -> Optional[float]:
        return self._elements.get(kind)

    def __setitem__(self, kind: MicroNutrientsType, value: Optional[float]) -> None:
        if value is None:
            self._elements.pop(kind, None)
        else:
            self._elements[kind] = float(value)

    def __iter__(self) -> Iterator[tuple[MicroNutrientsType, Optional[float]]]:
        for kind in MicroNutrientsType:
            yield kind, self._elements.get(kind)

    def present(self) -> dict[MicroNutrientsType, float]:
        """Return only the entries that carry a value, in enum order."""
        return {kind: value for kind, value in self if value is not None}

    def __add__(self, other: MicroNutrients) -> MicroNutrients:
        # Present on either side stays present; absent on both stays absent
        if not isinstance(other, MicroNutrients):
            return NotImplemented
        result = MicroNutrients()
        for kind in MicroNutrientsType:
            left, right = self[kind], other[kind]
            if left is None and right is None:
                continue
            result[kind] = (left or 0.0) + (right or 0.0)
        return result

    def scale(self, factor: float) -> MicroNutrients:
        """Return a copy with every present entry multiplied by ``factor``."""
        return MicroNutrients({kind: value * factor for kind, value in self.present().items()})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MicroNutrients):
            return NotImplemented
        return self._elements == other._elements

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{kind.name.lower()}={value:g}" for kind, value in self.present().items()
        )
        return f"MicroNutrients({fields})"
