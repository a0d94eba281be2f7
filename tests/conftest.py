"""Pytest fixtures for mealplanner tests."""

from __future__ import annotations

from typing import Optional

import pytest

from mealplanner.config import settings as settings_module
from mealplanner.config.settings import Settings
from mealplanner.data.nutrients import MacroElements, MicroNutrients, MicroNutrientsType
from mealplanner.data.products import AllowedUnitsType, Product, UnitData


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Keep tests independent of any ~/.mealplanner/config.yaml."""
    settings = Settings()
    monkeypatch.setattr(settings_module, "_settings", settings)
    return settings


def build_product(
    name: str,
    protein_per_100g: float,
    gram_amount: int = 1,
    gram_divider: int = 1,
    fiber: Optional[float] = None,
) -> Product:
    """Product with fixed fat/carbs/sugar and the given protein and fiber."""
    micro = MicroNutrients()
    if fiber is not None:
        micro[MicroNutrientsType.FIBER] = fiber
    return Product(
        name=name,
        macro_elements=MacroElements(
            fat=5.0, saturated_fat=1.0, carbs=10.0, sugar=2.0, protein=protein_per_100g
        ),
        micro_nutrients=micro,
        allowed_units={
            AllowedUnitsType.GRAM: UnitData(amount=gram_amount, divider=gram_divider)
        },
    )


def fat_product(name: str, fat_per_100g: float, **extra_units: UnitData) -> Product:
    """Product carrying only fat, with optional extra units keyed by unit name."""
    units = {AllowedUnitsType[key.upper()]: data for key, data in extra_units.items()}
    return Product(
        name=name,
        macro_elements=MacroElements(fat=fat_per_100g),
        allowed_units=units,
    )


@pytest.fixture
def protein_powder() -> Product:
    return build_product("ProteinPowder", 40.0, fiber=5.0)


@pytest.fixture
def eggs() -> Product:
    return build_product("Eggs", 30.0, gram_amount=50, fiber=8.0)


@pytest.fixture
def beans() -> Product:
    return build_product("Beans", 18.0, gram_amount=100, fiber=5.0)


@pytest.fixture
def spinach() -> Product:
    return build_product("Spinach", 4.0, gram_amount=25, fiber=20.0)


@pytest.fixture
def make_product():
    """Factory fixture for protein/fiber test products."""
    return build_product


@pytest.fixture
def make_fat_product():
    """Factory fixture for fat-only test products."""
    return fat_product
