"""Nutrient-equivalent product substitution.

Given an amount of one product, find how much of another product carries the
same amount of a chosen nutrient:

    equivalent_grams = input_grams * nutrient(input) / nutrient(output)

The answer is returned as a low/high bracket one unit step apart.
"""

from __future__ import annotations

import logging
import math

from mealplanner.data.nutrients import Nutrient, nutrient_label
from mealplanner.data.products import AllowedUnitsType, Product
from mealplanner.optimizer.models import Fraction, MissingDataError

logger = logging.getLogger(__name__)


def _nutrient_amounts(
    input_product: Product,
    output_product: Product,
    nutrient: Nutrient,
) -> tuple[float, float]:
    input_amount = input_product.get_nutrient_amount(nutrient)
    if input_amount is None:
        raise MissingDataError(
            f"Input product '{input_product.id}' does not have nutrient "
            f"'{nutrient_label(nutrient)}'"
        )
    output_amount = output_product.get_nutrient_amount(nutrient)
    if output_amount is None:
        raise MissingDataError(
            f"Output product '{output_product.id}' does not have nutrient "
            f"'{nutrient_label(nutrient)}'"
        )
    return input_amount, output_amount


def _scale_grams(
    input_grams: float,
    amounts: tuple[float, float],
    output_product: Product,
    nutrient: Nutrient,
) -> float:
    input_amount, output_amount = amounts
    if output_amount == 0:
        raise MissingDataError(
            f"Output product '{output_product.id}' has zero "
            f"'{nutrient_label(nutrient)}' so no equivalent amount exists"
        )
    return input_grams * input_amount / output_amount


def equivalent_grams(
    input_product: Product,
    input_grams: float,
    output_product: Product,
    nutrient: Nutrient,
) -> float:
    """Grams of ``output_product`` carrying as much ``nutrient`` as the input.

    Raises:
        MissingDataError: If either product lacks the nutrient or the output
            product has none of it
    """
    amounts = _nutrient_amounts(input_product, output_product, nutrient)
    return _scale_grams(input_grams, amounts, output_product, nutrient)


def get_amount_of_swapped_product(
    input_product: Product,
    input_grams: float,
    output_product: Product,
    nutrient: Nutrient,
    unit: AllowedUnitsType = AllowedUnitsType.GRAM,
) -> tuple[Fraction, Fraction]:
    """Bracket the amount of ``output_product`` equivalent to ``input_grams``.

    Args:
        input_product: Product being replaced
        input_grams: Grams of the input product
        output_product: Product to substitute in
        nutrient: Nutrient that must stay equal
        unit: Unit of the returned fractions, looked up on the input product

    Returns:
        (low, high) fractions at the unit's divider, ``high`` one step above
        ``low``

    Raises:
        MissingDataError: Checked in order: the input then the output product
            lacks the nutrient, the input product lacks the unit, the output
            product has none of the nutrient
    """
    amounts = _nutrient_amounts(input_product, output_product, nutrient)
    unit_data = input_product.allowed_units.get(unit)
    if unit_data is None:
        raise MissingDataError(
            f"Input product '{input_product.id}' does not have allowed unit "
            f"'{unit.label}'"
        )
    grams = _scale_grams(input_grams, amounts, output_product, nutrient)

    steps = math.floor(grams / unit_data.grams_per_step())
    low = Fraction(steps, unit_data.divider)
    high = Fraction(steps + 1, unit_data.divider)
    logger.debug(
        "Swap %gg %s -> %s over %s: %.3fg, bracket %s..%s %s",
        input_grams,
        input_product.id,
        output_product.id,
        nutrient_label(nutrient),
        grams,
        low,
        high,
        unit,
    )
    return low, high


def get_grams_of_swapped_product(
    input_product: Product,
    input_grams: float,
    output_product: Product,
    nutrient: Nutrient,
) -> tuple[int, int]:
    """Bracket the equivalent amount of ``output_product`` in whole grams.

    Returns:
        (low, high) grams with ``high == low + 1``
    """
    low = math.floor(equivalent_grams(input_product, input_grams, output_product, nutrient))
    return low, low + 1
