"""
Unit conversion suggestions.

Simple ratio tables only: a cup of flour is offered in tablespoons, never
in grams. Cross-type conversion needs densities and is not attempted.
"""

from typing import Optional

from ..parsing import catalog_data
from ..parsing.quantities import format_quantity, unit_label
from ..parsing.catalog import IngredientCatalog

MIN_SUGGESTED = 1 / 8
MAX_SUGGESTED = 100


class ConversionSuggestion:
    def __init__(self, qty: float, unit_id: str, display: str):
        self.qty = qty
        self.unit_id = unit_id
        self.display = display

    def to_dict(self):
        return {
            "qty": self.qty,
            "unit": self.unit_id,
            "display": self.display,
        }


def suggest_unit_conversions(
    quantity: float,
    unit_id: str,
    catalog: Optional[IngredientCatalog] = None,
) -> list[ConversionSuggestion]:
    """
    Equivalent amounts in other units of the same type, keeping only the
    ones a cook could measure (between 1/8 and 100).
    """
    catalog = catalog or IngredientCatalog()
    unit = catalog.unit(unit_id)
    if unit is None or quantity is None or quantity <= 0:
        return []

    table = catalog_data.UNIT_CONVERSIONS.get(unit.type, {})
    suggestions = []
    for target_id, factor in table.get(unit.id, {}).items():
        target = catalog.unit(target_id)
        if target is None:
            continue
        converted = quantity * factor
        if not MIN_SUGGESTED <= converted <= MAX_SUGGESTED:
            continue
        display = f"{format_quantity(converted)} {unit_label(target, converted)}"
        suggestions.append(ConversionSuggestion(round(converted, 3), target.id, display))
    return suggestions
