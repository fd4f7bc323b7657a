from .catalog import IngredientCatalog
from .divided import distribute_divided
from .ingredient_parser import IngredientParser, format_ingredient_for_display, full_spec
from .prep_steps import synthesize_prep_steps
from .steps import extract_servings, segment_steps
from .timers import calculate_total_time, extract_step_timing
from .tracking import link
from .training import CorrectionStore

__all__ = [
    "IngredientCatalog",
    "IngredientParser",
    "CorrectionStore",
    "segment_steps",
    "extract_servings",
    "extract_step_timing",
    "calculate_total_time",
    "synthesize_prep_steps",
    "link",
    "distribute_divided",
    "format_ingredient_for_display",
    "full_spec",
]
