"""Module catalogue — generate, validate and combine module types."""

from .models import ModuleType, ValidationError, InvalidCombinationError
from .loader import (
    build_module_types, validate_module_types, parse_module_types,
    module_type_to_dict,
)
from .combinations import (
    validate_counts, expand_counts, combination_area, find_combinations,
    format_combination, parse_combination,
)

__all__ = [
    # Models
    "ModuleType", "ValidationError", "InvalidCombinationError",
    # Loader
    "build_module_types", "validate_module_types", "parse_module_types",
    "module_type_to_dict",
    # Combinations
    "validate_counts", "expand_counts", "combination_area", "find_combinations",
    "format_combination", "parse_combination",
]
