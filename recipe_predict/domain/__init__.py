"""recipe_predict.domain

Domain objects that form the *contract* between the catalog, the case store,
the prediction pipeline and whatever presents the results.

Key idea
--------
The remote service speaks loosely-typed JSON rows. Everything past the HTTP
boundary works with the frozen dataclasses defined here, so consumers never
need to know which field-name alias a given row used.
"""

from __future__ import annotations

from .case import Case, Ingredient
from .option import Option
from .prediction import DetailRow, PredictionResult
from .validation import ValidationError, coerce_quantity, format_quantity

__all__ = [
    "Case",
    "DetailRow",
    "Ingredient",
    "Option",
    "PredictionResult",
    "ValidationError",
    "coerce_quantity",
    "format_quantity",
]
