"""recipe_predict.domain.case

Canonical representation of a recipe case and its ingredients.

Cases are immutable values. Every edit produces a new :class:`Case` (and the
case store produces a new tuple of cases), so a consumer holding a snapshot
never observes a half-applied change.

Invariants (enforced by :mod:`pipeline.case_store`, not here):

* a case holds between 1 and ``MAX_ING`` ingredients
* ``title`` encodes the 1-based position of the case in its collection
* ``id`` is assigned once and survives reorders and renumbering; it is *not*
  the id the prediction service assigns during a run
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .validation import coerce_quantity


def new_case_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Ingredient:
    """One weighted ingredient.

    ``value`` is the quantity. While the user is typing it may transiently be
    0 (or anything else); positivity is checked when the value is committed.
    """

    name: str
    value: float = 1.0

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Ingredient":
        if not isinstance(d, Mapping):
            raise TypeError(f"Ingredient must be a mapping, got {type(d).__name__}")
        q = coerce_quantity(d.get("value"))
        return cls(name=str(d.get("name") or "").strip(), value=0.0 if q is None else q)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class Case:
    """A named, ordered set of weighted ingredients."""

    id: str
    title: str
    ingredients: Tuple[Ingredient, ...] = field(default_factory=tuple)

    @property
    def ingredient_count(self) -> int:
        return len(self.ingredients)

    def with_title(self, title: str) -> "Case":
        return replace(self, title=title)

    def with_ingredients(self, ingredients: Tuple[Ingredient, ...]) -> "Case":
        return replace(self, ingredients=tuple(ingredients))

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], *, case_id: Optional[str] = None) -> "Case":
        raw_ings = d.get("ingredients") or []
        if not isinstance(raw_ings, list):
            raise TypeError("Case 'ingredients' must be a list")
        ings: List[Ingredient] = [Ingredient.from_dict(x) for x in raw_ings]
        return cls(
            id=str(case_id or d.get("id") or new_case_id()),
            title=str(d.get("title") or ""),
            ingredients=tuple(ings),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "ingredients": [i.to_dict() for i in self.ingredients],
        }
