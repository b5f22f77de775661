"""pipeline.case_store

The case collection and its bounded edit operations.

Two layers:

* module-level functions are *pure*: they take a tuple of cases and return a
  new tuple (or the same tuple when the edit is a no-op). They never raise for
  an edit that hits a bound.
* :class:`CaseStore` owns the current tuple, commits results of the pure
  functions in one assignment, and turns the rejections a user should hear
  about into :class:`~recipe_predict.domain.ValidationError`.

Default ingredient labels are a pure function of an index and the material
option list (:func:`pick_label`), so there is no cursor to keep in sync.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from recipe_predict.domain import Case, Ingredient, Option, ValidationError, coerce_quantity
from recipe_predict.domain.case import new_case_id
from tools.predict_api.rows import MATERIAL_NAME_KEYS, QUANTITY_KEYS, RECIPE_GROUP_KEYS, first_present, first_str

from .core import (
    DEFAULT_INGREDIENT_VALUE,
    INITIAL_CASE_COUNT,
    MAX_CASE,
    MAX_ING,
    case_title,
    placeholder_material_label,
)

logger = logging.getLogger(__name__)

Cases = Tuple[Case, ...]


def pick_label(index: int, materials: Sequence[Option]) -> str:
    """Round-robin default material label for slot *index*."""
    n = len(materials)
    if n == 0:
        return placeholder_material_label(index)
    # Python's % is non-negative for n > 0, so negative indexes wrap too.
    return materials[index % n].label


def renumber(cases: Sequence[Case]) -> Cases:
    return tuple(c.with_title(case_title(i)) for i, c in enumerate(cases))


def _replace_case(cases: Cases, case_id: str, fn: Callable[[Case], Case]) -> Cases:
    changed = False
    out: List[Case] = []
    for c in cases:
        if c.id == case_id:
            nc = fn(c)
            changed = changed or nc is not c
            out.append(nc)
        else:
            out.append(c)
    return tuple(out) if changed else cases


def add_case(cases: Cases, materials: Sequence[Option]) -> Cases:
    if len(cases) >= MAX_CASE:
        return cases
    # Continue the label rotation after every slot handed out so far.
    already = sum(c.ingredient_count for c in cases)
    new = Case(
        id=new_case_id(),
        title="",
        ingredients=(Ingredient(name=pick_label(already, materials), value=DEFAULT_INGREDIENT_VALUE),),
    )
    return renumber(cases + (new,))


def copy_case(cases: Cases, case_id: str) -> Cases:
    if len(cases) >= MAX_CASE:
        return cases
    found = next((c for c in cases if c.id == case_id), None)
    if found is None:
        return cases
    # Ingredient is frozen, so copying the tuple copies the values.
    new = Case(id=new_case_id(), title="", ingredients=tuple(found.ingredients))
    return renumber(cases + (new,))


def delete_case(cases: Cases, case_id: str) -> Cases:
    if len(cases) <= 1:
        return cases
    remaining = tuple(c for c in cases if c.id != case_id)
    if len(remaining) == len(cases):
        return cases
    return renumber(remaining)


def add_ingredient(cases: Cases, case_id: str, materials: Sequence[Option]) -> Cases:
    def _add(c: Case) -> Case:
        if c.ingredient_count >= MAX_ING:
            return c
        ing = Ingredient(name=pick_label(c.ingredient_count, materials), value=DEFAULT_INGREDIENT_VALUE)
        return c.with_ingredients(c.ingredients + (ing,))

    return _replace_case(cases, case_id, _add)


def remove_ingredient(cases: Cases, case_id: str, index: int) -> Cases:
    def _remove(c: Case) -> Case:
        if c.ingredient_count <= 1 or not 0 <= index < c.ingredient_count:
            return c
        return c.with_ingredients(c.ingredients[:index] + c.ingredients[index + 1 :])

    return _replace_case(cases, case_id, _remove)


def _update_ingredient(cases: Cases, case_id: str, index: int, **changes: Any) -> Cases:
    def _update(c: Case) -> Case:
        if not 0 <= index < c.ingredient_count:
            return c
        old = c.ingredients[index]
        new = Ingredient(name=changes.get("name", old.name), value=changes.get("value", old.value))
        return c.with_ingredients(c.ingredients[:index] + (new,) + c.ingredients[index + 1 :])

    return _replace_case(cases, case_id, _update)


def update_ingredient_value(cases: Cases, case_id: str, index: int, value: Any) -> Cases:
    """Replace a quantity as typed; positivity is checked on commit.

    Input that is not a number yet (``""`` while the user is typing) is held
    as 0 so the submission gate catches it.
    """
    q = coerce_quantity(value)
    return _update_ingredient(cases, case_id, index, value=0.0 if q is None else q)


def update_ingredient_name(cases: Cases, case_id: str, index: int, name: str) -> Cases:
    return _update_ingredient(cases, case_id, index, name=str(name))


def default_cases(materials: Sequence[Option], count: int = INITIAL_CASE_COUNT) -> Cases:
    cases: Cases = ()
    for _ in range(count):
        cases = add_case(cases, materials)
    return cases


def seed_cases_from_rows(
    rows: Sequence[Mapping[str, Any]],
    materials: Sequence[Option],
    *,
    limit: int = INITIAL_CASE_COUNT,
) -> Cases:
    """Build cases from catalog material rows that describe existing recipes.

    Rows are grouped by recipe key in first-seen order; a row without a key
    forms its own group. At most ``MAX_CASE`` groups are read and the first
    *limit* become cases. Falls back to :func:`default_cases` when nothing can
    be seeded.
    """
    groups: Dict[str, List[Mapping[str, Any]]] = {}
    for row in rows:
        key = first_str(row, RECIPE_GROUP_KEYS) or new_case_id()
        if key not in groups and len(groups) >= MAX_CASE:
            continue
        groups.setdefault(key, []).append(row)

    seeded: List[Case] = []
    for group in groups.values():
        ings: List[Ingredient] = []
        for row in group[:MAX_ING]:
            q = coerce_quantity(first_present(row, QUANTITY_KEYS))
            ings.append(
                Ingredient(
                    name=first_str(row, MATERIAL_NAME_KEYS) or pick_label(0, materials),
                    value=q if q is not None and q > 0 else DEFAULT_INGREDIENT_VALUE,
                )
            )
        # The first ingredient always starts at the default quantity.
        ings[0] = Ingredient(name=ings[0].name, value=DEFAULT_INGREDIENT_VALUE)
        seeded.append(Case(id=new_case_id(), title="", ingredients=tuple(ings)))

    if not seeded:
        return default_cases(materials, count=limit)
    return renumber(seeded[:limit])


class CaseStore:
    """Owns the current case tuple.

    Every mutating method commits a whole new tuple and returns it. Readers
    holding an older tuple keep a consistent snapshot.
    """

    def __init__(self, cases: Sequence[Case] = (), *, materials: Sequence[Option] = ()) -> None:
        self._materials: Tuple[Option, ...] = tuple(materials)
        self._cases: Cases = ()
        self.commit(tuple(cases) if cases else default_cases(self._materials))

    @property
    def cases(self) -> Cases:
        return self._cases

    @property
    def materials(self) -> Tuple[Option, ...]:
        return self._materials

    def find(self, case_id: str) -> Optional[Case]:
        return next((c for c in self._cases if c.id == case_id), None)

    def commit(self, cases: Cases) -> Cases:
        if not 1 <= len(cases) <= MAX_CASE:
            raise ValueError(f"A case collection holds 1..{MAX_CASE} cases, got {len(cases)}")
        for c in cases:
            if not 1 <= c.ingredient_count <= MAX_ING:
                raise ValueError(f"{c.title or c.id}: a case holds 1..{MAX_ING} ingredients, got {c.ingredient_count}")
        self._cases = renumber(cases)
        return self._cases

    def pick_label(self, index: int) -> str:
        return pick_label(index, self._materials)

    def add_case(self) -> Cases:
        return self.commit(add_case(self._cases, self._materials))

    def copy_case(self, case_id: str) -> Cases:
        return self.commit(copy_case(self._cases, case_id))

    def delete_case(self, case_id: str) -> Cases:
        return self.commit(delete_case(self._cases, case_id))

    def add_ingredient(self, case_id: str) -> Cases:
        return self.commit(add_ingredient(self._cases, case_id, self._materials))

    def remove_ingredient(self, case_id: str, index: int) -> Cases:
        case = self.find(case_id)
        if case is not None and case.ingredient_count <= 1:
            raise ValidationError("At least one ingredient is required.")
        return self.commit(remove_ingredient(self._cases, case_id, index))

    def update_ingredient_value(self, case_id: str, index: int, value: Any) -> Cases:
        return self.commit(update_ingredient_value(self._cases, case_id, index, value))

    def update_ingredient_name(self, case_id: str, index: int, name: str) -> Cases:
        return self.commit(update_ingredient_name(self._cases, case_id, index, name))

    def commit_ingredient_value(self, case_id: str, index: int, raw: Any) -> Cases:
        """Apply a finished edit; a non-positive quantity is reset to the default.

        Raises ValidationError after the reset so the caller can tell the user.
        """
        q = coerce_quantity(raw)
        if q is None or q <= 0:
            self.commit(update_ingredient_value(self._cases, case_id, index, DEFAULT_INGREDIENT_VALUE))
            logger.warning("Rejected quantity %r for case %s[%d]; reset to %s", raw, case_id, index, DEFAULT_INGREDIENT_VALUE)
            raise ValidationError(
                "Quantity must be greater than 0 (reset to 1).",
                reset_value=DEFAULT_INGREDIENT_VALUE,
            )
        return self.commit(update_ingredient_value(self._cases, case_id, index, q))

    def check_submittable(self) -> None:
        """Raise ValidationError if any ingredient quantity is not positive."""
        for c in self._cases:
            for i, ing in enumerate(c.ingredients):
                if not ing.value > 0:
                    raise ValidationError(
                        f"{c.title}: ingredient {i + 1} ({ing.name}) must have a quantity greater than 0."
                    )
