"""recipe_predict.domain.option"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence


@dataclass(frozen=True)
class Option:
    """One selectable catalog entry.

    ``value`` is the catalog code (e.g. ``ITEM_T_03``), ``label`` the display
    name shown to users and used as the ingredient name for materials.
    """

    value: str
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "label": self.label}


def find_option(options: Iterable[Option], code: str) -> Optional[Option]:
    for o in options:
        if o.value == code:
            return o
    return None


def label_for(options: Iterable[Option], code: str) -> str:
    """Resolve a display label for *code*, falling back to the code itself."""
    found = find_option(options, code)
    return found.label if found else code


def filter_options(options: Sequence[Option], term: Optional[str]) -> List[Option]:
    """Case-insensitive substring search over label and code."""
    t = (term or "").strip().lower()
    if not t:
        return list(options)
    return [o for o in options if t in o.label.lower() or t in o.value.lower()]
