"""pipeline.catalog

Option catalog: the master list of selectable materials and predictable
properties.

The service returns one flat list of rows. A row is a *material* when its code
contains ``ITEM_M`` and a *property* when it contains ``ITEM_T``; anything
else is ignored. Both lists are de-duplicated by code, first-seen row wins.

If the catalog cannot be fetched the session still has to be usable, so
:func:`load_catalog` falls back to a deterministic set of mock properties and
an empty material list (the case store then labels ingredients
"Material N").
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from recipe_predict.domain import Option
from tools.predict_api import PredictApiError
from tools.predict_api.rows import catalog_code, display_name

from .core import FALLBACK_PROPERTY_COUNT, MATERIAL_MARKER, PROPERTY_MARKER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionCatalog:
    """Immutable result of classifying catalog rows."""

    materials: Tuple[Option, ...] = ()
    properties: Tuple[Option, ...] = ()

    # Material rows as fetched; used to seed cases from existing recipes.
    material_rows: Tuple[Dict[str, Any], ...] = field(default=(), repr=False)

    is_fallback: bool = False

    def property_codes(self) -> List[str]:
        return [o.value for o in self.properties]


def _dedup_options(rows: Sequence[Tuple[str, Mapping[str, Any]]]) -> List[Option]:
    seen: set[str] = set()
    out: List[Option] = []
    for code, row in rows:
        if code in seen:
            continue
        seen.add(code)
        out.append(Option(value=code, label=display_name(row, code)))
    return out


def classify_rows(rows: Sequence[Mapping[str, Any]]) -> OptionCatalog:
    """Split raw catalog rows into material and property options."""
    m_rows: List[Tuple[str, Mapping[str, Any]]] = []
    t_rows: List[Tuple[str, Mapping[str, Any]]] = []

    for row in rows:
        code = catalog_code(row)
        if not code:
            continue
        if MATERIAL_MARKER in code:
            m_rows.append((code, row))
        elif PROPERTY_MARKER in code:
            t_rows.append((code, row))

    catalog = OptionCatalog(
        materials=tuple(_dedup_options(m_rows)),
        properties=tuple(_dedup_options(t_rows)),
        material_rows=tuple(dict(r) for _, r in m_rows),
    )
    logger.info(
        "Catalog classified: %d materials, %d properties (%d rows ignored)",
        len(catalog.materials),
        len(catalog.properties),
        len(rows) - len(m_rows) - len(t_rows),
    )
    return catalog


def fallback_catalog(count: int = FALLBACK_PROPERTY_COUNT) -> OptionCatalog:
    props = tuple(
        Option(value=f"{PROPERTY_MARKER}_{i + 1}", label=f"Mock Property {i + 1}")
        for i in range(count)
    )
    return OptionCatalog(materials=(), properties=props, is_fallback=True)


def load_catalog(
    fetch_rows: Callable[[], Sequence[Mapping[str, Any]]],
) -> Tuple[OptionCatalog, Optional[PredictApiError]]:
    """Fetch and classify the catalog.

    Returns ``(catalog, error)``; *error* is set (and the catalog is the
    fallback one) when the fetch failed.
    """
    try:
        rows = fetch_rows()
    except PredictApiError as e:
        logger.warning("Catalog fetch failed (%s): %s. Using fallback catalog.", e.kind, e)
        return fallback_catalog(), e
    return classify_rows(rows), None
