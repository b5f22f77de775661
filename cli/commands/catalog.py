from __future__ import annotations

from pipeline.pipeline import RecipePredictionSession


def run_catalog(args, session: RecipePredictionSession) -> int:
    catalog = session.catalog
    if catalog.is_fallback:
        print("⚠️ Catalog unavailable; showing fallback properties.")

    print(f"\nMaterials ({len(catalog.materials)})")
    if not catalog.materials:
        print("  (none; ingredients are labeled 'Material N')")
    for o in catalog.materials:
        print(f"  {o.value:<16} {o.label}")

    print(f"\nProperties ({len(catalog.properties)})")
    selected = set(session.selection.codes)
    for o in catalog.properties:
        mark = "*" if o.value in selected else " "
        print(f" {mark}{o.value:<16} {o.label}")
    print("\n(* = selected by default)")
    return 0
