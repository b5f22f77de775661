from __future__ import annotations

from typing import Dict, Optional

from cli.common import print_cases, print_results, fmt3
from cli.ui import choose_from_menu, parse_index_selection, prompt_text
from pipeline.core import MAX_CASE, MAX_ING
from pipeline.errors import PipelineBusyError
from pipeline.pipeline import RecipePredictionSession
from recipe_predict.domain import Case, ValidationError

ACTIONS: Dict[str, str] = {
    "show": "Show cases and results",
    "add_case": "Add case",
    "copy_case": "Copy case",
    "delete_case": "Delete case",
    "add_ing": "Add ingredient",
    "remove_ing": "Remove ingredient",
    "set_value": "Set ingredient quantity",
    "set_name": "Set ingredient material",
    "properties": "Choose properties",
    "run": "Run prediction",
    "toggle": "Toggle result for comparison",
    "detail": "Show result detail",
    "dismiss": "Dismiss error message",
    "quit": "Quit",
}


def _choose_case(session: RecipePredictionSession) -> Case:
    cases = session.cases.cases
    if len(cases) == 1:
        return cases[0]
    by_id = {c.id: c for c in cases}
    cid = choose_from_menu("Choose a case:", {c.id: c.title for c in cases})
    return by_id[cid]


def _choose_ingredient(case: Case) -> int:
    if case.ingredient_count == 1:
        return 0
    options = {str(i): f"{ing.name} = {ing.value:g}" for i, ing in enumerate(case.ingredients)}
    return int(choose_from_menu(f"Choose an ingredient of {case.title}:", options))


def _choose_result(session: RecipePredictionSession) -> Optional[str]:
    results = session.results
    if not results:
        print("No results yet.")
        return None
    return choose_from_menu("Choose a result:", {r.id: f"{r.title} ({'x' if r.checked else ' '})" for r in results})


def _choose_properties(session: RecipePredictionSession) -> None:
    term = prompt_text("Search properties (code/name, empty = all)", default="")
    visible = session.search_properties(term)
    if not visible:
        print("No properties match.")
        return

    selected = set(session.selection.codes)
    print()
    for i, o in enumerate(visible, start=1):
        mark = "x" if o.value in selected else " "
        print(f"[{i}] [{mark}] {o.label} ({o.value})")

    raw = prompt_text("Toggle which (e.g. 1,3-5), 'a' = toggle all shown, empty = keep", default="")
    if raw.strip().lower() == "a":
        codes = list(session.selection.toggle_all([o.value for o in visible]))
    else:
        picked = {visible[i].value for i in parse_index_selection(raw, n=len(visible))}
        if not picked:
            return
        codes = list(selected ^ picked)

    session.confirm_selection(codes)
    print(f"Selected {len(session.selection.codes)} properties: {', '.join(session.selection.labels())}")


def _show(session: RecipePredictionSession) -> None:
    print_cases(session.cases.cases)
    print_results(session.results)


def _run(session: RecipePredictionSession) -> None:
    try:
        outcome = session.run_prediction()
    except PipelineBusyError as e:
        print(f"⏳ {e}")
        return
    if outcome.succeeded:
        print_results(outcome.results)
    # failures are printed by the status line


def _apply(action: str, session: RecipePredictionSession) -> None:
    store = session.cases

    if action == "show":
        _show(session)
    elif action == "add_case":
        if len(store.cases) >= MAX_CASE:
            print(f"Case limit reached ({MAX_CASE}).")
        store.add_case()
    elif action == "copy_case":
        if len(store.cases) >= MAX_CASE:
            print(f"Case limit reached ({MAX_CASE}).")
        store.copy_case(_choose_case(session).id)
    elif action == "delete_case":
        if len(store.cases) <= 1:
            print("The last case cannot be deleted.")
        store.delete_case(_choose_case(session).id)
    elif action == "add_ing":
        case = _choose_case(session)
        if case.ingredient_count >= MAX_ING:
            print(f"Ingredient limit reached ({MAX_ING}).")
        store.add_ingredient(case.id)
    elif action == "remove_ing":
        case = _choose_case(session)
        store.remove_ingredient(case.id, _choose_ingredient(case))
    elif action == "set_value":
        case = _choose_case(session)
        idx = _choose_ingredient(case)
        raw = prompt_text("Quantity", default=f"{case.ingredients[idx].value:g}")
        store.commit_ingredient_value(case.id, idx, raw)
    elif action == "set_name":
        case = _choose_case(session)
        idx = _choose_ingredient(case)
        materials = session.catalog.materials
        if materials:
            code = choose_from_menu("Choose a material:", {o.value: o.label for o in materials})
            name = next(o.label for o in materials if o.value == code)
        else:
            name = prompt_text("Material name", default=case.ingredients[idx].name)
        store.update_ingredient_name(case.id, idx, name)
    elif action == "properties":
        _choose_properties(session)
    elif action == "run":
        _run(session)
    elif action == "toggle":
        rid = _choose_result(session)
        if rid:
            session.toggle_result(rid)
    elif action == "detail":
        rid = _choose_result(session)
        if rid:
            title, rows = session.detail_for(rid)
            print(f"\n{title}")
            for d in rows:
                print(f"  {d.label:<30} {fmt3(d.y_pred):>10} [{fmt3(d.ci_low)}, {fmt3(d.ci_high)}]")
    elif action == "dismiss":
        session.errors.dismiss()


def run_interactive(args, session: RecipePredictionSession) -> int:
    _show(session)
    while True:
        notice = session.errors.current
        if notice is not None:
            print(f"\n⚠️ Request failed: {notice.message}")

        action = choose_from_menu("Choose an action:", ACTIONS)
        if action == "quit":
            return 0
        try:
            _apply(action, session)
        except ValidationError as e:
            print(f"❌ {e}")
