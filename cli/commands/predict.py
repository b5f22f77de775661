from __future__ import annotations

from pathlib import Path

from cli.common import load_cases_file, parse_csv, print_results, results_payload
from pipeline.pipeline import RecipePredictionSession
from recipe_predict.domain import ValidationError
from recipe_predict.io import write_json_atomic

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def run_predict(args, session: RecipePredictionSession) -> int:
    if args.cases:
        try:
            cases = load_cases_file(Path(args.cases))
            session.cases.commit(cases)
        except (OSError, ValueError) as e:
            print(f"❌ Could not use cases from {args.cases}: {e}")
            return EXIT_INVALID

    if args.properties:
        codes = parse_csv(args.properties)
        known = set(session.catalog.property_codes())
        unknown = [c for c in codes if c not in known]
        if unknown:
            print(f"⚠️ Ignoring unknown property codes: {', '.join(unknown)}")
        session.confirm_selection(codes)
        if not session.selection.codes:
            print("❌ No known property codes selected.")
            return EXIT_INVALID

    print(f"Running prediction: {len(session.cases.cases)} cases x {len(session.selection.codes)} properties")
    try:
        outcome = session.run_prediction()
    except ValidationError as e:
        print(f"❌ {e}")
        return EXIT_INVALID

    if not outcome.succeeded:
        err = outcome.error
        reason = err.reason.value if err else "unknown"
        print(f"❌ Prediction failed ({reason}): {err.message if err else ''}")
        return EXIT_FAILED

    print_results(outcome.results)

    if args.out:
        out = Path(args.out).expanduser().resolve()
        try:
            write_json_atomic(out, results_payload(session.cases.cases, session.selection.codes, outcome.results))
        except OSError as e:
            print(f"❌ Could not write results to {out}: {e}")
            return EXIT_FAILED
        print(f"\n✅ Results written to {out}")
    return EXIT_OK
