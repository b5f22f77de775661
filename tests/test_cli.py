import argparse
import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from cli.commands.interactive import ACTIONS, run_interactive
from cli.commands.predict import EXIT_FAILED, EXIT_INVALID, EXIT_OK, run_predict
from cli.common import load_cases_file, parse_csv
from pipeline.pipeline import RecipePredictionSession
from recipe_cli import parse_args, resolve_config
from tools.predict_api import PredictApiError

CATALOG = [
    {"CODE": "ITEM_M_1", "CODENAME": "Resin"},
    {"CODE": "ITEM_T_1", "CODENAME": "Hardness"},
    {"CODE": "ITEM_T_2", "CODENAME": "Gloss"},
]


class FakeClient:
    def __init__(self, fail_submit: bool = False) -> None:
        self.fail_submit = fail_submit
        self.submitted = []

    def fetch_catalog(self):
        return CATALOG

    def submit(self, data_object):
        self.submitted.append(data_object)
        if self.fail_submit:
            raise PredictApiError("HTTP 503 Service Unavailable", kind="http", status_code=503)
        return {"insertedRows": [{"insertedId": i + 1} for i in range(len(data_object))]}

    def retrieve(self, id_list):
        return {"rows": [{"RECIPE_IDX": i, "CODE": "ITEM_T_2", "y_pred": 0.5 * i} for i in id_list]}


def _session(**kw) -> RecipePredictionSession:
    session = RecipePredictionSession(FakeClient(**kw))
    session.bootstrap()
    return session


def _args(**kw) -> argparse.Namespace:
    base = {"cases": None, "properties": None, "out": None}
    base.update(kw)
    return argparse.Namespace(**base)


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestCommonHelpers(unittest.TestCase):
    def test_parse_csv(self) -> None:
        self.assertEqual(["a", "b"], parse_csv(" a, ,b "))
        self.assertEqual([], parse_csv(None))

    def test_load_cases_file_accepts_object_or_list(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            one = {"ingredients": [{"name": "Resin", "value": 2}]}
            a = load_cases_file(_write(Path(td) / "a.json", {"cases": [one]}))
            b = load_cases_file(_write(Path(td) / "b.json", [one, one]))

        self.assertEqual(1, len(a))
        self.assertEqual(2.0, a[0].ingredients[0].value)
        self.assertEqual(2, len(b))
        self.assertNotEqual(b[0].id, b[1].id)

    def test_load_cases_file_reads_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "cases.yaml"
            path.write_text(
                "cases:\n  - ingredients:\n      - {name: Resin, value: 1}\n      - {name: Filler, value: 2.5}\n",
                encoding="utf-8",
            )
            (case,) = load_cases_file(path)

        self.assertEqual([("Resin", 1.0), ("Filler", 2.5)], [(i.name, i.value) for i in case.ingredients])

    def test_load_cases_file_rejects_bad_shape(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ValueError):
                load_cases_file(_write(Path(td) / "bad.json", {"recipes": []}))
            with self.assertRaises(ValueError):
                load_cases_file(_write(Path(td) / "bad2.json", {"cases": [{"ingredients": "Resin"}]}))


class TestRunPredict(unittest.TestCase):
    def test_success_writes_results(self) -> None:
        session = _session()
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "out" / "results.json"
            with redirect_stdout(io.StringIO()):
                code = run_predict(_args(properties="ITEM_T_2", out=str(out)), session)

            self.assertEqual(EXIT_OK, code)
            doc = json.loads(out.read_text(encoding="utf-8"))

        self.assertEqual(["ITEM_T_2"], doc["properties"])
        # one material row in the catalog seeds a single case
        self.assertEqual([[0.5]], [r["values"] for r in doc["results"]])
        self.assertEqual(["Gloss"], doc["results"][0]["property_keys"])

    def test_non_positive_quantity_is_invalid(self) -> None:
        session = _session()
        with tempfile.TemporaryDirectory() as td:
            path = _write(Path(td) / "c.json", {"cases": [{"ingredients": [{"name": "Resin", "value": 0}]}]})
            with redirect_stdout(io.StringIO()):
                code = run_predict(_args(cases=str(path)), session)

        self.assertEqual(EXIT_INVALID, code)
        self.assertEqual([], session._client.submitted)

    def test_unknown_properties_only_is_invalid(self) -> None:
        session = _session()
        with redirect_stdout(io.StringIO()):
            self.assertEqual(EXIT_INVALID, run_predict(_args(properties="NOPE"), session))

    def test_missing_cases_file_is_invalid(self) -> None:
        session = _session()
        with redirect_stdout(io.StringIO()):
            self.assertEqual(EXIT_INVALID, run_predict(_args(cases="/nonexistent/cases.json"), session))

    def test_service_failure_exit_code(self) -> None:
        session = _session(fail_submit=True)
        buf = io.StringIO()
        with redirect_stdout(buf):
            code = run_predict(_args(), session)

        self.assertEqual(EXIT_FAILED, code)
        self.assertIn("transport", buf.getvalue())

    def test_unwritable_out_path_reports_failure(self) -> None:
        session = _session()
        with tempfile.TemporaryDirectory() as td:
            blocker = Path(td) / "blocker"
            blocker.write_text("not a directory", encoding="utf-8")
            buf = io.StringIO()
            with redirect_stdout(buf):
                code = run_predict(_args(out=str(blocker / "results.json")), session)

        self.assertEqual(EXIT_FAILED, code)
        self.assertIn("Could not write results", buf.getvalue())


class TestInteractive(unittest.TestCase):
    def _choice(self, action: str) -> str:
        return str(list(ACTIONS).index(action) + 1)

    def test_add_case_then_quit(self) -> None:
        session = _session()
        answers = [self._choice("add_case"), self._choice("quit")]
        with patch("builtins.input", side_effect=answers), redirect_stdout(io.StringIO()):
            code = run_interactive(_args(), session)

        self.assertEqual(0, code)
        self.assertEqual(["case - 1", "case - 2"], [c.title for c in session.cases.cases])

    def test_delete_picks_case_from_menu(self) -> None:
        session = _session()
        session.cases.add_case()
        kept = session.cases.cases[0].id
        answers = [self._choice("delete_case"), "2", self._choice("quit")]
        with patch("builtins.input", side_effect=answers), redirect_stdout(io.StringIO()):
            run_interactive(_args(), session)

        self.assertEqual([kept], [c.id for c in session.cases.cases])
        self.assertEqual("case - 1", session.cases.cases[0].title)

    def test_invalid_quantity_is_reset_and_loop_continues(self) -> None:
        session = _session()
        case_id = session.cases.cases[0].id
        answers = [
            self._choice("set_value"),  # single case, single ingredient: no pickers
            "-3",
            self._choice("quit"),
        ]
        buf = io.StringIO()
        with patch("builtins.input", side_effect=answers), redirect_stdout(buf):
            run_interactive(_args(), session)

        self.assertEqual(1.0, session.cases.find(case_id).ingredients[0].value)
        self.assertIn("greater than 0", buf.getvalue())


class TestEntrypointConfig(unittest.TestCase):
    def test_flags_override_environment(self) -> None:
        args = parse_args(["--mode", "predict", "--no-dotenv", "--api-base", "http://cli:1", "--timeout", "3"])
        with patch.dict("os.environ", {"RECIPE_API_BASE": "http://env:1"}):
            cfg = resolve_config(args)

        self.assertEqual("http://cli:1", cfg.base_url)
        self.assertEqual(3.0, cfg.retrieve_timeout)

    def test_invalid_timeout_exits(self) -> None:
        args = parse_args(["--no-dotenv", "--timeout", "0"])
        with self.assertRaises(SystemExit):
            resolve_config(args)


if __name__ == "__main__":
    unittest.main()
