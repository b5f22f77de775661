import unittest

from pipeline.catalog import classify_rows, fallback_catalog, load_catalog
from recipe_predict.domain import Option
from tools.predict_api import PredictApiError


class TestClassifyRows(unittest.TestCase):
    def test_rows_split_by_code_marker(self) -> None:
        rows = [
            {"CODE": "ITEM_M_001", "CODENAME": "Epoxy resin"},
            {"CODE": "ITEM_T_001", "CODENAME": "Tensile strength"},
            {"CODE": "OTHER_9", "CODENAME": "ignored"},
            {"CODENAME": "no code"},
            {"CODE": "ITEM_T_002", "NAME": "Viscosity"},
        ]
        catalog = classify_rows(rows)

        self.assertEqual((Option("ITEM_M_001", "Epoxy resin"),), catalog.materials)
        self.assertEqual(
            (Option("ITEM_T_001", "Tensile strength"), Option("ITEM_T_002", "Viscosity")),
            catalog.properties,
        )
        self.assertFalse(catalog.is_fallback)
        self.assertEqual(1, len(catalog.material_rows))

    def test_dedup_keeps_first_seen_row(self) -> None:
        rows = [
            {"CODE": "ITEM_T_1", "CODENAME": "First"},
            {"CODE": "ITEM_T_2", "CODENAME": "Other"},
            {"CODE": "ITEM_T_1", "CODENAME": "Second"},
        ]
        catalog = classify_rows(rows)
        self.assertEqual(["ITEM_T_1", "ITEM_T_2"], catalog.property_codes())
        self.assertEqual("First", catalog.properties[0].label)

    def test_label_alias_priority_and_code_fallback(self) -> None:
        rows = [
            {"CODE": "ITEM_M_1", "CODENAME": "", "MAT_NAME": "Mat name", "NAME": "Plain name"},
            {"CODE": "ITEM_M_2", "NAME": "Plain name"},
            {"CODE": "ITEM_M_3"},
        ]
        catalog = classify_rows(rows)
        self.assertEqual(["Mat name", "Plain name", "ITEM_M_3"], [o.label for o in catalog.materials])

    def test_lowercase_code_field_is_accepted(self) -> None:
        catalog = classify_rows([{"code": "ITEM_T_7", "CODENAME": "Hardness"}])
        self.assertEqual((Option("ITEM_T_7", "Hardness"),), catalog.properties)


class TestLoadCatalog(unittest.TestCase):
    def test_fetch_failure_uses_fallback(self) -> None:
        def _boom():
            raise PredictApiError("down", kind="connection")

        catalog, err = load_catalog(_boom)

        self.assertIsNotNone(err)
        self.assertEqual("connection", err.kind)
        self.assertTrue(catalog.is_fallback)
        self.assertEqual((), catalog.materials)
        self.assertEqual(10, len(catalog.properties))
        self.assertEqual(Option("ITEM_T_1", "Mock Property 1"), catalog.properties[0])
        self.assertEqual("Mock Property 10", catalog.properties[-1].label)

    def test_fallback_is_deterministic(self) -> None:
        self.assertEqual(fallback_catalog(), fallback_catalog())

    def test_success_returns_no_error(self) -> None:
        catalog, err = load_catalog(lambda: [{"CODE": "ITEM_T_1", "CODENAME": "P"}])
        self.assertIsNone(err)
        self.assertEqual(["ITEM_T_1"], catalog.property_codes())


if __name__ == "__main__":
    unittest.main()
