import unittest

from pipeline.selection import PropertySelection
from recipe_predict.domain import Option
from recipe_predict.domain.option import filter_options

PROPS = [Option(f"ITEM_T_{i}", f"Property {i}") for i in range(1, 9)]


class TestPropertySelection(unittest.TestCase):
    def test_initial_selection_is_first_six_in_catalog_order(self) -> None:
        sel = PropertySelection.initial(PROPS)
        self.assertEqual(tuple(f"ITEM_T_{i}" for i in range(1, 7)), sel.codes)

    def test_initial_selection_with_short_catalog(self) -> None:
        sel = PropertySelection.initial(PROPS[:2])
        self.assertEqual(("ITEM_T_1", "ITEM_T_2"), sel.codes)

    def test_confirm_uses_catalog_order_and_drops_unknown(self) -> None:
        sel = PropertySelection(PROPS)
        out = sel.confirm(["ITEM_T_5", "NOPE", "ITEM_T_2", "ITEM_T_5"])
        self.assertEqual(("ITEM_T_2", "ITEM_T_5"), out)
        self.assertEqual(["Property 2", "Property 5"], sel.labels())

    def test_placeholder_result_has_zeroes_for_selection(self) -> None:
        sel = PropertySelection(PROPS, ["ITEM_T_3", "ITEM_T_1"])
        (result,) = sel.placeholder_results()

        self.assertTrue(result.checked)
        self.assertEqual(("Property 1", "Property 3"), result.property_keys)
        self.assertEqual((0.0, 0.0), result.values)
        self.assertEqual((0.0, 0.0), result.ci_low)
        self.assertEqual((0.0, 0.0), result.ci_high)
        self.assertIsNone(result.case_id)

    def test_toggle_all_selects_then_clears_visible(self) -> None:
        sel = PropertySelection(PROPS, ["ITEM_T_1"])
        visible = ["ITEM_T_2", "ITEM_T_3"]

        selected = sel.toggle_all(visible)
        self.assertEqual(("ITEM_T_1", "ITEM_T_2", "ITEM_T_3"), selected)
        # toggle_all only proposes; nothing is stored yet
        self.assertEqual(("ITEM_T_1",), sel.codes)

        sel.confirm(selected)
        self.assertEqual(("ITEM_T_1",), sel.toggle_all(visible))


class TestFilterOptions(unittest.TestCase):
    def test_matches_label_or_code_case_insensitive(self) -> None:
        opts = [Option("ITEM_T_1", "Tensile Strength"), Option("ITEM_T_2", "Viscosity")]
        self.assertEqual([opts[0]], filter_options(opts, "tensile"))
        self.assertEqual([opts[1]], filter_options(opts, "item_t_2"))
        self.assertEqual(opts, filter_options(opts, "   "))
        self.assertEqual([], filter_options(opts, "zzz"))


if __name__ == "__main__":
    unittest.main()
