import unittest

from tools.predict_api.rows import (
    RESULT_WRAPPER_KEYS,
    extract_inserted_ids,
    first_present,
    normalize_id,
    parse_prediction_row,
    unwrap_rows,
)


class TestFirstPresent(unittest.TestCase):
    def test_skips_missing_none_and_blank(self) -> None:
        row = {"a": None, "b": "  ", "c": 0, "d": "x"}
        self.assertEqual(0, first_present(row, ("a", "b", "c", "d")))

    def test_non_mapping_yields_none(self) -> None:
        self.assertIsNone(first_present(["a"], ("a",)))


class TestUnwrapRows(unittest.TestCase):
    def test_bare_list(self) -> None:
        self.assertEqual([{"a": 1}], unwrap_rows([{"a": 1}, "junk"], RESULT_WRAPPER_KEYS))

    def test_wrapper_keys_checked_in_order(self) -> None:
        payload = {"items": [{"a": 2}], "data": [{"a": 1}]}
        self.assertEqual([{"a": 1}], unwrap_rows(payload, RESULT_WRAPPER_KEYS))

    def test_unknown_shapes_are_empty(self) -> None:
        self.assertEqual([], unwrap_rows({"rows": "nope"}, RESULT_WRAPPER_KEYS))
        self.assertEqual([], unwrap_rows(None, RESULT_WRAPPER_KEYS))
        self.assertEqual([], unwrap_rows("text", RESULT_WRAPPER_KEYS))


class TestExtractInsertedIds(unittest.TestCase):
    def test_ids_in_order(self) -> None:
        payload = {"insertedRows": [{"insertedId": 9}, {"insertedId": "10"}]}
        self.assertEqual([9, "10"], extract_inserted_ids(payload))

    def test_missing_or_malformed_list_is_empty(self) -> None:
        self.assertEqual([], extract_inserted_ids({}))
        self.assertEqual([], extract_inserted_ids({"insertedRows": {"insertedId": 1}}))
        self.assertEqual([], extract_inserted_ids([]))

    def test_entry_without_id_raises(self) -> None:
        with self.assertRaises(ValueError):
            extract_inserted_ids({"insertedRows": [{"insertedId": 1}, {}]})


class TestNormalizeId(unittest.TestCase):
    def test_equivalent_spellings_share_one_key(self) -> None:
        self.assertEqual("101", normalize_id(101))
        self.assertEqual("101", normalize_id(101.0))
        self.assertEqual("101", normalize_id(" 101 "))
        self.assertEqual("101.5", normalize_id(101.5))

    def test_parsed_row_uses_normalized_id(self) -> None:
        row = parse_prediction_row({"RECIPE_IDX": 7.0, "CODE": "X"})
        self.assertEqual("7", row.assigned_id)


class TestParsePredictionRow(unittest.TestCase):
    def test_aliases_and_defaults(self) -> None:
        row = parse_prediction_row({"ID": 5, "target": "ITEM_T_1", "Y_PRED": "2.5", "ci_low": None})
        self.assertEqual("5", row.assigned_id)
        self.assertEqual("ITEM_T_1", row.code)
        self.assertEqual(2.5, row.y_pred)
        self.assertEqual(0.0, row.ci_low)
        self.assertEqual(0.0, row.ci_high)

    def test_id_alias_priority(self) -> None:
        row = parse_prediction_row({"RECIPE_IDX": 1, "recipe_idx": 2, "id": 3, "CODE": "X"})
        self.assertEqual("1", row.assigned_id)

    def test_unparseable_number_defaults_to_zero(self) -> None:
        row = parse_prediction_row({"id": 1, "code": "X", "y_pred": "n/a"})
        self.assertEqual(0.0, row.y_pred)

    def test_row_without_id_is_dropped(self) -> None:
        self.assertIsNone(parse_prediction_row({"CODE": "X", "y_pred": 1}))


if __name__ == "__main__":
    unittest.main()
