import unittest

import pandas as pd

from grid_schema import FREE_GRID_SCHEMA, PROJECT_SCHEMA
from record_store import RecordStore, as_text


class RecordStoreTests(unittest.TestCase):
    def test_seeds_from_schema_when_no_records_given(self):
        store = RecordStore(PROJECT_SCHEMA)
        self.assertEqual(len(store), 5)
        self.assertEqual(store.value_at(1, "priority"), "High")
        self.assertEqual([r["id"] for r in store.records()], ["1", "2", "3", "4", "5"])

    def test_empty_records_give_empty_store_with_all_columns(self):
        store = RecordStore(PROJECT_SCHEMA, [])
        self.assertEqual(len(store), 0)
        self.assertEqual(list(store.df.columns), list(PROJECT_SCHEMA.fields))

    def test_append_assigns_count_plus_one(self):
        store = RecordStore(PROJECT_SCHEMA, [])
        self.assertEqual(store.append({"job_request": "A"}), 0)
        self.assertEqual(store.append({"job_request": "B", "id": "77"}), 1)
        self.assertEqual(store.value_at(0, "id"), "1")
        self.assertEqual(store.value_at(1, "id"), "2")
        self.assertEqual(store.value_at(1, "job_request"), "B")
        self.assertEqual(store.value_at(1, "status"), "")

    def test_update_existing_row_preserves_other_fields(self):
        store = RecordStore(PROJECT_SCHEMA)
        before = store.record(2)
        self.assertEqual(store.update_field(2, "status", "Complete"), 2)
        after = store.record(2)
        self.assertEqual(after["status"], "Complete")
        for field in PROJECT_SCHEMA.fields:
            if field != "status":
                self.assertEqual(after[field], before[field])
        self.assertEqual(len(store), 5)

    def test_update_past_end_appends_exactly_one_sparse_record(self):
        store = RecordStore(PROJECT_SCHEMA)
        pos = store.update_field(len(store) + 7, "assigned", "Nia")
        self.assertEqual(pos, 5)
        self.assertEqual(len(store), 6)
        record = store.record(5)
        self.assertEqual(record["assigned"], "Nia")
        self.assertEqual(record["id"], "6")
        others = [v for f, v in record.items() if f not in ("assigned", "id")]
        self.assertTrue(all(v == "" for v in others))

    def test_free_grid_pads_to_keep_position(self):
        store = RecordStore(FREE_GRID_SCHEMA)
        self.assertEqual(len(store), 0)
        pos = store.update_field(3, "C", "x")
        self.assertEqual(pos, 3)
        self.assertEqual(len(store), 4)
        self.assertEqual(store.value_at(3, "C"), "x")
        self.assertEqual(store.value_at(0, "C"), "")

    def test_unknown_field_raises_key_error(self):
        store = RecordStore(PROJECT_SCHEMA)
        with self.assertRaises(KeyError):
            store.update_field(0, "nope", "x")

    def test_aliases_and_unknown_keys_on_construction(self):
        store = RecordStore(
            PROJECT_SCHEMA,
            [{"jobRequest": "Alias", "estValue": 12, "bogus": "dropped"}],
        )
        record = store.record(0)
        self.assertEqual(record["job_request"], "Alias")
        self.assertEqual(record["est_value"], "12")
        self.assertNotIn("bogus", record)

    def test_replace_swaps_contents(self):
        store = RecordStore(PROJECT_SCHEMA)
        store.replace([{"id": "9", "job_request": "Only"}])
        self.assertEqual(len(store), 1)
        self.assertEqual(store.value_at(0, "id"), "9")

    def test_out_of_range_read_is_empty(self):
        store = RecordStore(PROJECT_SCHEMA)
        self.assertEqual(store.value_at(99, "id"), "")
        self.assertEqual(store.value_at(-1, "id"), "")


def test_as_text_handles_missing_values():
    assert as_text(None) == ""
    assert as_text(float("nan")) == ""
    assert as_text(pd.NA) == ""
    assert as_text(3) == "3"
    assert as_text("x") == "x"


def test_snapshot_is_independent():
    store = RecordStore(PROJECT_SCHEMA)
    snap = store.snapshot()
    store.update_field(0, "status", "Blocked")
    assert snap.iloc[0]["status"] == "In-progress"
