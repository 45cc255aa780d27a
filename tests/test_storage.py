"""
Unit tests for persistence of the application state.

Storage contract:
- the preference flag defaults to True when missing / invalid
- the snapshot is merged over the defaults, invalid data -> defaults
- disabling persistence removes the snapshot but keeps the flag
"""

import json
import tempfile
import unittest
from pathlib import Path

from gpacalc import config
from gpacalc.model import AppState, Module, SimpleMethod
from gpacalc.storage import (
    JsonFileStore,
    MemoryStore,
    clear_all,
    default_state,
    load_preference,
    load_state,
    save_state,
)


def _sample_state() -> AppState:
    return AppState(
        language="fr",
        theme="dark",
        calculation_method_id="custom-40-0-60",
        custom_calculation_methods=[SimpleMethod("custom-40-0-60", "60% / 40%", 0.6, 0.4)],
        required_credits_for_debt=45,
        modules=[
            Module(id="a", name="Analysis", coeff=4, credits=6, grade=14.4, td_grade=12, exam_grade=16),
            Module(id="b", name="Algebra", coeff=2, credits=4, grade=9.5),
        ],
        s1_avg_text="11",
        s1_credits_text="30",
    )


class TestPreference(unittest.TestCase):
    def test_missing_preference_defaults_to_true(self) -> None:
        self.assertTrue(load_preference(MemoryStore()))

    def test_unparsable_preference_defaults_to_true(self) -> None:
        self.assertTrue(load_preference(MemoryStore({config.SAVE_PREF_KEY: "{oops"})))
        self.assertTrue(load_preference(MemoryStore({config.SAVE_PREF_KEY: '"no"'})))

    def test_stored_false(self) -> None:
        self.assertFalse(load_preference(MemoryStore({config.SAVE_PREF_KEY: "false"})))


class TestLoadSave(unittest.TestCase):
    def test_roundtrip(self) -> None:
        store = MemoryStore()
        state = _sample_state()
        save_state(store, state)
        self.assertEqual(load_state(store, load_preference(store)), state)

    def test_disabled_preference_ignores_snapshot(self) -> None:
        store = MemoryStore()
        save_state(store, _sample_state())
        loaded = load_state(store, pref_enabled=False)
        self.assertEqual(loaded, default_state(save_settings_enabled=False))

    def test_saving_with_persistence_off_removes_snapshot(self) -> None:
        store = MemoryStore()
        state = _sample_state()
        save_state(store, state)
        state.save_settings_enabled = False
        save_state(store, state)

        self.assertIsNone(store.get(config.STATE_KEY))
        self.assertEqual(store.get(config.SAVE_PREF_KEY), "false")
        self.assertFalse(load_state(store, load_preference(store)).save_settings_enabled)

    def test_missing_snapshot_gives_defaults(self) -> None:
        self.assertEqual(load_state(MemoryStore(), True), default_state())

    def test_corrupted_snapshot_gives_defaults(self) -> None:
        for raw in ("not json", "[1, 2]", json.dumps({"modules": [{"id": "x"}]})):
            store = MemoryStore({config.STATE_KEY: raw})
            self.assertEqual(load_state(store, True), default_state(), raw)

    def test_infinite_number_gives_defaults(self) -> None:
        for raw in ('{"requiredCreditsForDebt": Infinity}', '{"requiredCreditsForDebt": 1e999}'):
            store = MemoryStore({config.STATE_KEY: raw})
            self.assertEqual(load_state(store, True), default_state(), raw)

    def test_old_snapshot_is_merged_over_defaults(self) -> None:
        old = {
            "language": "en",
            "modules": [{"id": "a", "name": "Physics", "coeff": 2, "credits": 5, "grade": 11}],
            "saveSettingsEnabled": False,
        }
        state = load_state(MemoryStore({config.STATE_KEY: json.dumps(old)}), True)

        self.assertEqual(state.language, "en")
        self.assertEqual(state.theme, "automatic")
        self.assertEqual(state.required_credits_for_debt, 30)
        self.assertTrue(state.save_settings_enabled)
        self.assertEqual(state.modules[0].grade, 11.0)
        self.assertFalse(state.modules[0].has_components)

    def test_clear_all(self) -> None:
        store = MemoryStore()
        save_state(store, _sample_state())
        clear_all(store)
        self.assertEqual(store.data, {})


class TestJsonFileStore(unittest.TestCase):
    def test_missing_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = JsonFileStore(Path(d) / "missing.json")
            self.assertIsNone(store.get("anything"))

    def test_file_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "store.json"
            save_state(JsonFileStore(p), _sample_state())

            reopened = JsonFileStore(p)
            self.assertEqual(load_state(reopened, load_preference(reopened)), _sample_state())

            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertIn(config.STATE_KEY, data)
            self.assertEqual(data[config.SAVE_PREF_KEY], "true")

    def test_corrupted_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "store.json"
            p.write_text("{broken", encoding="utf-8")
            store = JsonFileStore(p)
            self.assertIsNone(store.get(config.STATE_KEY))
            self.assertEqual(load_state(store, load_preference(store)), default_state())

    def test_remove_and_clear(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = JsonFileStore(Path(d) / "store.json")
            store.set("a", "1")
            store.set("b", "2")
            store.remove("a")
            self.assertIsNone(store.get("a"))
            self.assertEqual(store.get("b"), "2")
            store.clear()
            self.assertIsNone(store.get("b"))


if __name__ == "__main__":
    unittest.main()
