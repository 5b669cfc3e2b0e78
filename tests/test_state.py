from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from launchgate.common.state import (
    KEY_SAVED_DESTINATION,
    STATE_FILE_NAME,
    GateStateStore,
    JsonFileStore,
)
from launchgate.common.types import GateState, NativeApp, WebSession


class JsonFileStoreTests(unittest.TestCase):
    def test_roundtrip_across_instances(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            store = JsonFileStore(root)
            store.set("gate.resolved", True)
            store.set("profile.favorite_recipe_ids", ["a", "b"])

            reloaded = JsonFileStore(root)
            self.assertTrue(reloaded.get("gate.resolved"))
            self.assertEqual(reloaded.get("profile.favorite_recipe_ids"), ["a", "b"])
            self.assertEqual(reloaded.get("missing", "fallback"), "fallback")

    def test_accepts_bom_prefixed_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / STATE_FILE_NAME).write_bytes(b'\xef\xbb\xbf{"gate.resolved": true}')
            self.assertTrue(JsonFileStore(root).get("gate.resolved"))

    def test_unreadable_file_starts_empty(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / STATE_FILE_NAME).write_text("{not json", encoding="utf-8")
            with self.assertLogs("launchgate.common.state", level="WARNING"):
                store = JsonFileStore(root)
            self.assertIsNone(store.get("gate.resolved"))

    def test_batched_update(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            store = JsonFileStore(root)
            store.set("a", 1)
            store.update({"b": 2, "c": 3}, removed=("a", "never-set"))

            reloaded = JsonFileStore(root)
            self.assertIsNone(reloaded.get("a"))
            self.assertEqual(reloaded.get("b"), 2)
            self.assertEqual(reloaded.get("c"), 3)

    def test_delete_and_clear(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            store = JsonFileStore(root)
            store.set("a", 1)
            store.set("b", 2)
            store.delete("a")
            store.delete("never-set")
            self.assertIsNone(JsonFileStore(root).get("a"))
            self.assertEqual(JsonFileStore(root).get("b"), 2)

            store.clear()
            self.assertFalse((root / STATE_FILE_NAME).exists())
            self.assertIsNone(store.get("b"))


class GateStateStoreTests(unittest.TestCase):
    def test_empty_state_on_first_launch(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            state = GateStateStore(JsonFileStore(Path(td))).load()
            self.assertEqual(state, GateState())

    def test_web_decision_persists_destination(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            GateStateStore(JsonFileStore(root)).save(WebSession("https://example.com/x"))

            state = GateStateStore(JsonFileStore(root)).load()
            self.assertTrue(state.resolved)
            self.assertTrue(state.use_web_session)
            self.assertEqual(state.saved_destination_url, "https://example.com/x")

    def test_native_decision_is_last_write(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = GateStateStore(JsonFileStore(Path(td)))
            store.save(WebSession("https://example.com/x"))
            store.save(NativeApp())
            store.save(NativeApp())
            self.assertEqual(store.load(), GateState(resolved=True, use_web_session=False))

    def test_each_decision_is_one_write(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            storage = JsonFileStore(Path(td))
            store = GateStateStore(storage)
            for decision in (WebSession("https://example.com/x"), NativeApp()):
                with self.subTest(decision=decision):
                    with patch.object(storage, "_write", wraps=storage._write) as write:
                        store.save(decision)
                    self.assertEqual(write.call_count, 1)

    def test_update_destination(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            storage = JsonFileStore(Path(td))
            store = GateStateStore(storage)
            store.save(WebSession("https://example.com/x"))
            store.update_destination("https://example.com/y")
            self.assertEqual(store.saved_destination(), "https://example.com/y")
            self.assertEqual(storage.get(KEY_SAVED_DESTINATION), "https://example.com/y")

    def test_clear_removes_everything(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            storage = JsonFileStore(root)
            storage.set("profile.onboarding_completed", True)
            store = GateStateStore(storage)
            store.save(WebSession("https://example.com/x"))

            store.clear()
            self.assertEqual(store.load(), GateState())
            self.assertIsNone(JsonFileStore(root).get("profile.onboarding_completed"))


if __name__ == "__main__":
    unittest.main()
