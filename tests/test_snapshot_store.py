# tests/test_snapshot_store.py

"""Tests for the SnapshotStore storage module."""

import json
import tempfile
import unittest
from pathlib import Path
from typing import Any
from unittest.mock import patch

from src.models.errors import PersistError, PreviousStateError
from src.models.price_snapshot import PreviousPrices, PriceSnapshot, compute_karat
from src.storage.snapshot_store import SnapshotStore


class TestSnapshotStore(unittest.TestCase):
    """Read / write behaviour against a temp directory."""

    def setUp(self) -> None:
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.path = self.tmp_dir / "public" / "gold-prices.json"
        self.store = SnapshotStore(self.path)

    def _snapshot(self) -> PriceSnapshot:
        return PriceSnapshot(
            last_updated="2026-10-19T06:00:00.000Z",
            gold22k=compute_karat(6300.0, 6248.0),
            gold24k=compute_karat(6850.0, 6819.0),
        )

    def test_read_missing_returns_none(self) -> None:
        self.assertIsNone(self.store.read())

    def test_write_creates_parent_dir(self) -> None:
        path = self.store.write(self._snapshot())
        self.assertEqual(path, self.path)
        self.assertTrue(self.path.exists())

    def test_write_then_read(self) -> None:
        snapshot = self._snapshot()
        self.store.write(snapshot)
        self.assertEqual(self.store.read(), snapshot)

    def test_written_json_shape(self) -> None:
        self.store.write(self._snapshot())
        with open(self.path, encoding="utf-8") as f:
            data: dict[str, Any] = json.load(f)
        self.assertEqual(data["lastUpdated"], "2026-10-19T06:00:00.000Z")
        self.assertEqual(data["gold22k"]["previous"], 6248.0)
        self.assertEqual(data["gold24k"]["change"], 31.0)

    def test_write_replaces_whole_file(self) -> None:
        """Stale keys from a previous document do not survive."""
        self.path.parent.mkdir(parents=True)
        self.path.write_text(
            json.dumps({"lastUpdated": "old", "gold22k": 1, "gold24k": 2, "extra": 1}),
            encoding="utf-8",
        )
        self.store.write(self._snapshot())
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertNotIn("extra", data)

    def test_write_leaves_no_temp_files(self) -> None:
        self.store.write(self._snapshot())
        self.store.write(self._snapshot())
        self.assertEqual(
            [p.name for p in self.path.parent.iterdir()], ["gold-prices.json"]
        )

    def test_read_corrupt_raises_previous_state_error(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(PreviousStateError):
            self.store.read()

    def test_read_wrong_shape_raises_previous_state_error(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text('{"hello": "world"}', encoding="utf-8")
        with self.assertRaises(PreviousStateError):
            self.store.read()

    def test_read_previous_absorbs_corruption(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("garbage", encoding="utf-8")
        self.assertIsNone(self.store.read_previous())

    def test_read_previous_accepts_legacy_shape(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(
            '{"lastUpdated": "2026-10-18T06:00:00Z", "gold22k": 6248, "gold24k": 6819}',
            encoding="utf-8",
        )
        self.assertEqual(
            self.store.read_previous(), PreviousPrices(gold22k=6248, gold24k=6819)
        )

    def test_read_previous_needs_only_current(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(
            '{"gold22k": {"current": 6248}, "gold24k": {"current": 6819}}',
            encoding="utf-8",
        )
        self.assertEqual(
            self.store.read_previous(), PreviousPrices(gold22k=6248, gold24k=6819)
        )

    def test_read_previous_tolerates_null_change_percent(self) -> None:
        self.path.parent.mkdir(parents=True)
        record = {"current": 6248, "previous": 0, "change": 6248, "changePercent": None}
        self.path.write_text(
            json.dumps(
                {
                    "lastUpdated": "2026-10-18T06:00:00.000Z",
                    "gold22k": record,
                    "gold24k": dict(record, current=6819),
                }
            ),
            encoding="utf-8",
        )
        previous = self.store.read_previous()
        assert previous is not None
        self.assertEqual(previous.gold22k, 6248)
        self.assertEqual(previous.gold24k, 6819)

    def test_read_previous_rejects_missing_or_negative_current(self) -> None:
        self.path.parent.mkdir(parents=True)
        for data in (
            {"gold22k": {"previous": 6248}, "gold24k": {"current": 6819}},
            {"gold22k": {"current": -5}, "gold24k": {"current": 6819}},
        ):
            with self.subTest(data=data):
                self.path.write_text(json.dumps(data), encoding="utf-8")
                self.assertIsNone(self.store.read_previous())

    def test_read_stays_strict_for_partial_records(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(
            '{"gold22k": {"current": 6248}, "gold24k": {"current": 6819}}',
            encoding="utf-8",
        )
        with self.assertRaises(PreviousStateError):
            self.store.read()

    def test_write_failure_raises_persist_error(self) -> None:
        """An OSError during rename surfaces as PersistError."""
        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with self.assertRaises(PersistError):
                self.store.write(self._snapshot())
        self.assertFalse(self.path.exists())
        self.assertEqual(list(self.path.parent.iterdir()), [])

    def test_write_into_file_path_raises_persist_error(self) -> None:
        """A parent that is a regular file cannot hold the snapshot."""
        blocker = self.tmp_dir / "blocker"
        blocker.write_text("x", encoding="utf-8")
        store = SnapshotStore(blocker / "gold-prices.json")
        with self.assertRaises(PersistError):
            store.write(self._snapshot())

    def test_default_path_from_settings(self) -> None:
        with patch("src.storage.snapshot_store.Settings") as mock_settings:
            mock_settings.SNAPSHOT_PATH = self.path
            self.assertEqual(SnapshotStore().path, self.path)


if __name__ == "__main__":
    unittest.main()
