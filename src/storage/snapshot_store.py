# src/storage/snapshot_store.py

"""Reads and atomically replaces the persisted gold price snapshot."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.models.errors import PersistError, PreviousStateError
from src.models.price_snapshot import PreviousPrices, PriceSnapshot

logger = logging.getLogger("gold_rates.storage")


class SnapshotStore:
    """Single-writer store for ``gold-prices.json``."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = Path(path) if path is not None else Settings.SNAPSHOT_PATH
        logger.debug("SnapshotStore initialised, path=%s", self.path)

    def _load_json(self) -> Any:
        """Decode the snapshot file, or ``None`` when it does not exist.

        Raises:
            PreviousStateError: If the file exists but is not readable JSON.
        """
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError
            raise PreviousStateError(
                f"Unreadable snapshot at {self.path}: {exc}"
            ) from exc

    def read(self) -> PriceSnapshot | None:
        """Return the stored snapshot, or ``None`` if there is none yet.

        Raises:
            PreviousStateError: If the file exists but cannot be read or
                does not hold a valid snapshot.
        """
        data = self._load_json()
        if data is None:
            return None
        try:
            return PriceSnapshot.from_dict(data)
        except ValueError as exc:
            raise PreviousStateError(
                f"Invalid snapshot at {self.path}: {exc}"
            ) from exc

    def read_previous(self) -> PreviousPrices | None:
        """Return the last ``current`` prices, or ``None`` to start fresh.

        Only ``gold22k.current`` and ``gold24k.current`` are needed, so a
        partial or older record is still usable. A missing, unreadable or
        priceless file counts as no snapshot.
        """
        try:
            data = self._load_json()
            if data is None:
                return None
            return PreviousPrices.from_dict(data)
        except (PreviousStateError, ValueError) as exc:
            logger.warning("Ignoring previous snapshot: %s", exc)
            return None

    def write(self, snapshot: PriceSnapshot) -> Path:
        """Replace the snapshot file in full via write-then-rename.

        Raises:
            PersistError: If the directory, temp file or rename fails.
        """
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.path.parent),
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, ensure_ascii=False, indent=2)
                f.write("\n")
            tmp_path.replace(self.path)
        except OSError as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise PersistError(
                f"Failed to write snapshot to {self.path}: {exc}"
            ) from exc

        logger.info(
            "Saved snapshot to %s (22k=%s, 24k=%s)",
            self.path,
            snapshot.gold22k.current,
            snapshot.gold24k.current,
        )
        return self.path
