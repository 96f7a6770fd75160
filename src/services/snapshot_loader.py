# src/services/snapshot_loader.py

"""Dashboard-side snapshot reader (local file or published URL)."""

import json
import logging
from pathlib import Path
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import LoadError
from src.models.price_snapshot import PriceSnapshot

logger = logging.getLogger("gold_rates.loader")


def is_url(location: str) -> bool:
    """True when *location* should be fetched over HTTP."""
    return location.lower().startswith(("http://", "https://"))


class SnapshotLoader:
    """Loads the snapshot with a single read; never triggers an update."""

    def __init__(
        self,
        location: str | Path | None = None,
        timeout: float | None = None,
    ) -> None:
        self.location: str = str(
            location if location is not None else Settings.SNAPSHOT_LOCATION
        )
        self.timeout = (
            timeout if timeout is not None else Settings.REQUEST_TIMEOUT
        )

    def _read_url(self) -> Any:
        try:
            resp = curl_requests.get(
                self.location,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                impersonate=Settings.IMPERSONATE_BROWSER,
            )
        except Exception as exc:
            raise LoadError(f"Failed to fetch prices: {exc}") from exc
        if resp.status_code != 200:
            raise LoadError(
                f"Failed to fetch prices: HTTP {resp.status_code}"
            )
        try:
            return json.loads(resp.text)
        except ValueError as exc:
            raise LoadError(f"Price data is not valid JSON: {exc}") from exc

    def _read_file(self) -> Any:
        path = Path(self.location)
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as exc:
            raise LoadError(f"No price data at {path}") from exc
        except OSError as exc:
            raise LoadError(f"Failed to read {path}: {exc}") from exc
        except ValueError as exc:
            raise LoadError(f"Price data is not valid JSON: {exc}") from exc

    def load(self) -> PriceSnapshot:
        """Read and parse the snapshot.

        Raises:
            LoadError: If the read fails or the payload is not a snapshot.
        """
        try:
            data = self._read_url() if is_url(self.location) else self._read_file()
            snapshot = PriceSnapshot.from_dict(data)
        except LoadError as exc:
            logger.error("Snapshot load failed from %s: %s", self.location, exc)
            raise
        except ValueError as exc:
            logger.error("Snapshot at %s has the wrong shape: %s", self.location, exc)
            raise LoadError(f"Unexpected price data: {exc}") from exc

        logger.info(
            "Loaded snapshot from %s (updated %s)",
            self.location,
            snapshot.last_updated,
        )
        return snapshot
