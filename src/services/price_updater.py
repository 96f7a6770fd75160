# src/services/price_updater.py

"""Daily price update: generate, parse, diff against the last snapshot, save."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from src.clients.gemini_client import TextGenerator
from src.config.settings import Settings
from src.filters.price_parser import GeneratedPrices, parse_prices
from src.models.errors import GenerationError, ParseError
from src.models.price_snapshot import (
    PreviousPrices,
    PriceSnapshot,
    compute_karat,
    utc_now_iso,
)
from src.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("gold_rates.updater")


class FailurePolicy(Enum):
    """What an update run does when generation or parsing fails."""

    PROPAGATE = "propagate"
    FALLBACK_ZERO = "fallback_zero"


@dataclass
class UpdateOutcome:
    """Result of one update run."""

    snapshot: PriceSnapshot
    used_fallback: bool = False
    error: str = ""


def build_snapshot(
    prices: GeneratedPrices,
    previous: PreviousPrices | None,
    last_updated: str,
) -> PriceSnapshot:
    """Combine freshly generated prices with the prior snapshot.

    Without a prior snapshot each karat's previous value is its current
    value, so the first run reports no change.
    """
    if previous is None:
        previous = PreviousPrices(
            gold22k=prices.gold22k, gold24k=prices.gold24k
        )

    return PriceSnapshot(
        last_updated=last_updated,
        gold22k=compute_karat(prices.gold22k, previous.gold22k),
        gold24k=compute_karat(prices.gold24k, previous.gold24k),
    )


class PriceUpdater:
    """Runs one price update against a generator and a snapshot store.

    The failure policy is fixed per instance: ``PROPAGATE`` raises
    :class:`GenerationError` / :class:`ParseError` to the caller,
    ``FALLBACK_ZERO`` writes a zero-valued snapshot instead. A failed
    write always raises :class:`PersistError`.
    """

    def __init__(
        self,
        generator: TextGenerator,
        store: SnapshotStore | None = None,
        on_failure: FailurePolicy = FailurePolicy.PROPAGATE,
        prompt: str | None = None,
        timeout: float | None = None,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self.generator = generator
        self.store = store if store is not None else SnapshotStore()
        self.on_failure = on_failure
        self.prompt = prompt or Settings.PRICE_PROMPT
        self.timeout = (
            timeout if timeout is not None else Settings.GENERATION_TIMEOUT
        )
        self._clock = clock

    def _fetch_prices(self) -> GeneratedPrices:
        text = self.generator.generate(self.prompt, timeout=self.timeout)
        return parse_prices(text)

    def update_with_outcome(self) -> UpdateOutcome:
        """Run the update and report whether the fallback was used."""
        try:
            prices = self._fetch_prices()
        except (GenerationError, ParseError) as exc:
            if self.on_failure is FailurePolicy.PROPAGATE:
                logger.error("Price update failed: %s", exc)
                raise
            logger.error(
                "Price update failed, writing zero fallback: %s", exc
            )
            fallback = PriceSnapshot.zero(self._clock())
            self.store.write(fallback)
            return UpdateOutcome(
                snapshot=fallback, used_fallback=True, error=str(exc)
            )

        previous = self.store.read_previous()
        if previous is None:
            logger.info("No previous snapshot, using current prices as baseline")

        snapshot = build_snapshot(prices, previous, self._clock())
        self.store.write(snapshot)
        logger.info(
            "Gold prices updated: 22k=%s (%+.2f%%), 24k=%s (%+.2f%%)",
            snapshot.gold22k.current,
            snapshot.gold22k.change_percent,
            snapshot.gold24k.current,
            snapshot.gold24k.change_percent,
        )
        return UpdateOutcome(snapshot=snapshot)

    def update(self) -> PriceSnapshot:
        """Run one update and return the snapshot that was written."""
        return self.update_with_outcome().snapshot
