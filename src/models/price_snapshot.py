# src/models/price_snapshot.py

"""Gold price snapshot model: the single persisted record."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

KARATS: tuple[str, str] = ("gold22k", "gold24k")


def utc_now_iso() -> str:
    """Return the current UTC time as ``2026-10-19T06:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def as_price(value: Any, field_name: str) -> float:
    """Validate a JSON number, rejecting bools, NaN and infinities.

    Integers stay integers so ``6300`` is written back as ``6300``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{field_name} must be finite, got {value!r}")
    return value


def _percent(value: float) -> float:
    """Round to two decimals; whole results are written without ``.0``."""
    rounded = round(value, 2)
    return int(rounded) if rounded.is_integer() else rounded


@dataclass
class KaratPrice:
    """Current and previous per-gram price for one gold purity."""

    current: float
    previous: float
    change: float
    change_percent: float

    @classmethod
    def baseline(cls, current: float) -> "KaratPrice":
        """First observation: previous equals current, no change."""
        return cls(current=current, previous=current, change=0, change_percent=0)

    @classmethod
    def zero(cls) -> "KaratPrice":
        return cls(current=0, previous=0, change=0, change_percent=0)

    def to_dict(self) -> dict[str, float]:
        return {
            "current": self.current,
            "previous": self.previous,
            "change": self.change,
            "changePercent": self.change_percent,
        }

    @classmethod
    def from_value(cls, value: Any, karat: str) -> "KaratPrice":
        """Parse either the full record or a bare legacy number."""
        if isinstance(value, dict):
            try:
                price = cls(
                    current=as_price(value["current"], f"{karat}.current"),
                    previous=as_price(value["previous"], f"{karat}.previous"),
                    change=as_price(value["change"], f"{karat}.change"),
                    change_percent=as_price(
                        value["changePercent"], f"{karat}.changePercent"
                    ),
                )
            except KeyError as exc:
                raise ValueError(f"{karat} is missing field {exc}") from exc
        else:
            price = cls.baseline(as_price(value, karat))

        if price.current < 0 or price.previous < 0:
            raise ValueError(f"{karat} prices must be non-negative")
        return price


@dataclass(frozen=True)
class PreviousPrices:
    """The per-gram ``current`` values of the last snapshot, nothing else.

    Only ``current`` feeds the next update, so ``lastUpdated``,
    ``previous``, ``change`` and ``changePercent`` are not required and may
    hold anything (older writers left ``changePercent`` as ``null``).
    """

    gold22k: float
    gold24k: float

    @classmethod
    def from_dict(cls, data: Any) -> "PreviousPrices":
        """Pick ``current`` (or a bare number) for each karat.

        Raises:
            ValueError: If either karat has no finite, non-negative price.
        """
        if not isinstance(data, dict):
            raise ValueError("snapshot must be a JSON object")
        currents: dict[str, float] = {}
        for karat in KARATS:
            if karat not in data:
                raise ValueError(f"snapshot is missing {karat}")
            value = data[karat]
            if isinstance(value, dict):
                if "current" not in value:
                    raise ValueError(f"{karat} is missing field 'current'")
                value = value["current"]
            price = as_price(value, f"{karat}.current")
            if price < 0:
                raise ValueError(f"{karat} price must be non-negative")
            currents[karat] = price
        return cls(gold22k=currents["gold22k"], gold24k=currents["gold24k"])


def compute_karat(current: float, previous: float) -> KaratPrice:
    """Derive change and percent change from two consecutive prices.

    ``change_percent`` is rounded to two decimals and is ``0`` when the
    previous price is zero.
    """
    change = current - previous
    if previous == 0:
        change_percent: float = 0
    else:
        change_percent = _percent(change / previous * 100)
    return KaratPrice(
        current=current,
        previous=previous,
        change=change,
        change_percent=change_percent,
    )


@dataclass
class PriceSnapshot:
    """Latest 22k/24k prices plus the one prior value for each."""

    last_updated: str
    gold22k: KaratPrice
    gold24k: KaratPrice

    @classmethod
    def zero(cls, last_updated: str | None = None) -> "PriceSnapshot":
        """Zero-filled snapshot written when an update falls back."""
        return cls(
            last_updated=last_updated or utc_now_iso(),
            gold22k=KaratPrice.zero(),
            gold24k=KaratPrice.zero(),
        )

    def karat(self, name: str) -> KaratPrice:
        """Look up a karat record by its JSON key."""
        if name not in KARATS:
            raise KeyError(name)
        price: KaratPrice = getattr(self, name)
        return price

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the persisted JSON shape."""
        return {
            "lastUpdated": self.last_updated,
            "gold22k": self.gold22k.to_dict(),
            "gold24k": self.gold24k.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PriceSnapshot":
        """Parse the persisted shape (or the legacy bare-number shape).

        Raises:
            ValueError: If *data* is not a valid snapshot.
        """
        if not isinstance(data, dict):
            raise ValueError("snapshot must be a JSON object")
        last_updated = data.get("lastUpdated")
        if not isinstance(last_updated, str) or not last_updated:
            raise ValueError("snapshot is missing lastUpdated")
        for karat in KARATS:
            if karat not in data:
                raise ValueError(f"snapshot is missing {karat}")
        return cls(
            last_updated=last_updated,
            gold22k=KaratPrice.from_value(data["gold22k"], "gold22k"),
            gold24k=KaratPrice.from_value(data["gold24k"], "gold24k"),
        )
