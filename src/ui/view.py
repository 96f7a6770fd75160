# src/ui/view.py

"""Pure snapshot-to-display mapping shared by the TUI and ``--show``."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from src.config.settings import Settings
from src.models.price_snapshot import KaratPrice, PriceSnapshot

KARAT_LABELS: dict[str, str] = {
    "gold22k": "22 Carat Gold",
    "gold24k": "24 Carat Gold",
}


@dataclass(frozen=True)
class KaratView:
    """Display strings for one karat panel."""

    key: str
    label: str
    per_gram: str
    per_10g: str
    per_100g: str
    direction: str  # "up" or "down"
    change_text: str


@dataclass(frozen=True)
class PriceView:
    """Everything the dashboard shows for one snapshot."""

    location: str
    last_updated: str
    karats: list[KaratView] = field(default_factory=lambda: list[KaratView]())


def group_indian(value: float) -> str:
    """Format *value* with Indian digit grouping (``12,34,567.5``).

    At most two decimals are shown and trailing zeros are dropped.
    """
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.2f}".rstrip("0").rstrip(".")
    whole, _, fraction = text.partition(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        pairs: list[str] = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        whole = ",".join(pairs + [tail])

    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def format_currency(value: float) -> str:
    return f"{Settings.CURRENCY_SYMBOL}{group_indian(value)}"


def change_direction(change: float) -> str:
    """``"up"`` for zero or positive change, ``"down"`` otherwise."""
    return "up" if change >= 0 else "down"


def format_timestamp(iso_text: str) -> str:
    """Render an ISO-8601 timestamp as ``19 Oct 2026, 11:30 AM`` local time.

    Unparsable input is returned unchanged.
    """
    try:
        parsed = datetime.fromisoformat(iso_text.replace("Z", "+00:00"))
    except ValueError:
        return iso_text
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    local = parsed.astimezone(
        timezone(timedelta(minutes=Settings.DISPLAY_UTC_OFFSET_MINUTES))
    )
    return f"{local.day} {local.strftime('%b %Y, %I:%M %p')}"


def render_karat(key: str, price: KaratPrice) -> KaratView:
    return KaratView(
        key=key,
        label=KARAT_LABELS[key],
        per_gram=format_currency(price.current),
        per_10g=format_currency(price.current * 10),
        per_100g=format_currency(price.current * 100),
        direction=change_direction(price.change),
        change_text=(
            f"{format_currency(abs(price.change))} "
            f"({group_indian(abs(price.change_percent))}%)"
        ),
    )


def render(snapshot: PriceSnapshot, location: str | None = None) -> PriceView:
    """Derive the dashboard view from a valid snapshot."""
    return PriceView(
        location=location if location is not None else Settings.LOCATION_LABEL,
        last_updated=format_timestamp(snapshot.last_updated),
        karats=[
            render_karat("gold22k", snapshot.gold22k),
            render_karat("gold24k", snapshot.gold24k),
        ],
    )
