# src/ui/app.py

"""Terminal dashboard for today's gold rates."""

import asyncio
import logging

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Static

from src.config.settings import Settings
from src.models.errors import LoadError
from src.models.price_snapshot import KARATS, PriceSnapshot
from src.services.snapshot_loader import SnapshotLoader
from src.ui.view import KaratView, PriceView, render

logger = logging.getLogger("gold_rates.ui")

_ARROWS: dict[str, str] = {"up": "▲", "down": "▼"}
_CHANGE_STYLES: dict[str, str] = {"up": "bold green", "down": "bold red"}


class GoldRatesApp(App[object]):
    """Shows the persisted snapshot with a refresh / retry affordance."""

    CSS_PATH = "styles.css"
    TITLE = "Gold Rates"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
    ]

    def __init__(self, loader: SnapshotLoader | None = None) -> None:
        super().__init__()
        self.loader = loader if loader is not None else SnapshotLoader()
        self.settings = Settings()
        self.snapshot: PriceSnapshot | None = None
        self.view: PriceView | None = None
        self.error: str | None = None
        self.loading: bool = False

    def _karat_panel(self, key: str) -> Vertical:
        return Vertical(
            Static("", id=f"{key}_label", classes="karat_label"),
            Static("Per Gram", classes="dim"),
            Static("", id=f"{key}_price", classes="karat_price"),
            Static("", id=f"{key}_change"),
            Horizontal(
                Static("", id=f"{key}_10g", classes="multiple"),
                Static("", id=f"{key}_100g", classes="multiple"),
            ),
            id=f"{key}_panel",
            classes="karat_panel",
        )

    def compose(self) -> ComposeResult:
        """Build the widget tree for the dashboard."""
        yield Header()
        yield Container(
            Static("Today's Gold Rates", id="title"),
            Static(f"📍 {self.settings.LOCATION_LABEL}", id="location"),
            Horizontal(
                Static("", id="last_updated"),
                Button("Refresh", id="refresh_btn"),
                id="top_bar",
            ),
            Static("Loading gold prices...", id="status"),
            Button("Retry", variant="warning", id="retry_btn"),
            Horizontal(
                *(self._karat_panel(key) for key in KARATS),
                id="karat_panels",
            ),
            Static(
                "📌 Important Notes\n"
                + "\n".join(f"• {note}" for note in self.settings.NOTES),
                id="notes",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Hide price panels until the first load completes."""
        self.query_one("#retry_btn", Button).display = False
        self.query_one("#karat_panels", Horizontal).display = False
        self.reload()

    def reload(self) -> None:
        """Start a background load, cancelling any load in flight."""
        self.run_worker(self.load_prices(), exclusive=True, group="load")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Refresh and Retry both re-read the same snapshot."""
        if event.button.id in ("refresh_btn", "retry_btn"):
            self.reload()

    def action_refresh(self) -> None:
        self.reload()

    async def load_prices(self) -> None:
        """Load the snapshot in a thread and update the view."""
        status = self.query_one("#status", Static)
        self.loading = True
        status.display = True
        status.update("Loading gold prices...")
        self.query_one("#retry_btn", Button).display = False

        try:
            snapshot = await asyncio.to_thread(self.loader.load)
        except LoadError as exc:
            self.show_error(str(exc))
        else:
            self.show_prices(snapshot)
        finally:
            self.loading = False

    def show_error(self, message: str) -> None:
        """Switch to the explicit 'unable to load' state."""
        logger.error("Dashboard load failed: %s", message)
        self.snapshot = None
        self.view = None
        self.error = message
        self.query_one("#karat_panels", Horizontal).display = False
        self.query_one("#last_updated", Static).update("")
        self.query_one("#status", Static).update(
            f"⚠️ Unable to Load Prices\n{message}"
        )
        self.query_one("#retry_btn", Button).display = True

    def show_prices(self, snapshot: PriceSnapshot) -> None:
        """Render a freshly loaded snapshot into the panels."""
        self.snapshot = snapshot
        self.view = render(snapshot, self.settings.LOCATION_LABEL)
        self.error = None

        self.query_one("#status", Static).display = False
        self.query_one("#retry_btn", Button).display = False
        self.query_one("#last_updated", Static).update(
            f"📅 Last Updated: {self.view.last_updated}"
        )
        for karat in self.view.karats:
            self._fill_panel(karat)
        self.query_one("#karat_panels", Horizontal).display = True

    def _fill_panel(self, karat: KaratView) -> None:
        key = karat.key
        self.query_one(f"#{key}_label", Static).update(karat.label)
        self.query_one(f"#{key}_price", Static).update(karat.per_gram)
        self.query_one(f"#{key}_change", Static).update(
            Text(
                f"{_ARROWS[karat.direction]} {karat.change_text} vs yesterday",
                style=_CHANGE_STYLES[karat.direction],
            )
        )
        self.query_one(f"#{key}_10g", Static).update(
            f"10 Grams\n{karat.per_10g}"
        )
        self.query_one(f"#{key}_100g", Static).update(
            f"100 Grams\n{karat.per_100g}"
        )
