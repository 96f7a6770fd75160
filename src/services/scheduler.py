# src/services/scheduler.py

"""Once-a-day trigger for the price updater."""

import logging
import re
import time
from collections.abc import Callable

import schedule

from src.config.settings import Settings
from src.models.errors import UpdateError
from src.services.price_updater import PriceUpdater

logger = logging.getLogger("gold_rates.scheduler")

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_run_time(at: str) -> str:
    """Return *at* if it is a valid ``HH:MM`` time, else raise ValueError."""
    if not _TIME_RE.match(at):
        raise ValueError(f"Invalid daily run time '{at}', expected HH:MM")
    return at


def run_scheduled_update(updater: PriceUpdater) -> bool:
    """Run one update from the timer; a failure is logged, not raised."""
    try:
        updater.update()
    except UpdateError as exc:
        logger.error("Scheduled update failed: %s", exc)
        return False
    return True


class DailyScheduler:
    """Runs the updater now, then every day at a fixed time."""

    def __init__(
        self,
        updater: PriceUpdater,
        at: str | None = None,
        scheduler: schedule.Scheduler | None = None,
    ) -> None:
        self.updater = updater
        self.at = validate_run_time(at or Settings.DAILY_RUN_AT)
        self.scheduler = scheduler if scheduler is not None else schedule.Scheduler()
        self.job = self.scheduler.every().day.at(self.at).do(
            run_scheduled_update, self.updater
        )
        logger.info("Daily price update scheduled at %s", self.at)

    def run_forever(
        self,
        run_now: bool = True,
        should_continue: Callable[[], bool] = lambda: True,
    ) -> None:
        """Block, polling for due jobs until *should_continue* is False."""
        if run_now:
            run_scheduled_update(self.updater)
        while should_continue():
            self.scheduler.run_pending()
            time.sleep(Settings.SCHEDULER_POLL_SECONDS)
