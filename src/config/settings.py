# src/config/settings.py

"""Central configuration for the gold_rates updater and dashboard."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the gold_rates updater and dashboard."""

    # --- Generation (Gemini) ---
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_API_BASE: str = os.getenv(
        "GEMINI_API_BASE",
        "https://generativelanguage.googleapis.com/v1beta",
    )
    GENERATION_TIMEOUT: float = 30.0    # Seconds before a generation call times out
    PRICE_PROMPT: str = (
        "What are the current 22 carat and 24 carat gold prices per gram "
        "in India today in INR?\n"
        "Please provide ONLY a JSON response in this exact format with no "
        "additional text:\n"
        "{\n"
        '  "gold22k": 6248,\n'
        '  "gold24k": 6819\n'
        "}\n"
        "Just the numbers, no explanations."
    )

    # --- HTTP ---
    REQUEST_DELAY: float = 2.0          # Base seconds between retries
    REQUEST_TIMEOUT: int = 15           # Seconds before a snapshot GET times out
    MAX_RETRIES: int = 3                # Retry count on transient failures
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SNAPSHOT_PATH: Path = Path(
        os.getenv(
            "GOLD_SNAPSHOT_PATH",
            str(BASE_DIR / "public" / "gold-prices.json"),
        )
    )
    # Where the dashboard reads from: a URL if published, else the local file
    SNAPSHOT_LOCATION: str = os.getenv(
        "GOLD_SNAPSHOT_URL", str(SNAPSHOT_PATH)
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Schedule ---
    DAILY_RUN_AT: str = os.getenv("GOLD_DAILY_RUN_AT", "06:00")
    SCHEDULER_POLL_SECONDS: int = 60

    # --- Display ---
    LOCATION_LABEL: str = os.getenv(
        "GOLD_LOCATION_LABEL", "Tadepalligudem, West Godavari, AP"
    )
    CURRENCY_SYMBOL: str = "₹"
    DISPLAY_UTC_OFFSET_MINUTES: int = 330   # IST
    NOTES: list[str] = [
        "Prices are indicative and may vary by jeweler",
        "Making charges and GST are additional",
        "Prices updated automatically once daily",
        "Data fetched via Gemini AI",
    ]
