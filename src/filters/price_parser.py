# src/filters/price_parser.py

"""Extract ``{gold22k, gold24k}`` prices from free-form model output.

The generation service is asked for bare JSON but routinely wraps it in
prose or Markdown fences. The reply is treated as untrusted text: the first
brace-delimited block is scraped out, decoded, and then every field is
checked before anything downstream sees it.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from src.models.errors import ParseError

logger = logging.getLogger("gold_rates.parser")

# Non-greedy, first occurrence, may span lines
_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*?\}")


@dataclass(frozen=True)
class GeneratedPrices:
    """Per-gram prices as reported by the generation service."""

    gold22k: float
    gold24k: float


def extract_json_block(text: str) -> str:
    """Return the first ``{...}`` substring of *text*.

    Raises:
        ParseError: If *text* contains no brace-delimited block.
    """
    match = _JSON_BLOCK_RE.search(text or "")
    if match is None:
        raise ParseError("Could not find a JSON object in the generated text")
    return match.group(0)


def _price_field(payload: dict[str, Any], key: str) -> float:
    if key not in payload:
        raise ParseError(f"Generated JSON is missing '{key}'")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"'{key}' is not a number: {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ParseError(f"'{key}' is not a valid price: {value!r}")
    return value


def parse_prices(text: str) -> GeneratedPrices:
    """Scrape and validate the 22k/24k prices from a generated reply.

    Raises:
        ParseError: If no block is found, the block is not a JSON object,
            or either price is missing, non-numeric or negative.
    """
    block = extract_json_block(text)
    try:
        payload: Any = json.loads(block)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Generated JSON is invalid: {exc}") from exc

    if not isinstance(payload, dict):
        raise ParseError("Generated JSON is not an object")

    prices = GeneratedPrices(
        gold22k=_price_field(payload, "gold22k"),
        gold24k=_price_field(payload, "gold24k"),
    )
    logger.debug(
        "Parsed generated prices: 22k=%s 24k=%s",
        prices.gold22k,
        prices.gold24k,
    )
    return prices
