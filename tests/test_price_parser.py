# tests/test_price_parser.py

"""Tests for scraping prices out of generated text."""

import unittest

from src.filters.price_parser import (
    GeneratedPrices,
    extract_json_block,
    parse_prices,
)
from src.models.errors import ParseError


class TestExtractJsonBlock(unittest.TestCase):
    """First non-greedy ``{...}`` match."""

    def test_surrounding_prose_is_ignored(self) -> None:
        text = 'Here are the rates: {"gold22k": 6300, "gold24k": 6900} thanks!'
        self.assertEqual(
            extract_json_block(text), '{"gold22k": 6300, "gold24k": 6900}'
        )

    def test_first_block_wins(self) -> None:
        text = '{"gold22k": 1, "gold24k": 2} and {"gold22k": 3, "gold24k": 4}'
        self.assertEqual(extract_json_block(text), '{"gold22k": 1, "gold24k": 2}')

    def test_spans_newlines(self) -> None:
        text = '```json\n{\n  "gold22k": 6248,\n  "gold24k": 6819\n}\n```'
        self.assertTrue(extract_json_block(text).startswith("{\n"))

    def test_no_block_raises(self) -> None:
        with self.assertRaises(ParseError):
            extract_json_block("Sorry, I cannot provide live prices.")

    def test_empty_text_raises(self) -> None:
        with self.assertRaises(ParseError):
            extract_json_block("")


class TestParsePrices(unittest.TestCase):
    """Decoding and validation of the scraped block."""

    def test_prose_wrapped_reply(self) -> None:
        prices = parse_prices(
            'Here are the rates: {"gold22k": 6300, "gold24k": 6900} thanks!'
        )
        self.assertEqual(prices, GeneratedPrices(gold22k=6300.0, gold24k=6900.0))

    def test_integer_prices_stay_integers(self) -> None:
        prices = parse_prices('{"gold22k": 6300, "gold24k": 6850.5}')
        self.assertIs(type(prices.gold22k), int)
        self.assertIs(type(prices.gold24k), float)

    def test_markdown_fenced_reply(self) -> None:
        prices = parse_prices(
            '```json\n{\n  "gold22k": 6248.5,\n  "gold24k": 6819\n}\n```'
        )
        self.assertEqual(prices.gold22k, 6248.5)
        self.assertEqual(prices.gold24k, 6819.0)

    def test_invalid_json_raises(self) -> None:
        with self.assertRaises(ParseError):
            parse_prices("{gold22k: 6300, gold24k: 6900}")

    def test_missing_field_raises(self) -> None:
        with self.assertRaises(ParseError):
            parse_prices('{"gold22k": 6300}')

    def test_string_price_raises(self) -> None:
        with self.assertRaises(ParseError):
            parse_prices('{"gold22k": "6300", "gold24k": 6900}')

    def test_bool_price_raises(self) -> None:
        with self.assertRaises(ParseError):
            parse_prices('{"gold22k": true, "gold24k": 6900}')

    def test_negative_price_raises(self) -> None:
        with self.assertRaises(ParseError):
            parse_prices('{"gold22k": -5, "gold24k": 6900}')

    def test_nan_price_raises(self) -> None:
        with self.assertRaises(ParseError):
            parse_prices('{"gold22k": NaN, "gold24k": 6900}')

    def test_nested_object_truncated_by_first_close_brace(self) -> None:
        """Non-greedy match stops at the first '}', leaving invalid JSON."""
        with self.assertRaises(ParseError):
            parse_prices('{"rates": {"gold22k": 1}, "gold24k": 2}')


if __name__ == "__main__":
    unittest.main()
