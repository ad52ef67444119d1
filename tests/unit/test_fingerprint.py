"""Unit tests for scenario content fingerprints."""
import re

import pytest

from apocaliptyx.dedup.fingerprint import compute_content_hash, same_content

pytestmark = [pytest.mark.unit, pytest.mark.similarity]

HEX_RE = re.compile(r"^[0-9a-f]{8,}$")


class TestComputeContentHash:
    """Hashes must match the ones the web client already stored."""

    @pytest.mark.parametrize(
        "title, description, expected",
        [
            ("", "", "0000007c"),
            ("AB ", "", "0001787b"),
            ("🚀", "", "0346aef9"),
            ("The quick brown fox jumps over the lazy dog", "", "08840697"),
            ("Bitcoin reaches 100k", "", "49040bdf"),
            ("Bitcoin reaches 100k in 2025", "Price prediction", "29f0c96b"),
            ("Bitcoin reaches $100,000 in 2025", "Price prediction", "73eb7714"),
            ("¿Llegará el Niño?", "Predicción climática", "792747e1"),
        ],
    )
    def test_known_values(self, title, description, expected):
        assert compute_content_hash(title, description) == expected

    def test_case_and_whitespace_only_differences_collide(self):
        base = compute_content_hash("Bitcoin reaches 100k", "")
        assert compute_content_hash("Bitcoin Reaches 100K", "") == base
        assert compute_content_hash("  Bitcoin reaches 100k  ", "  ") == base

    def test_punctuation_differences_do_not_collide(self):
        assert compute_content_hash("Bitcoin reaches 100k in 2025", "Price prediction") != compute_content_hash(
            "Bitcoin reaches $100,000 in 2025", "Price prediction"
        )

    def test_missing_description_is_empty(self):
        assert compute_content_hash("Bitcoin reaches 100k", None) == compute_content_hash("Bitcoin reaches 100k", "")
        assert compute_content_hash("Bitcoin reaches 100k") == compute_content_hash("Bitcoin reaches 100k", "")

    def test_deterministic(self):
        assert compute_content_hash("Will it rain?", "Forecast") == compute_content_hash("Will it rain?", "Forecast")

    @pytest.mark.parametrize(
        "title",
        ["", "x", "Bitcoin reaches 100k", "ñ" * 500, "🚀" * 50, "a much longer title " * 40],
    )
    def test_format(self, title):
        assert HEX_RE.match(compute_content_hash(title, "desc"))


class TestSameContent:
    def test_trivial_differences_match(self):
        assert same_content("Bitcoin Reaches 100K ", "Desc", "bitcoin reaches 100k", " desc")

    def test_punctuation_differs(self):
        assert not same_content("Bitcoin reaches 100k!", "", "Bitcoin reaches 100k", "")
