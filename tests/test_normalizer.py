"""Tests for query normalization."""
import pytest

from tondocs.normalizer import normalize_query


class TestNormalizeQuery:
    @pytest.mark.parametrize("query,expected", [
        ("  Tolk  ", "tact"),
        ("Talk", "tact"),
        ("how to use TonConnect", "how to use ton connect"),
        ("smart-contracts on ton", "smart contracts on ton"),
        ("jeton transfer", "jetton transfer"),
        ("funk and jeton", "func and jetton"),
        ("jetton transfer", "jetton transfer"),
    ])
    def test_rewrites(self, query, expected):
        assert normalize_query(query) == expected

    def test_only_first_occurrence_replaced(self):
        assert normalize_query("tolk tolk") == "tact tolk"

    def test_empty(self):
        assert normalize_query("   ") == ""
