"""Tests for token order normalization."""

from lph.engine.position.token_mapping import (
    MappedAmounts,
    UnsupportedPair,
    is_pair,
    map_token_amounts,
)

BASE = "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c"
USDT = "0x55d398326f99059fF775485246999027B3197955"
OTHER = "0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82"


class TestMapTokenAmounts:
    """Tests for map_token_amounts"""

    def test_base_first(self):
        assert map_token_amounts(BASE, USDT, (1, 2), BASE, USDT) == MappedAmounts(base=1, usdt=2)

    def test_usdt_first(self):
        assert map_token_amounts(USDT, BASE, (1, 2), BASE, USDT) == MappedAmounts(base=2, usdt=1)

    def test_mixed_case_addresses(self):
        result = map_token_amounts(BASE.lower(), USDT.upper(), (5, 6), BASE, USDT)

        assert result == MappedAmounts(base=5, usdt=6)

    def test_unsupported_pair(self):
        result = map_token_amounts(OTHER, USDT, (1, 2), BASE, USDT)

        assert isinstance(result, UnsupportedPair)
        assert result.token0 == OTHER

    def test_base_equal_to_usdt_is_unsupported(self):
        assert isinstance(map_token_amounts(USDT, USDT, (1, 2), USDT, USDT), UnsupportedPair)


class TestIsPair:
    """Tests for is_pair"""

    def test_either_order(self):
        assert is_pair(BASE, USDT, BASE, USDT)
        assert is_pair(USDT, BASE, BASE, USDT)

    def test_wrong_token(self):
        assert not is_pair(BASE, OTHER, BASE, USDT)
