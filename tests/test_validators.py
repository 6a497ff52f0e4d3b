import pytest

from secret_mcp.tools.formatting import format_units, to_base_units
from secret_mcp.tools.validators import (
    clamp_limit,
    is_valid_amount,
    is_valid_contract_address,
    is_valid_secret_address,
    is_valid_tx_hash,
    parse_height,
)

ADDRESS = "secret1k0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek"


def test_secret_address_validation():
    assert is_valid_secret_address(ADDRESS)
    assert is_valid_secret_address(f"  {ADDRESS} ")
    assert not is_valid_secret_address("secret1short")
    assert not is_valid_secret_address("cosmos1k0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek")
    # 'b' is outside the bech32 alphabet
    assert not is_valid_secret_address("secret1b0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek")
    assert not is_valid_secret_address(None)


def test_contract_address_accepts_long_form():
    assert is_valid_contract_address(ADDRESS)
    assert is_valid_contract_address(ADDRESS + "q" * 20)
    assert not is_valid_contract_address(ADDRESS + "q" * 5)


def test_tx_hash_validation():
    assert is_valid_tx_hash("ab" * 32)
    assert not is_valid_tx_hash("zz" * 32)
    assert not is_valid_tx_hash("ab" * 31)


@pytest.mark.parametrize(
    "value, expected",
    [(None, 30), ("7", 7), (0, 30), (-1, 30), (500, 100), ("x", 30)],
)
def test_clamp_limit(value, expected):
    assert clamp_limit(value, default=30, max_value=100) == expected


def test_parse_height():
    assert parse_height("12") == 12
    assert parse_height(0) is None
    assert parse_height(True) is None
    assert parse_height("abc") is None


def test_amount_validation():
    assert is_valid_amount("100")
    assert is_valid_amount(5)
    assert not is_valid_amount("1.5")
    assert not is_valid_amount(0)
    assert not is_valid_amount(True)


def test_format_units():
    assert format_units("1500000", 6) == "1.500000"
    assert format_units("1000000000000000000", 18) == "1.000000"
    assert format_units("123456789", 8, places=2) == "1.23"
    assert format_units(None, 6) == "0.000000"


def test_to_base_units():
    assert to_base_units("1.5") == 1_500_000
    assert to_base_units("0.0000019") == 1
    assert to_base_units("0") is None
    assert to_base_units("-2") is None
    assert to_base_units("abc") is None
