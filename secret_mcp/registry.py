"""
Known SNIP-20/25 tokens and SNIP-721 collections on Secret Network mainnet.

Addresses and code hashes follow the official Secret token contract list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

SNIP25_CODE_HASH = "638a3e1d50175fbcb8373cf801565283e3eb23d88a9b7b7f99fcc5eb1e6b561e"

TOKEN_CATEGORIES = ("native", "axelar", "ibc", "dex", "other")


@dataclass(frozen=True, slots=True)
class TokenInfo:
    name: str
    symbol: str
    address: str
    code_hash: str
    decimals: int
    type: str
    aliases: Tuple[str, ...]
    category: str


@dataclass(frozen=True, slots=True)
class NFTInfo:
    name: str
    symbol: str
    address: str
    code_hash: Optional[str]
    type: str
    aliases: Tuple[str, ...]


def _token(
    name: str,
    symbol: str,
    address: str,
    decimals: int,
    aliases: Tuple[str, ...],
    category: str,
    *,
    code_hash: str = SNIP25_CODE_HASH,
    token_type: str = "SNIP-25",
) -> TokenInfo:
    return TokenInfo(name, symbol, address, code_hash, decimals, token_type, aliases, category)


TOKENS: Dict[str, TokenInfo] = {
    "sSCRT": _token(
        "Secret Secret",
        "sSCRT",
        "secret1k0jntykt7e4g3y88ltc60czgjuqdy4c9e8fzek",
        6,
        ("sscrt", "secret scrt", "wrapped scrt"),
        "native",
        code_hash="af74387e276be8874f07bec3a87023ee49b0e7ebe08178c49d0a49c3c98ed60e",
        token_type="SNIP-20",
    ),
    "SILK": _token(
        "Silk Stablecoin",
        "SILK",
        "secret1fl449muk5yq8dlad7a22nje4p5d2pnsgymhjfd",
        6,
        ("silk", "silk stable", "silk stablecoin"),
        "native",
    ),
    "SHD": _token(
        "Shade Protocol",
        "SHD",
        "secret153wu605vvp934xhd4k9dtd640zsep5jkesstdm",
        8,
        ("shd", "shade", "shade token"),
        "native",
    ),
    "saWETH": _token(
        "Secret Axelar WETH",
        "saWETH",
        "secret139qfh3nmuzfgwsx2npnmnjl4hrvj3xq5rmq8a0",
        18,
        ("saweth", "weth", "wrapped eth", "axelar weth", "secret weth", "ethereum"),
        "axelar",
    ),
    "saUSDC": _token(
        "Secret Axelar USDC",
        "saUSDC",
        "secret1vkq022x4q8t8kx9de3r84u669l65xnwf2lg3e6",
        6,
        ("sausdc", "usdc", "axelar usdc", "secret usdc"),
        "axelar",
    ),
    "saUSDT": _token(
        "Secret Axelar USDT",
        "saUSDT",
        "secret1wk5j2cntwg2fgklf0uta3tlkvt87alfj7dzqyr",
        6,
        ("sausdt", "usdt", "tether", "axelar usdt", "secret usdt"),
        "axelar",
    ),
    "saWBTC": _token(
        "Secret Axelar WBTC",
        "saWBTC",
        "secret1g7jfnxmxkjgqdts9wlmn238mrzxz5r92zwqv4a",
        8,
        ("sawbtc", "wbtc", "wrapped btc", "bitcoin", "axelar wbtc", "secret wbtc"),
        "axelar",
    ),
    "saDAI": _token(
        "Secret Axelar DAI",
        "saDAI",
        "secret1vnjck36ld45apf8u4fedxd5zy7f5l92y3w5qwq",
        18,
        ("sadai", "dai", "axelar dai", "secret dai"),
        "axelar",
    ),
    "sATOM": _token(
        "Secret ATOM",
        "sATOM",
        "secret19e75l25r6sa6nhdf4lggjmgpw0vmpfvsw5cnpe",
        6,
        ("satom", "atom", "cosmos", "secret atom"),
        "ibc",
    ),
    "sOSMO": _token(
        "Secret OSMO",
        "sOSMO",
        "secret1zwwealwm0pcl9cul4nt6f38dsy6vzplw8lp3qg",
        6,
        ("sosmo", "osmo", "osmosis", "secret osmo"),
        "ibc",
    ),
    "sIST": _token(
        "Secret IST",
        "sIST",
        "secret1xmqsk8tnge0atzy4e079h0l2wrgz6splcq0a24",
        6,
        ("sist", "ist", "inter stable", "secret ist"),
        "ibc",
    ),
    "sSTRD": _token(
        "Secret STRD",
        "sSTRD",
        "secret1mqg86m7khunwljmnxlmgwhyqgvrp5ts0kmr8l0",
        6,
        ("sstrd", "strd", "stride", "secret stride"),
        "ibc",
    ),
    "AMBER": _token(
        "Amber",
        "AMBER",
        "secret1s09x2xvfd2lp2skgzm29w2xtena7s8fq98v852",
        6,
        ("amber", "secret swap"),
        "dex",
        code_hash="5a085bd8ed89de92b35134ddd12505a602c7759ea25fb5c089ba03c8535b3042",
        token_type="SNIP-20",
    ),
    "ALTER": _token(
        "Alter",
        "ALTER",
        "secret1uknu66lctqpwap76d0nqxhvnmj8c5prpnyvy7x",
        6,
        ("alter", "secret alter"),
        "native",
    ),
}

NFTS: Dict[str, NFTInfo] = {
    "jack_robbins": NFTInfo(
        "Jack Robbins Collection",
        "JRC",
        "secret10xgnqk9rfggdemk9qlfsvw4lkc4ph2sjhr7eav",
        None,
        "SNIP-721",
        ("jack robbins", "jrc", "jack robbins nft", "jack robbins collection"),
    ),
    "anons": NFTInfo(
        "Anons NFT",
        "ANONS",
        "secret1wn5z803xj5p77dd05c0lcmyea9rn89a0vxsndz",
        None,
        "SNIP-721",
        ("anons", "anons nft", "secret anons"),
    ),
    "secret_badgers": NFTInfo(
        "Secret Badgers",
        "BADGER",
        "secret1pfmm8umukdqehuw2390m5dm8ejy3cul8aztwte",
        None,
        "SNIP-721",
        ("badgers", "secret badgers", "badger nft"),
    ),
}


def find_token(query: str) -> Optional[TokenInfo]:
    """
    Look up a token by symbol, name, or alias.

    Each entry is checked in registry order: exact symbol (case-insensitive),
    then name substring, then exact alias. The first entry that matches wins.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return None
    for token in TOKENS.values():
        if token.symbol.lower() == needle or needle in token.name.lower() or needle in token.aliases:
            return token
    return None


def find_nft(query: str) -> Optional[NFTInfo]:
    """Look up an NFT collection the same way as find_token."""
    needle = (query or "").strip().lower()
    if not needle:
        return None
    for nft in NFTS.values():
        if nft.symbol.lower() == needle or needle in nft.name.lower() or needle in nft.aliases:
            return nft
    return None


def tokens_by_category(category: str) -> List[TokenInfo]:
    return [token for token in TOKENS.values() if token.category == category]


def list_token_symbols() -> List[str]:
    return [token.symbol for token in TOKENS.values()]


def list_nft_collections() -> List[str]:
    return [nft.name for nft in NFTS.values()]
