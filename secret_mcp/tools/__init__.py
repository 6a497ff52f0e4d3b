"""LLM-facing tool implementations."""

from .chain import (
    get_account,
    get_block,
    get_network_status,
    get_scrt_balance,
    get_transaction,
    prepare_send_tokens,
    query_contract,
)
from .tokens import list_known_tokens, query_token_balance, query_token_info
from .nfts import query_nft_info, query_nft_ownership
from .wallet import (
    connect_wallet,
    disconnect_wallet,
    get_transaction_status,
    get_wallet_balance,
    get_wallet_info,
    get_wallet_status,
)
from . import validators

__all__ = [
    "get_scrt_balance",
    "get_block",
    "get_account",
    "get_transaction",
    "query_contract",
    "get_network_status",
    "prepare_send_tokens",
    "query_token_balance",
    "query_token_info",
    "list_known_tokens",
    "query_nft_ownership",
    "query_nft_info",
    "connect_wallet",
    "get_wallet_balance",
    "get_wallet_info",
    "disconnect_wallet",
    "get_wallet_status",
    "get_transaction_status",
    "validators",
]
