"""SNIP-20 / SNIP-25 token query builders."""

from __future__ import annotations

from typing import Optional

from secret_mcp.queries.auth import QueryObject
from secret_mcp.queries.base import AddressQueryBuilder, QueryBuilder, SimpleQueryBuilder, fluent
from secret_mcp.queries.errors import MissingFieldError


class BalanceQuery(QueryBuilder):
    """
    Token balance query.

    The body is empty: with a permit the contract derives the address from the
    signature, and ViewingKeyAuth fills in address and key itself.
    """

    def build_query(self) -> QueryObject:
        return {"balance": {}}

    def get_query_type(self) -> str:
        return "token_balance"


class LegacyBalanceQuery(AddressQueryBuilder):
    """Balance query with an explicit address, for plain viewing-key callers."""

    def build_query(self) -> QueryObject:
        self.validate_address()
        return {"balance": {"address": self.address}}

    def get_query_type(self) -> str:
        return "legacy_token_balance"


class TokenInfoQuery(SimpleQueryBuilder):
    def build_query(self) -> QueryObject:
        return {"token_info": {}}

    def get_query_type(self) -> str:
        return "token_info"


class TokenConfigQuery(SimpleQueryBuilder):
    def build_query(self) -> QueryObject:
        return {"token_config": {}}

    def get_query_type(self) -> str:
        return "token_config"


class ExchangeRateQuery(SimpleQueryBuilder):
    """Exchange rate of wrapped tokens."""

    def build_query(self) -> QueryObject:
        return {"exchange_rate": {}}

    def get_query_type(self) -> str:
        return "exchange_rate"


class MintersQuery(SimpleQueryBuilder):
    """SNIP-25 minter list."""

    def build_query(self) -> QueryObject:
        return {"minters": {}}

    def get_query_type(self) -> str:
        return "minters"


class AllowanceQuery(QueryBuilder):
    def __init__(self) -> None:
        super().__init__()
        self.owner: Optional[str] = None
        self.spender: Optional[str] = None

    @fluent
    def for_owner(self, owner: str) -> "AllowanceQuery":
        self.owner = owner
        return self

    @fluent
    def for_spender(self, spender: str) -> "AllowanceQuery":
        self.spender = spender
        return self

    @fluent
    def between(self, owner: str, spender: str) -> "AllowanceQuery":
        self.owner = owner
        self.spender = spender
        return self

    def build_query(self) -> QueryObject:
        if not self.owner:
            raise MissingFieldError("Owner address is required for allowance query")
        if not self.spender:
            raise MissingFieldError("Spender address is required for allowance query")
        return {"allowance": {"owner": self.owner, "spender": self.spender}}

    def get_query_type(self) -> str:
        return "token_allowance"
