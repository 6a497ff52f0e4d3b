"""Composable query builders for Secret Network contracts."""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, TypeVar

from secret_mcp.queries.auth import AuthenticatedQuery, AuthMethod, QueryObject
from secret_mcp.queries.errors import MissingFieldError

logger = logging.getLogger(__name__)

BuilderT = TypeVar("BuilderT", bound="QueryBuilder")


class fluent:
    """
    Setter usable on an instance or directly on the class.

    ``AllowanceQuery.between(a, b)`` creates a new builder and applies the
    setter; ``builder.between(a, b)`` applies it to an existing builder.
    """

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func
        functools.update_wrapper(self, func)

    def __get__(self, obj: Any, objtype: Optional[type] = None) -> Callable[..., Any]:
        if obj is None:
            obj = objtype()
        return functools.partial(self.func, obj)


class QueryBuilder(ABC):
    """Builds a base query and applies an optional auth method to it."""

    def __init__(self) -> None:
        self.auth_method: Optional[AuthMethod] = None

    @classmethod
    def create(cls: type[BuilderT]) -> BuilderT:
        return cls()

    def with_auth(self: BuilderT, auth: AuthMethod) -> BuilderT:
        self.auth_method = auth
        return self

    def build(self) -> AuthenticatedQuery:
        """
        Build the query ready to send to a contract.

        Required fields are checked here; a fresh object is produced on every
        call.
        """
        base_query = self.build_query()
        if self.auth_method is None:
            return base_query
        logger.debug(
            "building %s query with %s auth",
            self.get_query_type(),
            self.auth_method.get_type(),
            extra={"query_type": self.get_query_type(), "auth": self.auth_method.get_type()},
        )
        return self.auth_method.wrap(base_query)

    @abstractmethod
    def build_query(self) -> QueryObject:
        """Return the unauthenticated query body."""

    @abstractmethod
    def get_query_type(self) -> str:
        """Short label used in logs and metrics."""


class SimpleQueryBuilder(QueryBuilder):
    """Queries that take no parameters (token info, config, ...)."""


class AddressQueryBuilder(QueryBuilder):
    """Queries scoped to a single address."""

    def __init__(self) -> None:
        super().__init__()
        self.address: Optional[str] = None

    @fluent
    def for_address(self: BuilderT, address: str) -> BuilderT:
        self.address = address
        return self

    def validate_address(self) -> None:
        if not self.address:
            raise MissingFieldError(f"Address is required for {self.get_query_type()} query")
