"""
Thin HTTP client for the Secret Network LCD (Cosmos REST) API.

All chain reads are GET requests against whitelisted LCD paths. Contract
queries are forwarded to a configurable query proxy that performs the enclave
encryption; without one, contract queries are reported as unavailable.
Errors are mapped to internal exceptions that the tool layer can turn into
safe, user-facing messages.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from secret_mcp.config import SecretConfig, default_config

logger = logging.getLogger(__name__)


class SecretApiError(Exception):
    """Base exception for Secret Network API errors."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class InvalidAddressError(SecretApiError):
    """Raised when the LCD rejects an address (bad bech32)."""


class NotFoundError(SecretApiError):
    """Raised when an account, block, transaction or contract does not exist."""


class NodeUnreachableError(SecretApiError):
    """Raised when the LCD or query proxy cannot be reached."""


class ContractQueryError(SecretApiError):
    """Raised when a contract rejects a query (bad auth, unknown query, ...)."""


class ContractQueryUnavailableError(SecretApiError):
    """Raised when no query proxy is configured for encrypted contract queries."""


def _normalize_url(url: str) -> str:
    return url.rstrip("/")


class SecretApiClient:
    """Async client for the read-only LCD surface plus proxied contract queries."""

    def __init__(
        self,
        config: SecretConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
        proxy_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None
        self._proxy_client: Optional[httpx.AsyncClient] = proxy_client
        self._owns_proxy_client = proxy_client is None
        self._code_hashes: Dict[str, str] = {}

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=_normalize_url(self.config.lcd_url), timeout=self.config.timeout
            )
            self._owns_client = True
        return self._client

    async def _get_proxy_client(self) -> httpx.AsyncClient:
        if self._proxy_client is None:
            if not self.config.query_proxy_url:
                raise ContractQueryUnavailableError(
                    "Contract queries require SECRET_QUERY_PROXY_URL to be configured."
                )
            self._proxy_client = httpx.AsyncClient(
                base_url=_normalize_url(self.config.query_proxy_url), timeout=self.config.timeout
            )
            self._owns_proxy_client = True
        return self._proxy_client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        if self._proxy_client is not None and self._owns_proxy_client:
            await self._proxy_client.aclose()
            self._proxy_client = None

    def _map_error(
        self, error_code: str | int | None, status_code: int, message: str | None = None
    ) -> SecretApiError:
        normalized = str(error_code) if error_code is not None else None
        lowered_message = (message or "").lower()

        if "bech32" in lowered_message or "invalid address" in lowered_message:
            return InvalidAddressError(
                "Invalid Secret Network address.", code=normalized, status_code=status_code
            )
        # gRPC NotFound
        if normalized == "5" or status_code == 404 or "not found" in lowered_message:
            return NotFoundError("Resource not found.", code=normalized, status_code=status_code)
        if "requested block height" in lowered_message:
            return NotFoundError("Block not found.", code=normalized, status_code=status_code)
        if "tx parse error" in lowered_message or "encoding/hex" in lowered_message:
            return SecretApiError(
                "Invalid transaction hash.", code=normalized, status_code=status_code
            )
        return SecretApiError("Secret Network API error.", code=normalized, status_code=status_code)

    def _process_response(self, response: httpx.Response, *, expect_dict: bool = True) -> Any:
        try:
            data: Any = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            code_field: Optional[str | int] = None
            message_field: Optional[str] = None
            if isinstance(data, dict):
                raw_code = data.get("code")
                if isinstance(raw_code, (str, int)):
                    code_field = raw_code
                raw_message = data.get("message")
                if isinstance(raw_message, str):
                    message_field = raw_message
            raise self._map_error(code_field, response.status_code, message=message_field)

        if data is None:
            raise SecretApiError("Unexpected response from node.", status_code=response.status_code)

        if expect_dict and not isinstance(data, dict):
            raise SecretApiError("Unexpected response from node.", status_code=response.status_code)

        return data

    async def _request(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        client = await self._get_client()
        try:
            response = await client.get(path, params=params)
        except httpx.RequestError as exc:
            logger.warning("Secret LCD unreachable for path %s", path)
            raise NodeUnreachableError("Node unreachable") from exc
        return self._process_response(response)

    async def fetch_balance(self, address: str, denom: str = "uscrt") -> Dict[str, Any]:
        """Retrieve the bank balance of ``address`` for a single denom."""
        encoded = quote(address, safe="")
        return await self._request(
            f"/cosmos/bank/v1beta1/balances/{encoded}/by_denom", params={"denom": denom}
        )

    async def fetch_account(self, address: str) -> Dict[str, Any]:
        """Retrieve base account information for an address."""
        encoded = quote(address, safe="")
        return await self._request(f"/cosmos/auth/v1beta1/accounts/{encoded}")

    async def fetch_latest_block(self) -> Dict[str, Any]:
        return await self._request("/cosmos/base/tendermint/v1beta1/blocks/latest")

    async def fetch_block(self, height: int) -> Dict[str, Any]:
        return await self._request(f"/cosmos/base/tendermint/v1beta1/blocks/{int(height)}")

    async def fetch_transaction(self, tx_hash: str) -> Dict[str, Any]:
        encoded = quote(tx_hash, safe="")
        return await self._request(f"/cosmos/tx/v1beta1/txs/{encoded}")

    async def fetch_node_info(self) -> Dict[str, Any]:
        """Retrieve node information such as network id and application version."""
        return await self._request("/cosmos/base/tendermint/v1beta1/node_info")

    async def resolve_code_hash(self, contract_address: str) -> Optional[str]:
        """
        Look up (and cache) the code hash of a contract.

        Lookup failures return None and are not cached, so a later call retries.
        """
        cached = self._code_hashes.get(contract_address)
        if cached:
            return cached
        encoded = quote(contract_address, safe="")
        try:
            data = await self._request(f"/compute/v1beta1/code_hash/by_contract_address/{encoded}")
        except SecretApiError as exc:
            logger.warning("Code hash lookup failed for %s: %s", contract_address, exc)
            return None
        code_hash = data.get("code_hash")
        if not isinstance(code_hash, str) or not code_hash:
            return None
        self._code_hashes[contract_address] = code_hash
        return code_hash

    async def query_contract(
        self,
        contract_address: str,
        query: Dict[str, Any],
        *,
        code_hash: Optional[str] = None,
    ) -> Any:
        """
        Run a (possibly authenticated) smart-contract query through the query proxy.

        When ``code_hash`` is omitted it is resolved from the LCD first.
        """
        proxy = await self._get_proxy_client()
        resolved_hash = code_hash or await self.resolve_code_hash(contract_address)
        payload = {"contract_address": contract_address, "code_hash": resolved_hash, "query": query}
        try:
            response = await proxy.post("/query", json=payload)
        except httpx.RequestError as exc:
            logger.warning("Query proxy unreachable for contract %s", contract_address)
            raise NodeUnreachableError("Query proxy unreachable") from exc

        if response.status_code >= 400:
            try:
                data = response.json()
            except ValueError:
                data = None
            message = None
            if isinstance(data, dict):
                raw_message = data.get("error") or data.get("message")
                if isinstance(raw_message, str):
                    message = raw_message
            raise ContractQueryError(
                message or "Contract query failed.", status_code=response.status_code
            )
        try:
            return response.json()
        except ValueError as exc:
            raise SecretApiError(
                "Unexpected response from query proxy.", status_code=response.status_code
            ) from exc


default_client = SecretApiClient()
