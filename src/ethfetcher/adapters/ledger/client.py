"""JSON-RPC client for an Ethereum node."""

from __future__ import annotations

import itertools
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from ethfetcher.adapters.http_resilience import ResilientClient
from ethfetcher.domain.errors import RemoteUnavailable

from .schema import JSONRPC_VERSION, ReceiptPayload, RpcResponse, TransactionPayload
from .translator import translate_receipt, translate_transaction

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from ethfetcher.config.http_resilience import ResilienceConfig
    from ethfetcher.config.ledger import LedgerConfig
    from ethfetcher.domain.ports.ledger import LedgerClientFactory, RawReceipt, RawTransaction

log = getLogger(__name__)

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class JsonRpcLedgerClient:
    """Ledger client speaking ``eth_getTransactionByHash``/``eth_getTransactionReceipt``.

    Opens its HTTP connection pool on ``__aenter__`` and closes it on
    ``__aexit__``; lookups outside the context raise ``RuntimeError``.
    """

    def __init__(
        self,
        config: LedgerConfig,
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or _default_client_factory
        self._client: ResilientClient | None = None
        self._request_ids = itertools.count(1)

    async def __aenter__(self) -> JsonRpcLedgerClient:
        if self._client is not None:
            raise RuntimeError("Ledger client is already open")
        self._client = self._client_factory(self._config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
        self._client = None

    async def get_transaction_by_hash(self, transaction_hash: str) -> RawTransaction | None:
        result = await self._call("eth_getTransactionByHash", transaction_hash)
        if result is None:
            return None
        try:
            payload = TransactionPayload.model_validate(result)
        except ValidationError as exc:
            raise RemoteUnavailable(
                f"Malformed transaction payload for {transaction_hash}",
                transaction_hash=transaction_hash,
            ) from exc
        return translate_transaction(payload)

    async def get_transaction_receipt(self, transaction_hash: str) -> RawReceipt | None:
        result = await self._call("eth_getTransactionReceipt", transaction_hash)
        if result is None:
            return None
        try:
            payload = ReceiptPayload.model_validate(result)
        except ValidationError as exc:
            raise RemoteUnavailable(
                f"Malformed receipt payload for {transaction_hash}",
                transaction_hash=transaction_hash,
            ) from exc
        return translate_receipt(payload)

    async def _call(self, method: str, transaction_hash: str) -> object | None:
        if self._client is None:
            raise RuntimeError("Ledger client used outside of 'async with'")

        request = {
            "jsonrpc": JSONRPC_VERSION,
            "id": next(self._request_ids),
            "method": method,
            "params": [transaction_hash],
        }
        try:
            response = await self._client.post(self._config.rpc_url, json=request)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteUnavailable(
                f"{method} failed for {transaction_hash}: {exc}",
                transaction_hash=transaction_hash,
            ) from exc

        try:
            envelope = RpcResponse.model_validate(response.json())
        except ValueError as exc:
            raise RemoteUnavailable(
                f"{method} returned an unreadable response for {transaction_hash}",
                transaction_hash=transaction_hash,
            ) from exc

        if envelope.error is not None:
            log.error(f"Ledger RPC error {envelope.error.code}: {envelope.error.message}")
            raise RemoteUnavailable(
                f"{method} failed for {transaction_hash}: {envelope.error.message}",
                transaction_hash=transaction_hash,
            )
        return envelope.result


def ledger_client_factory(
    config: LedgerConfig,
    *,
    client_factory: ClientFactory | None = None,
) -> LedgerClientFactory:
    """Return a factory producing a fresh ``JsonRpcLedgerClient`` per resolve call."""

    def factory() -> JsonRpcLedgerClient:
        return JsonRpcLedgerClient(config, client_factory=client_factory)

    return factory


if TYPE_CHECKING:
    from ethfetcher.domain.ports.ledger import LedgerSession

    _client_check: LedgerSession = JsonRpcLedgerClient(config=None)  # type: ignore[arg-type]
