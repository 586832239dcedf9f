"""
Async REST client for the Backpack Exchange API.

Every call runs the same pipeline, once, with no retries:

    prepare -> maybe_sign -> dispatch -> classify

- prepare builds the unsigned request (URL, sorted query, JSON body).
- maybe_sign looks up the instruction for (method, path). Unmapped routes go
  out unsigned; mapped routes need a key pair or fail with
  NotAuthenticatedError before any I/O.
- dispatch performs exactly one HTTP exchange. Network failures become
  TransportError.
- classify turns non-2xx responses into BpxApiError (status + body text
  verbatim) and decodes 2xx bodies into the operation's result type, raising
  DecodeError on mismatch.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any

import aiohttp
from pydantic import TypeAdapter, ValidationError

from bpxclient import routes
from bpxclient.config import (
    BACKPACK_API_BASE_URL,
    BACKPACK_WS_URL,
    DEFAULT_TIMEOUT_S,
    DEFAULT_WINDOW_MS,
    ClientConfig,
)
from bpxclient.errors import (
    BpxApiError,
    DecodeError,
    InvalidRequestError,
    NotAuthenticatedError,
    TransportError,
)
from bpxclient.metrics import ClientMetrics
from bpxclient.signing import KeyPair, build_request_signee, now_millis, resolve_instruction
from bpxclient.signing.signee import dumps_json
from bpxclient.types import (
    AccountMaxBorrow,
    AccountMaxOrder,
    AccountMaxWithdrawal,
    AccountSettings,
    Asset,
    Balance,
    Blockchain,
    BorrowLendPosition,
    BpxPayload,
    CancelOpenOrdersPayload,
    CancelOrderPayload,
    Collateral,
    ConvertDustPayload,
    Deposit,
    DepositAddress,
    ExecuteOrderPayload,
    Fill,
    FillsHistoryParams,
    FundingRate,
    FuturePosition,
    Kline,
    Market,
    MarketType,
    MarkPrice,
    MaxOrderQuery,
    Order,
    OrderAdapter,
    OrderBookDepth,
    OrderBookDepthLimit,
    Quote,
    QuoteAcceptPayload,
    QuotePayload,
    RequestForQuote,
    RequestForQuoteCancelPayload,
    RequestForQuotePayload,
    RequestForQuoteRefreshPayload,
    RequestForQuoteUpdate,
    RequestTwoFactorPayload,
    RequestTwoFactorResponse,
    RequestWithdrawalPayload,
    Ticker,
    Trade,
    UpdateAccountPayload,
    User,
    VaultRedeem,
    Withdrawal,
)
from bpxclient.ws import StreamChannel, StreamSubscriber, build_subscribe_frame

logger = logging.getLogger(__name__)

USER_AGENT = "bpx-python-client"
JSON_CONTENT = "application/json; charset=utf-8"
JSON_BODY_METHODS = frozenset({"POST", "PATCH", "DELETE"})

API_KEY_HEADER = "X-API-Key"
SIGNATURE_HEADER = "X-Signature"
TIMESTAMP_HEADER = "X-Timestamp"
WINDOW_HEADER = "X-Window"

QueryValue = str | int | float | bool | Decimal | Enum | None
Query = Mapping[str, QueryValue] | Iterable[tuple[str, QueryValue]]


def _query_value(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _json_body(body: Any) -> Any:
    """Convert payload models (or lists of them) to JSON-compatible values."""
    if isinstance(body, BpxPayload):
        return body.to_payload()
    if isinstance(body, (list, tuple)):
        return [_json_body(item) for item in body]
    return body


@functools.lru_cache(maxsize=128)
def _cached_adapter(result_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(result_type)


def _type_adapter(result_type: Any) -> TypeAdapter[Any]:
    if isinstance(result_type, TypeAdapter):
        return result_type
    return _cached_adapter(result_type)


_ORDER_LIST: TypeAdapter[list[Order]] = TypeAdapter(list[Order])


@dataclass(frozen=True)
class BpxRequest:
    """
    A fully built request, before or after signing.

    Attributes:
        method: Upper-case HTTP method.
        url: Absolute URL without the query string.
        path: API path used for instruction lookup.
        query: Query pairs sorted by key.
        body: JSON-compatible body, or None.
        headers: Headers to send.
    """

    method: str
    url: str
    path: str
    query: tuple[tuple[str, str], ...] = ()
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def signed(self) -> bool:
        return SIGNATURE_HEADER in self.headers


class BpxClientBuilder:
    """Fluent construction of BpxClient. Unset values use the defaults."""

    def __init__(self) -> None:
        self._base_url: str | None = None
        self._ws_url: str | None = None
        self._secret: str | None = None
        self._headers: dict[str, str] = {}
        self._timeout_s: float | None = None
        self._window_ms: int | None = None
        self._session: aiohttp.ClientSession | None = None
        self._metrics: ClientMetrics | None = None

    def base_url(self, base_url: str) -> BpxClientBuilder:
        self._base_url = base_url
        return self

    def ws_url(self, ws_url: str) -> BpxClientBuilder:
        self._ws_url = ws_url
        return self

    def secret(self, secret: str) -> BpxClientBuilder:
        """Base64 Ed25519 seed. Without it the client is unauthenticated."""
        self._secret = secret
        return self

    def headers(self, headers: Mapping[str, str]) -> BpxClientBuilder:
        """Extra headers sent with every request."""
        self._headers.update(headers)
        return self

    def timeout(self, seconds: float) -> BpxClientBuilder:
        self._timeout_s = seconds
        return self

    def window(self, window_ms: int) -> BpxClientBuilder:
        self._window_ms = window_ms
        return self

    def session(self, session: aiohttp.ClientSession) -> BpxClientBuilder:
        """Use an existing session; the client will not close it."""
        self._session = session
        return self

    def metrics(self, metrics: ClientMetrics) -> BpxClientBuilder:
        self._metrics = metrics
        return self

    def build(self) -> BpxClient:
        """
        Build the client.

        Raises:
            ConfigError: On a malformed URL, secret, timeout or window.
        """
        config = ClientConfig(
            base_url=self._base_url or BACKPACK_API_BASE_URL,
            ws_url=self._ws_url or BACKPACK_WS_URL,
            secret=self._secret,
            headers=dict(self._headers),
            timeout_s=self._timeout_s if self._timeout_s is not None else DEFAULT_TIMEOUT_S,
            window_ms=self._window_ms if self._window_ms is not None else DEFAULT_WINDOW_MS,
        )
        return BpxClient(config, session=self._session, metrics=self._metrics)


class BpxClient:
    """
    Backpack Exchange REST and websocket client.

    Safe for concurrent use: key material is read-only after construction and
    each call computes its own timestamp and signature.

    Usage:
        async with BpxClient.builder().secret(secret).build() as client:
            balances = await client.get_balances()
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        metrics: ClientMetrics | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration (defaults to production, unauthenticated).
            session: Optional shared aiohttp session. Not closed by close().
            metrics: Optional prometheus counters.

        Raises:
            SecretDecodeError: If the secret is not valid base64.
            InvalidSecretKeyError: If the secret is not a 32-byte seed.
        """
        self._config = config or ClientConfig()
        self._key_pair = KeyPair.from_secret(self._config.secret) if self._config.secret else None
        self._base_url = self._config.base_url.rstrip("/")
        self._ws_url = self._config.ws_url
        self._window_ms = self._config.window_ms
        self._timeout = aiohttp.ClientTimeout(total=self._config.timeout_s)
        self._default_headers = {"User-Agent": USER_AGENT, **self._config.headers}
        self._metrics = metrics
        self._external_session = session
        self._session: aiohttp.ClientSession | None = None
        self._subscriptions: set[asyncio.Task[None]] = set()

    @classmethod
    def builder(cls) -> BpxClientBuilder:
        return BpxClientBuilder()

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        metrics: ClientMetrics | None = None,
    ) -> BpxClient:
        return cls(config, session=session, metrics=metrics)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def ws_url(self) -> str:
        return self._ws_url

    @property
    def verifying_key(self) -> str | None:
        """Base64 verifying key (the API key), or None when unauthenticated."""
        return self._key_pair.verifying_key_b64 if self._key_pair else None

    @property
    def is_authenticated(self) -> bool:
        return self._key_pair is not None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get the injected session, or create one on first use."""
        if self._external_session is not None:
            return self._external_session
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        """Cancel running subscriptions and close the owned HTTP session."""
        for task in list(self._subscriptions):
            task.cancel()
        if self._subscriptions:
            await asyncio.gather(*self._subscriptions, return_exceptions=True)

        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> BpxClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # === Request pipeline ===

    def prepare(
        self,
        method: str,
        path: str,
        query: Query | None = None,
        body: Any = None,
    ) -> BpxRequest:
        """
        Build an unsigned request.

        None query values are dropped; booleans become "true"/"false".
        Payload models in the body are converted with to_payload().
        """
        pairs: list[tuple[str, str]] = []
        if query:
            items = query.items() if isinstance(query, Mapping) else query
            pairs = [(k, _query_value(v)) for k, v in items if v is not None]
        pairs.sort(key=lambda kv: kv[0])

        method = method.upper()
        json_body = _json_body(body)
        headers = dict(self._default_headers)
        if json_body is not None and method in JSON_BODY_METHODS:
            headers["Content-Type"] = JSON_CONTENT

        return BpxRequest(
            method=method,
            url=f"{self._base_url}{path}",
            path=path,
            query=tuple(pairs),
            body=json_body,
            headers=headers,
        )

    def maybe_sign(self, request: BpxRequest) -> BpxRequest:
        """
        Sign the request if its route has an instruction.

        Raises:
            NotAuthenticatedError: Signing required but no key pair is held.
            InvalidRequestError: The body cannot be canonicalized.
        """
        instruction = resolve_instruction(request.method, request.path)
        if instruction is None:
            return request

        if self._key_pair is None:
            raise NotAuthenticatedError(
                f"Client is not authenticated: {instruction} requires a signed request"
            )

        timestamp = now_millis()
        signee = build_request_signee(
            instruction, request.query, request.body, timestamp, self._window_ms
        )
        logger.debug("Signing request", extra={"instruction": instruction, "signee": signee})

        headers = dict(request.headers)
        headers[API_KEY_HEADER] = self._key_pair.verifying_key_b64
        headers[SIGNATURE_HEADER] = self._key_pair.sign_b64(signee.encode("utf-8"))
        headers[TIMESTAMP_HEADER] = str(timestamp)
        headers[WINDOW_HEADER] = str(self._window_ms)
        return replace(request, headers=headers)

    async def dispatch(self, request: BpxRequest) -> tuple[int, str]:
        """
        Send the request once.

        Returns:
            (HTTP status, response body text).

        Raises:
            TransportError: On connection, TLS or timeout failures.
        """
        session = await self._get_session()
        data = dumps_json(request.body) if request.body is not None else None

        logger.debug(
            "Dispatching request",
            extra={"method": request.method, "endpoint": request.path, "signed": request.signed},
        )
        try:
            async with session.request(
                request.method,
                request.url,
                params=list(request.query) or None,
                data=data,
                headers=dict(request.headers),
                timeout=self._timeout,
            ) as response:
                text = await response.text()
                return response.status, text
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning(
                "Request failed",
                extra={"endpoint": request.path, "error": str(e) or type(e).__name__},
            )
            raise TransportError(f"{request.method} {request.path} failed: {e!r}") from e

    def classify(self, status: int, text: str, result_type: Any = None) -> Any:
        """
        Map a response to a result.

        Args:
            status: HTTP status code.
            text: Response body.
            result_type: Expected type of the decoded body; None for
                operations without a result.

        Raises:
            BpxApiError: Non-2xx status, carrying the body text verbatim.
            DecodeError: 2xx body that does not match result_type.
        """
        if not 200 <= status < 300:
            raise BpxApiError(status, text)

        if result_type is None or (result_type is Any and not text.strip()):
            return None

        try:
            return _type_adapter(result_type).validate_json(text)
        except ValidationError as e:
            raise DecodeError(f"Failed to decode response: {e}", body=text) from e

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Query | None = None,
        body: Any = None,
        result_type: Any = None,
    ) -> Any:
        """
        Run the full pipeline for one operation.

        Raises:
            NotAuthenticatedError, InvalidRequestError: Before any I/O.
            TransportError: The request could not be sent or answered.
            BpxApiError: The server rejected the request.
            DecodeError: The server accepted it but the body is unreadable.
        """
        prepared = self.maybe_sign(self.prepare(method, path, query, body))

        try:
            status, text = await self.dispatch(prepared)
        except TransportError:
            self._record(prepared, "transport_error")
            raise

        try:
            result = self.classify(status, text, result_type)
        except BpxApiError:
            self._record(prepared, "api_error")
            logger.warning(
                "API error",
                extra={"status": status, "endpoint": path, "response": text[:200]},
            )
            raise
        except DecodeError:
            self._record(prepared, "decode_error")
            logger.error("Failed to decode response", extra={"status": status, "endpoint": path})
            raise

        self._record(prepared, "ok")
        return result

    def _record(self, request: BpxRequest, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_rest(signed=request.signed, outcome=outcome)

    # === Raw verbs ===

    async def get(self, path: str, query: Query | None = None) -> Any:
        return await self.request("GET", path, query=query, result_type=Any)

    async def post(self, path: str, body: Any = None, query: Query | None = None) -> Any:
        return await self.request("POST", path, query=query, body=body, result_type=Any)

    async def patch(self, path: str, body: Any = None, query: Query | None = None) -> Any:
        return await self.request("PATCH", path, query=query, body=body, result_type=Any)

    async def delete(self, path: str, body: Any = None, query: Query | None = None) -> Any:
        return await self.request("DELETE", path, query=query, body=body, result_type=Any)

    # === Markets (public) ===

    async def get_assets(self) -> list[Asset]:
        return await self.request("GET", routes.API_ASSETS, result_type=list[Asset])

    async def get_markets(self, market_types: Iterable[MarketType] | None = None) -> list[Market]:
        """Markets, optionally filtered to the given market types."""
        query = [("marketType", mt) for mt in market_types or ()]
        return await self.request("GET", routes.API_MARKETS, query=query, result_type=list[Market])

    async def get_all_mark_prices(self) -> list[MarkPrice]:
        return await self.request("GET", routes.API_MARK_PRICES, result_type=list[MarkPrice])

    async def get_ticker(self, symbol: str) -> Ticker:
        return await self.request(
            "GET", routes.API_TICKER, query={"symbol": symbol}, result_type=Ticker
        )

    async def get_tickers(self) -> list[Ticker]:
        return await self.request("GET", routes.API_TICKERS, result_type=list[Ticker])

    async def get_order_book_depth(
        self,
        symbol: str,
        limit: OrderBookDepthLimit | int | None = None,
    ) -> OrderBookDepth:
        """
        Order book snapshot.

        Raises:
            ValueError: If limit is an unsupported depth.
        """
        if isinstance(limit, int):
            limit = OrderBookDepthLimit.from_int(limit)
        return await self.request(
            "GET",
            routes.API_DEPTH,
            query={"symbol": symbol, "limit": limit},
            result_type=OrderBookDepth,
        )

    async def get_funding_interval_rates(self, symbol: str) -> list[FundingRate]:
        return await self.request(
            "GET", routes.API_FUNDING, query={"symbol": symbol}, result_type=list[FundingRate]
        )

    async def get_k_lines(
        self,
        symbol: str,
        interval: str,
        start_time: int,
        end_time: int | None = None,
    ) -> list[Kline]:
        """
        Candles for a symbol.

        Args:
            symbol: Market symbol, e.g. "SOL_USDC".
            interval: Kline interval, e.g. "1m", "1h", "1d".
            start_time: Unix seconds.
            end_time: Unix seconds, defaults to now on the server.
        """
        return await self.request(
            "GET",
            routes.API_KLINES,
            query={
                "symbol": symbol,
                "interval": interval,
                "startTime": start_time,
                "endTime": end_time,
            },
            result_type=list[Kline],
        )

    # === Trades (public) ===

    async def get_recent_trades(self, symbol: str, limit: int | None = None) -> list[Trade]:
        return await self.request(
            "GET",
            routes.API_TRADES,
            query={"symbol": symbol, "limit": limit},
            result_type=list[Trade],
        )

    async def get_historical_trades(
        self,
        symbol: str,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Trade]:
        return await self.request(
            "GET",
            routes.API_TRADES_HISTORY,
            query={"symbol": symbol, "limit": limit, "offset": offset},
            result_type=list[Trade],
        )

    # === Capital ===

    async def get_balances(self) -> dict[str, Balance]:
        """Balances keyed by asset symbol."""
        return await self.request("GET", routes.API_CAPITAL, result_type=dict[str, Balance])

    async def get_deposits(
        self, limit: int | None = None, offset: int | None = None
    ) -> list[Deposit]:
        return await self.request(
            "GET",
            routes.API_DEPOSITS,
            query={"limit": limit, "offset": offset},
            result_type=list[Deposit],
        )

    async def get_deposit_address(self, blockchain: Blockchain) -> DepositAddress:
        return await self.request(
            "GET",
            routes.API_DEPOSIT_ADDRESS,
            query={"blockchain": blockchain},
            result_type=DepositAddress,
        )

    async def get_withdrawals(
        self, limit: int | None = None, offset: int | None = None
    ) -> list[Withdrawal]:
        return await self.request(
            "GET",
            routes.API_WITHDRAWALS,
            query={"limit": limit, "offset": offset},
            result_type=list[Withdrawal],
        )

    async def request_withdrawal(self, payload: RequestWithdrawalPayload) -> Withdrawal:
        return await self.request(
            "POST", routes.API_WITHDRAWALS, body=payload, result_type=Withdrawal
        )

    async def get_collateral(self) -> Collateral:
        return await self.request("GET", routes.API_COLLATERAL, result_type=Collateral)

    # === Account ===

    async def get_account(self) -> AccountSettings:
        return await self.request("GET", routes.API_ACCOUNT, result_type=AccountSettings)

    async def get_account_max_borrow(self, symbol: str) -> AccountMaxBorrow:
        return await self.request(
            "GET",
            routes.API_ACCOUNT_MAX_BORROW,
            query={"symbol": symbol},
            result_type=AccountMaxBorrow,
        )

    async def get_account_max_order(self, query: MaxOrderQuery) -> AccountMaxOrder:
        return await self.request(
            "GET",
            routes.API_ACCOUNT_MAX_ORDER,
            query=query.to_payload(),
            result_type=AccountMaxOrder,
        )

    async def get_account_max_withdrawal(
        self,
        symbol: str,
        auto_borrow: bool | None = None,
        auto_lend_redeem: bool | None = None,
    ) -> AccountMaxWithdrawal:
        return await self.request(
            "GET",
            routes.API_ACCOUNT_MAX_WITHDRAWAL,
            query={
                "symbol": symbol,
                "autoBorrow": auto_borrow,
                "autoLendRedeem": auto_lend_redeem,
            },
            result_type=AccountMaxWithdrawal,
        )

    async def update_account(self, payload: UpdateAccountPayload) -> None:
        await self.request("PATCH", routes.API_ACCOUNT, body=payload)

    async def convert_dust_balance(self, payload: ConvertDustPayload) -> None:
        await self.request("POST", routes.API_ACCOUNT_CONVERT_DUST, body=payload)

    # === Orders ===

    async def get_open_order(
        self,
        symbol: str,
        order_id: str | None = None,
        client_id: int | None = None,
    ) -> Order:
        """
        Look up one open order by exchange id or client id.

        order_id wins when both are given.

        Raises:
            InvalidRequestError: If neither id is given (nothing is sent).
        """
        if order_id is not None:
            query: dict[str, QueryValue] = {"symbol": symbol, "orderId": order_id}
        elif client_id is not None:
            query = {"symbol": symbol, "clientId": client_id}
        else:
            raise InvalidRequestError("either order_id or client_id is required")

        return await self.request("GET", routes.API_ORDER, query=query, result_type=OrderAdapter)

    async def execute_order(self, payload: ExecuteOrderPayload) -> Order:
        return await self.request("POST", routes.API_ORDER, body=payload, result_type=OrderAdapter)

    async def execute_orders(self, payloads: Sequence[ExecuteOrderPayload]) -> list[Order]:
        """
        Place several orders in one request.

        The body is a JSON array; its signee is the per-order signees joined
        with "&" in list order.

        Raises:
            InvalidRequestError: If payloads is empty.
        """
        if not payloads:
            raise InvalidRequestError("at least one order is required")
        return await self.request(
            "POST", routes.API_ORDERS, body=list(payloads), result_type=_ORDER_LIST
        )

    async def cancel_order(
        self,
        symbol: str,
        order_id: str | None = None,
        client_id: int | None = None,
    ) -> Order:
        payload = CancelOrderPayload(symbol=symbol, order_id=order_id, client_id=client_id)
        return await self.request(
            "DELETE", routes.API_ORDER, body=payload, result_type=OrderAdapter
        )

    async def get_open_orders(self, symbol: str | None = None) -> list[Order]:
        return await self.request(
            "GET", routes.API_ORDERS, query={"symbol": symbol}, result_type=_ORDER_LIST
        )

    async def cancel_open_orders(self, payload: CancelOpenOrdersPayload) -> list[Order]:
        return await self.request(
            "DELETE", routes.API_ORDERS, body=payload, result_type=_ORDER_LIST
        )

    # === Request for quote ===

    async def submit_rfq(self, payload: RequestForQuotePayload) -> RequestForQuote:
        return await self.request(
            "POST", routes.API_RFQ, body=payload, result_type=RequestForQuote
        )

    async def cancel_rfq(self, payload: RequestForQuoteCancelPayload) -> RequestForQuote:
        return await self.request(
            "POST", routes.API_RFQ_CANCEL, body=payload, result_type=RequestForQuote
        )

    async def refresh_rfq(self, payload: RequestForQuoteRefreshPayload) -> RequestForQuote:
        return await self.request(
            "POST", routes.API_RFQ_REFRESH, body=payload, result_type=RequestForQuote
        )

    async def accept_quote(self, payload: QuoteAcceptPayload) -> RequestForQuote:
        return await self.request(
            "POST", routes.API_RFQ_ACCEPT, body=payload, result_type=RequestForQuote
        )

    async def submit_quote(self, payload: QuotePayload) -> Quote:
        return await self.request("POST", routes.API_RFQ_QUOTE, body=payload, result_type=Quote)

    # === Positions, history, user, vault ===

    async def get_open_future_positions(self) -> list[FuturePosition]:
        return await self.request(
            "GET", routes.API_FUTURES_POSITION, result_type=list[FuturePosition]
        )

    async def get_borrow_lend_positions(self) -> list[BorrowLendPosition]:
        return await self.request(
            "GET", routes.API_BORROW_LEND_POSITIONS, result_type=list[BorrowLendPosition]
        )

    async def get_historical_fills(self, params: FillsHistoryParams | None = None) -> list[Fill]:
        query = params.to_payload() if params is not None else None
        return await self.request(
            "GET", routes.API_FILLS_HISTORY, query=query, result_type=list[Fill]
        )

    async def get_user(self) -> User:
        return await self.request("GET", routes.API_USER, result_type=User)

    async def request_two_factor(
        self, payload: RequestTwoFactorPayload
    ) -> RequestTwoFactorResponse:
        return await self.request(
            "POST", routes.API_USER_2FA, body=payload, result_type=RequestTwoFactorResponse
        )

    async def get_vault_pending_redeems(self, vault_id: int) -> list[VaultRedeem]:
        return await self.request(
            "GET",
            routes.API_VAULT_PENDING_REDEEMS,
            query={"vaultId": vault_id},
            result_type=list[VaultRedeem],
        )

    # === Websocket streams ===

    def stream_subscriber(self) -> StreamSubscriber:
        """A subscriber bound to this client's stream URL, keys and window."""
        return StreamSubscriber(
            self._ws_url,
            self._key_pair,
            window_ms=self._window_ms,
            session=self._external_session,
            metrics=self._metrics,
        )

    async def subscribe(
        self,
        stream: str,
        channel: StreamChannel[Any],
        payload_type: Any = Any,
    ) -> None:
        """Subscribe to one stream and relay payloads until the connection ends."""
        await self.subscribe_multiple([stream], channel, payload_type)

    async def subscribe_multiple(
        self,
        streams: Sequence[str],
        channel: StreamChannel[Any],
        payload_type: Any = Any,
    ) -> None:
        """Subscribe to several streams over one connection."""
        await self.stream_subscriber().subscribe(streams, channel, payload_type)

    async def subscribe_to_rfqs(self, channel: StreamChannel[Any]) -> None:
        """Relay RFQ lifecycle events from ``account.rfqUpdate``."""
        await self.subscribe(routes.RFQ_UPDATE_STREAM, channel, RequestForQuoteUpdate)

    def start_subscription(
        self,
        streams: Sequence[str],
        channel: StreamChannel[Any],
        payload_type: Any = Any,
        *,
        close_channel: bool = True,
    ) -> asyncio.Task[None]:
        """
        Run a subscription on its own task.

        Authentication is checked before the task starts. When the loop ends
        the channel is closed (unless close_channel=False) so consumers
        iterating it stop.

        Raises:
            NotAuthenticatedError: Private stream requested without keys.
        """
        streams = list(streams)
        build_subscribe_frame(streams, self._key_pair, self._window_ms)

        async def run() -> None:
            try:
                await self.subscribe_multiple(streams, channel, payload_type)
            finally:
                if close_channel:
                    channel.close()

        task = asyncio.create_task(run())
        self._subscriptions.add(task)
        task.add_done_callback(self._subscriptions.discard)
        return task
