"""Binance USDT-M perpetual futures REST client.

Covers what the hedge needs from the exchange:
- position risk (signed position size, mark price, unrealized PnL)
- order book top (best bid/ask for limit pricing)
- limit order placement (open short / reduce-only close)
- funding rate history (public)

Signed requests follow the fapi scheme: ``timestamp`` and ``recvWindow`` are
appended, the urlencoded query is signed with HMAC-SHA256 and the hex digest
is sent as ``signature``. Retries are left to the caller.
"""

import hashlib
import hmac
import logging
import os
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable
from urllib.parse import urlencode

import requests
from dotenv import load_dotenv

from lph.data.models import BookTicker, FundingRate, FuturesHolding
from lph.data.providers.base import (
    FuturesPositionSource,
    PositionNotFoundError,
    ProviderError,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://fapi.binance.com"
DEFAULT_RECV_WINDOW = 5000


class BinanceAPIError(ProviderError):
    """Binance returned an error status or an unparseable payload."""

    def __init__(self, message: str, status_code: int | None = None, code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


@dataclass
class BinanceConfig:
    """Binance API credentials and endpoint."""

    api_key: str = ""
    api_secret: str = ""
    base_url: str = BASE_URL
    timeout: int = 10
    recv_window: int = DEFAULT_RECV_WINDOW

    @classmethod
    def from_env(cls) -> "BinanceConfig":
        """Load credentials from environment variables (.env supported)."""
        load_dotenv()
        return cls(
            api_key=os.getenv("BINANCE_API_KEY", "").strip(),
            api_secret=os.getenv("BINANCE_API_SECRET", "").strip(),
            base_url=os.getenv("BINANCE_BASE_URL", BASE_URL).rstrip("/"),
            timeout=int(os.getenv("BINANCE_TIMEOUT", "10")),
        )


def _to_decimal(payload: dict[str, Any], key: str) -> Decimal:
    """Parse a numeric string field of an API payload."""
    try:
        return Decimal(str(payload[key]))
    except (KeyError, InvalidOperation) as e:
        raise BinanceAPIError(f"Invalid or missing field {key!r} in payload: {payload}") from e


class BinancePerpsClient(FuturesPositionSource):
    """Binance USDT-M futures client.

    Usage:
        client = BinancePerpsClient.from_env()
        holding = client.get_holding("BNBUSDT")
        client.open_short("BNBUSDT", "0.50")
    """

    def __init__(
        self,
        config: BinanceConfig,
        session: requests.Session | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize Binance client.

        Args:
            config: API credentials and endpoint.
            session: HTTP session. Defaults to a new requests.Session.
            clock: Time source in seconds. Defaults to time.time.
        """
        self.config = config
        self._session = session or requests.Session()
        self._clock = clock or time.time

    @classmethod
    def from_env(cls) -> "BinancePerpsClient":
        """Create client from environment variables."""
        return cls(BinanceConfig.from_env())

    @property
    def name(self) -> str:
        return "binance"

    # ------------------------------------------------------------------
    # Signing / transport
    # ------------------------------------------------------------------

    def sign_params(self, params: dict[str, Any]) -> str:
        """Build the signed query string for ``params``.

        ``timestamp`` and ``recvWindow`` are added when missing; the signature
        is computed over the urlencoded query and appended last.
        """
        if not self.config.api_secret:
            raise BinanceAPIError("Binance signed request requires api_secret")

        p = dict(params)
        p.setdefault("timestamp", int(self._clock() * 1000))
        p.setdefault("recvWindow", self.config.recv_window)

        query = urlencode(p)
        signature = hmac.new(
            self.config.api_secret.encode("utf-8"),
            query.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return f"{query}&signature={signature}"

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        signed: bool = False,
    ) -> Any:
        url = f"{self.config.base_url}{path}"
        params = params or {}
        query = self.sign_params(params) if signed else urlencode(params)
        headers = {"X-MBX-APIKEY": self.config.api_key} if self.config.api_key else {}

        if method == "GET":
            resp = self._session.get(
                f"{url}?{query}" if query else url,
                headers=headers,
                timeout=self.config.timeout,
            )
        elif method in ("POST", "DELETE"):
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            resp = self._session.request(
                method,
                url,
                data=query,
                headers=headers,
                timeout=self.config.timeout,
            )
        else:
            raise ValueError(f"Unsupported method: {method}")

        logger.debug(f"{method} {path} -> {resp.status_code}")

        if resp.status_code >= 400:
            code = None
            msg = resp.text[:500]
            try:
                payload = resp.json()
                code = payload.get("code")
                msg = payload.get("msg", msg)
            except ValueError:
                pass
            raise BinanceAPIError(
                f"Binance HTTP {resp.status_code} {method} {path}: code={code} msg={msg}",
                status_code=resp.status_code,
                code=code,
            )

        try:
            return resp.json() if resp.text else {}
        except ValueError as e:
            raise BinanceAPIError(f"Unparseable response from {path}: {resp.text[:200]}") from e

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def get_position_risk(self, symbol: str) -> list[dict[str, Any]]:
        """Raw position risk records for ``symbol``."""
        data = self._request("GET", "/fapi/v3/positionRisk", {"symbol": symbol}, signed=True)
        if not isinstance(data, list):
            raise BinanceAPIError(f"Unexpected positionRisk payload: {data}")
        return data

    def get_holding(self, symbol: str) -> FuturesHolding:
        """Get the net futures position for ``symbol``.

        In hedge mode the exchange reports one record per position side; the
        signed amounts and PnL are summed into one net holding.

        Raises:
            PositionNotFoundError: If no record exists for the symbol.
        """
        records = [p for p in self.get_position_risk(symbol) if p.get("symbol") == symbol]
        if not records:
            raise PositionNotFoundError(f"No matching Binance position found for symbol={symbol}")

        position_amt = sum((_to_decimal(p, "positionAmt") for p in records), Decimal("0"))
        unrealized_pnl = sum((_to_decimal(p, "unRealizedProfit") for p in records), Decimal("0"))
        mark_price = _to_decimal(records[0], "markPrice")
        update_time = max(int(p.get("updateTime", 0)) for p in records)

        logger.debug(
            f"Binance position {symbol}: amt={position_amt} mark={mark_price} "
            f"upnl={unrealized_pnl} records={len(records)}"
        )
        return FuturesHolding(
            symbol=symbol,
            position_amt=position_amt,
            unrealized_pnl=unrealized_pnl,
            mark_price=mark_price,
            update_time=update_time,
        )

    # ------------------------------------------------------------------
    # Market data
    # ------------------------------------------------------------------

    def get_book_ticker(self, symbol: str, limit: int = 5) -> BookTicker:
        """Best bid/ask from the order book."""
        data = self._request("GET", "/fapi/v1/depth", {"symbol": symbol, "limit": limit})
        bids = data.get("bids") or []
        asks = data.get("asks") or []
        if not bids or not asks:
            raise BinanceAPIError(f"Empty order book for {symbol}")
        return BookTicker(
            symbol=symbol,
            bid_price=Decimal(bids[0][0]),
            bid_qty=Decimal(bids[0][1]),
            ask_price=Decimal(asks[0][0]),
            ask_qty=Decimal(asks[0][1]),
        )

    def get_funding_rates(self, symbol: str, limit: int = 10) -> list[FundingRate]:
        """Most recent funding rate settlements for ``symbol``."""
        data = self._request("GET", "/fapi/v1/fundingRate", {"symbol": symbol, "limit": limit})
        rates = []
        for item in data:
            mark = item.get("markPrice")
            rates.append(
                FundingRate(
                    symbol=item["symbol"],
                    funding_time=int(item["fundingTime"]),
                    funding_rate=_to_decimal(item, "fundingRate"),
                    mark_price=Decimal(mark) if mark not in (None, "") else None,
                )
            )
        return rates

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def place_limit_order(
        self,
        symbol: str,
        side: str,
        quantity: str,
        price: Decimal | str,
        reduce_only: bool = False,
    ) -> dict[str, Any]:
        """Place a GTC limit order.

        Args:
            symbol: Futures symbol.
            side: "BUY" or "SELL".
            quantity: Quantity string already rounded to the step size.
            price: Limit price.
            reduce_only: Only reduce an existing position.

        Returns:
            Order response payload.
        """
        params: dict[str, Any] = {
            "symbol": symbol,
            "side": side,
            "type": "LIMIT",
            "timeInForce": "GTC",
            "quantity": quantity,
            "price": str(price),
        }
        if reduce_only:
            params["reduceOnly"] = "true"

        logger.info(f"Placing {side} LIMIT {symbol} qty={quantity} price={price} reduce_only={reduce_only}")
        return self._request("POST", "/fapi/v1/order", params, signed=True)

    def open_short(self, symbol: str, quantity: str) -> dict[str, Any]:
        """Increase the short: limit SELL at the best ask."""
        book = self.get_book_ticker(symbol)
        return self.place_limit_order(symbol, "SELL", quantity, book.ask_price)

    def close_short(self, symbol: str, quantity: str) -> dict[str, Any]:
        """Reduce the short: reduce-only limit BUY at the best bid."""
        book = self.get_book_ticker(symbol)
        return self.place_limit_order(symbol, "BUY", quantity, book.bid_price, reduce_only=True)
