"""Tests for the Binance USDT-M futures client."""

import hashlib
import hmac
from decimal import Decimal
from unittest.mock import MagicMock
from urllib.parse import parse_qs

import pytest

from lph.data.providers.base import PositionNotFoundError, ProviderError
from lph.data.providers.binance_provider import (
    BinanceAPIError,
    BinanceConfig,
    BinancePerpsClient,
)

FIXED_TIME = 1_700_000_000.5


def make_response(payload, status_code=200, text=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = text if text is not None else str(payload)
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    config = BinanceConfig(api_key="test-key", api_secret="test-secret", base_url="https://fapi.test")
    return BinancePerpsClient(config, session=session, clock=lambda: FIXED_TIME)


def position_record(symbol="BNBUSDT", amt="-10", pnl="12.5", mark="600.1", update_time=1_700_000_000_000, side="BOTH"):
    return {
        "symbol": symbol,
        "positionSide": side,
        "positionAmt": amt,
        "unRealizedProfit": pnl,
        "markPrice": mark,
        "updateTime": update_time,
    }


class TestSigning:
    """Tests for request signing"""

    def test_signature_is_hmac_of_query(self, client):
        signed = client.sign_params({"symbol": "BNBUSDT"})

        query, signature = signed.rsplit("&signature=", 1)
        assert query == "symbol=BNBUSDT&timestamp=1700000000500&recvWindow=5000"
        expected = hmac.new(b"test-secret", query.encode("utf-8"), hashlib.sha256).hexdigest()
        assert signature == expected

    def test_explicit_timestamp_is_kept(self, client):
        signed = client.sign_params({"symbol": "BNBUSDT", "timestamp": 1})

        assert parse_qs(signed)["timestamp"] == ["1"]

    def test_missing_secret(self, session):
        client = BinancePerpsClient(BinanceConfig(api_key="k"), session=session)

        with pytest.raises(BinanceAPIError):
            client.sign_params({"symbol": "BNBUSDT"})

    def test_signed_get_sends_api_key_header(self, client, session):
        session.get.return_value = make_response([position_record()])

        client.get_position_risk("BNBUSDT")

        url = session.get.call_args.args[0]
        assert url.startswith("https://fapi.test/fapi/v3/positionRisk?symbol=BNBUSDT&")
        assert "signature=" in url
        assert session.get.call_args.kwargs["headers"] == {"X-MBX-APIKEY": "test-key"}


class TestGetHolding:
    """Tests for get_holding"""

    def test_one_way_mode(self, client, session):
        session.get.return_value = make_response([position_record()])

        holding = client.get_holding("BNBUSDT")

        assert holding.symbol == "BNBUSDT"
        assert holding.position_amt == Decimal("-10")
        assert holding.unrealized_pnl == Decimal("12.5")
        assert holding.mark_price == Decimal("600.1")
        assert holding.update_time == 1_700_000_000_000

    def test_hedge_mode_records_are_netted(self, client, session):
        session.get.return_value = make_response(
            [
                position_record(amt="2", pnl="1", side="LONG", update_time=10),
                position_record(amt="-12", pnl="-3.5", side="SHORT", update_time=20),
            ]
        )

        holding = client.get_holding("BNBUSDT")

        assert holding.position_amt == Decimal("-10")
        assert holding.unrealized_pnl == Decimal("-2.5")
        assert holding.update_time == 20

    def test_other_symbols_are_ignored(self, client, session):
        session.get.return_value = make_response(
            [position_record(symbol="ETHUSDT", amt="5"), position_record(amt="-1")]
        )

        assert client.get_holding("BNBUSDT").position_amt == Decimal("-1")

    def test_no_record(self, client, session):
        session.get.return_value = make_response([])

        with pytest.raises(PositionNotFoundError):
            client.get_holding("BNBUSDT")

    def test_missing_field(self, client, session):
        record = position_record()
        del record["markPrice"]
        session.get.return_value = make_response([record])

        with pytest.raises(BinanceAPIError, match="markPrice"):
            client.get_holding("BNBUSDT")

    def test_http_error(self, client, session):
        session.get.return_value = make_response(
            {"code": -2015, "msg": "Invalid API-key"}, status_code=401
        )

        with pytest.raises(BinanceAPIError) as exc_info:
            client.get_holding("BNBUSDT")

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == -2015
        assert isinstance(exc_info.value, ProviderError)


class TestMarketData:
    """Tests for order book and funding rates"""

    def test_book_ticker(self, client, session):
        session.get.return_value = make_response(
            {"bids": [["599.9", "3"], ["599.8", "1"]], "asks": [["600.1", "2"]]}
        )

        book = client.get_book_ticker("BNBUSDT")

        assert book.bid_price == Decimal("599.9")
        assert book.ask_price == Decimal("600.1")
        assert "signature" not in session.get.call_args.args[0]

    def test_empty_book(self, client, session):
        session.get.return_value = make_response({"bids": [], "asks": []})

        with pytest.raises(BinanceAPIError):
            client.get_book_ticker("BNBUSDT")

    def test_funding_rates(self, client, session):
        session.get.return_value = make_response(
            [
                {"symbol": "BNBUSDT", "fundingTime": 1_700_006_400_000, "fundingRate": "0.00010000", "markPrice": "600.5"},
                {"symbol": "BNBUSDT", "fundingTime": 1_700_035_200_000, "fundingRate": "-0.00002", "markPrice": ""},
            ]
        )

        rates = client.get_funding_rates("BNBUSDT", limit=2)

        assert [r.funding_rate for r in rates] == [Decimal("0.0001"), Decimal("-0.00002")]
        assert rates[0].mark_price == Decimal("600.5")
        assert rates[1].mark_price is None
        assert "limit=2" in session.get.call_args.args[0]


class TestOrders:
    """Tests for order placement"""

    @pytest.fixture
    def book_session(self, session):
        session.get.return_value = make_response({"bids": [["599.9", "3"]], "asks": [["600.1", "2"]]})
        session.request.return_value = make_response({"orderId": 123, "status": "NEW"})
        return session

    def _sent_params(self, session):
        kwargs = session.request.call_args.kwargs
        return {k: v[0] for k, v in parse_qs(kwargs["data"]).items()}

    def test_open_short_sells_at_ask(self, client, book_session):
        order = client.open_short("BNBUSDT", "2")

        assert order["orderId"] == 123
        method, url = book_session.request.call_args.args
        assert method == "POST"
        assert url == "https://fapi.test/fapi/v1/order"
        params = self._sent_params(book_session)
        assert params["side"] == "SELL"
        assert params["type"] == "LIMIT"
        assert params["timeInForce"] == "GTC"
        assert params["quantity"] == "2"
        assert params["price"] == "600.1"
        assert "reduceOnly" not in params
        assert "signature" in params

    def test_close_short_buys_reduce_only_at_bid(self, client, book_session):
        client.close_short("BNBUSDT", "0.5")

        params = self._sent_params(book_session)
        assert params["side"] == "BUY"
        assert params["price"] == "599.9"
        assert params["reduceOnly"] == "true"

    def test_rejected_order(self, client, session):
        session.get.return_value = make_response({"bids": [["599.9", "3"]], "asks": [["600.1", "2"]]})
        session.request.return_value = make_response(
            {"code": -2019, "msg": "Margin is insufficient."}, status_code=400
        )

        with pytest.raises(BinanceAPIError, match="Margin is insufficient"):
            client.open_short("BNBUSDT", "2")


class TestBinanceConfig:
    """Tests for BinanceConfig.from_env"""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BINANCE_API_KEY", " key ")
        monkeypatch.setenv("BINANCE_API_SECRET", "secret")
        monkeypatch.setenv("BINANCE_BASE_URL", "https://testnet.binancefuture.com/")

        config = BinanceConfig.from_env()

        assert config.api_key == "key"
        assert config.api_secret == "secret"
        assert config.base_url == "https://testnet.binancefuture.com"
        assert config.recv_window == 5000
