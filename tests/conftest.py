"""Shared fakes for the HTTP layer."""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import pytest


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None,
                 headers: Optional[Dict[str, str]] = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class SequenceSession:
    """Returns (or raises) the queued items in order, one per GET."""

    def __init__(self, items: List[Any]) -> None:
        self._items = list(items)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Optional[dict] = None, timeout: Optional[float] = None) -> FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        item = self._items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RoutingSession:
    """Answers GETs through a handler keyed by URL path suffix."""

    def __init__(self, routes: Dict[str, Callable[[Optional[dict]], FakeResponse]]) -> None:
        self._routes = routes
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Optional[dict] = None, timeout: Optional[float] = None) -> FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        for suffix, handler in self._routes.items():
            if url.endswith(suffix):
                return handler(params)
        return FakeResponse(404, {"code": -1, "msg": f"Unknown route {url}"})


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


def make_kline(open_time: int, open_: float, high: float, low: float, close: float, volume: float) -> list:
    return [open_time, str(open_), str(high), str(low), str(close), str(volume),
            open_time + 1, "0", 10, "0", "0", "0"]


def klines_from_closes(closes: List[float], start_ms: int = 1_700_000_000_000,
                       step_ms: int = 86_400_000, volume: float = 100.0) -> list:
    """Klines whose open equals the previous close."""
    rows = []
    prev = closes[0]
    for i, close in enumerate(closes):
        rows.append(make_kline(start_ms + i * step_ms, prev, max(prev, close), min(prev, close), close, volume))
        prev = close
    return rows


# 17 falling closes pin RSI(14) at 0, 13 rising closes lift it far above 30:
# the trailing 14-value RSI window is a strong pump.
PUMP_CLOSES = [100.0 - i for i in range(17)] + [84.0 + 5 * i for i in range(1, 14)]
FALLING_CLOSES = [200.0 - 2 * i for i in range(30)]


def futures_routes(klines_by_symbol: Dict[str, list], symbols: List[str],
                   price_change: str = "3.5") -> Dict[str, Callable[[Optional[dict]], FakeResponse]]:
    """Routes for exchange info, klines and 24h ticker; unknown symbols are invalid."""
    invalid = FakeResponse(400, {"code": -1121, "msg": "Invalid symbol."})

    def exchange_info(_params: Optional[dict]) -> FakeResponse:
        return FakeResponse(200, {"symbols": [{"symbol": s, "status": "TRADING"} for s in symbols]})

    def klines(params: Optional[dict]) -> FakeResponse:
        rows = klines_by_symbol.get(params["symbol"])
        return FakeResponse(200, rows) if rows is not None else invalid

    def ticker(params: Optional[dict]) -> FakeResponse:
        if params["symbol"] not in klines_by_symbol:
            return invalid
        return FakeResponse(200, {"symbol": params["symbol"], "priceChangePercent": price_change})

    return {
        "/fapi/v1/exchangeInfo": exchange_info,
        "/fapi/v1/klines": klines,
        "/fapi/v1/ticker/24hr": ticker,
    }
