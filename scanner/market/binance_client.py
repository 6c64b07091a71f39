# -*- coding: utf-8 -*-
"""
Binance futures REST client wrapper.

Performs public GET requests with bounded retries, exponential backoff, a
separate rate-limit wait phase, and interpretation of Binance error payloads
(IP ban, invalid symbol).
"""

import time
import random
import logging
import requests
from typing import Any, Callable, Dict, List, Optional
from binance.exceptions import BinanceAPIException


logger = logging.getLogger(__name__)


RATE_LIMIT_STATUSES = (429, 418)  # 418 = IP auto-banned after repeated 429s
IP_BAN_CODE = -1003
INVALID_SYMBOL_CODE = -1121
INVALID_SYMBOL_MESSAGES = ("Invalid symbol.", "Invalid symbol status.")

EXCHANGE_INFO_PATH = "/fapi/v1/exchangeInfo"
KLINES_PATH = "/fapi/v1/klines"
TICKER_24H_PATH = "/fapi/v1/ticker/24hr"


class UniverseFetchError(RuntimeError):
    """Raised when the tradable symbol list cannot be obtained."""


def is_invalid_symbol_error(exc: BinanceAPIException) -> bool:
    return exc.code == INVALID_SYMBOL_CODE or exc.message in INVALID_SYMBOL_MESSAGES


class BinanceFuturesClient:
    """Resilient public-data client for Binance USD-M futures."""

    BASE_URL = "https://fapi.binance.com"

    def __init__(self, base_url: str = BASE_URL,
                 session: Optional[requests.Session] = None,
                 max_retries: int = 5, base_delay: float = 1.0,
                 timeout: float = 10.0, rate_limit_jitter: float = 0.5,
                 rate_limit_max_backoff: float = 60.0,
                 max_rate_limit_waits: Optional[int] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize client.

        Parameters
        ----------
        base_url : str
            REST endpoint root
        session : requests.Session, optional
            HTTP session to use (a new one is created if omitted)
        max_retries : int, default 5
            Attempts for network errors, bans and unexpected HTTP errors
        base_delay : float, default 1.0
            Backoff base in seconds; attempt i waits base_delay * 2**i
        timeout : float, default 10.0
            Deadline in seconds for each individual HTTP call
        rate_limit_jitter : float, default 0.5
            Upper bound of the random seconds added to rate-limit waits
        rate_limit_max_backoff : float, default 60.0
            Cap for computed rate-limit waits (Retry-After is honoured as sent)
        max_rate_limit_waits : int or None, default None
            Maximum rate-limit waits per call (None = unlimited)
        sleep : callable, default time.sleep
            Sleep function, replaceable for tests
        """
        if max_retries <= 0:
            raise ValueError(f"max_retries must be > 0, got {max_retries}")

        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.timeout = timeout
        self.rate_limit_jitter = rate_limit_jitter
        self.rate_limit_max_backoff = rate_limit_max_backoff
        self.max_rate_limit_waits = max_rate_limit_waits
        self._sleep = sleep

    def _backoff(self, attempt: int) -> float:
        return self.base_delay * (2 ** attempt)

    def _rate_limit_wait(self, response, waits: int) -> float:
        retry_after = response.headers.get("Retry-After") if response.headers else None
        wait_time = None
        if retry_after:
            try:
                wait_time = float(int(retry_after))
            except ValueError:
                logger.debug(f"Ignoring non-numeric Retry-After header: {retry_after!r}")
        if wait_time is None:
            wait_time = min(self._backoff(waits), self.rate_limit_max_backoff)
        return wait_time + random.uniform(0, self.rate_limit_jitter)

    def fetch_with_retry(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """
        GET a JSON resource with retries.

        Parameters
        ----------
        url : str
            Absolute URL
        params : dict, optional
            Query parameters

        Returns
        -------
        Any or None
            Parsed JSON, or None when the symbol is invalid or all attempts
            ended without a definitive result.

        Raises
        ------
        requests.RequestException, BinanceAPIException, ValueError
            When the final attempt fails with an unclassified error.
        """
        attempt = 0
        rate_limit_waits = 0

        while attempt < self.max_retries:
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)

                if response.status_code in RATE_LIMIT_STATUSES:
                    if (self.max_rate_limit_waits is not None
                            and rate_limit_waits >= self.max_rate_limit_waits):
                        logger.error(f"Rate limit persisted after {rate_limit_waits} waits for {url}")
                        return None
                    wait_time = self._rate_limit_wait(response, rate_limit_waits)
                    rate_limit_waits += 1
                    logger.warning(f"Rate limit hit (HTTP {response.status_code}). "
                                   f"Retrying in {wait_time:.1f}s...")
                    self._sleep(wait_time)
                    # Rate-limit waits do not use up generic attempts
                    continue

                if not response.ok:
                    error = BinanceAPIException(response, response.status_code, response.text)
                    if error.code == IP_BAN_CODE:
                        wait_time = self._backoff(attempt)
                        logger.warning(f"Binance IP ban detected. Retrying in {wait_time:.1f}s...")
                        self._sleep(wait_time)
                        attempt += 1
                        continue
                    if is_invalid_symbol_error(error):
                        logger.warning(f"Invalid symbol for {url} ({params}). Skipping.")
                        return None
                    raise error

                return response.json()

            except (requests.RequestException, BinanceAPIException, ValueError) as e:
                logger.error(f"Attempt {attempt + 1} failed for {url}: {e}")
                if attempt < self.max_retries - 1:
                    wait_time = self._backoff(attempt)
                    logger.info(f"Retrying in {wait_time:.1f}s...")
                    self._sleep(wait_time)
                    attempt += 1
                    continue
                if "Invalid symbol" in str(e):
                    return None
                raise

        return None

    def get_exchange_symbols(self, quote_asset: str = "USDT") -> List[str]:
        """
        Get all exchange symbols ending with ``quote_asset``.

        Raises
        ------
        UniverseFetchError
            If the request fails or the payload has no symbols list.
        """
        url = f"{self.base_url}{EXCHANGE_INFO_PATH}"
        try:
            exchange_info = self.fetch_with_retry(url)
        except Exception as e:
            raise UniverseFetchError(f"Error fetching exchange info: {e}") from e

        if exchange_info is None:
            raise UniverseFetchError("Failed to fetch exchange info")
        if not isinstance(exchange_info, dict) or not isinstance(exchange_info.get('symbols'), list):
            raise UniverseFetchError(f"Exchange info did not contain a valid symbols array: {exchange_info!r:.200}")

        return [
            s['symbol'] for s in exchange_info['symbols']
            if isinstance(s, dict) and str(s.get('symbol', '')).endswith(quote_asset)
        ]

    def get_klines(self, symbol: str, interval: str, limit: int = 500) -> Optional[List[List[Any]]]:
        """Get raw klines for a symbol, or None if the symbol is skipped."""
        url = f"{self.base_url}{KLINES_PATH}"
        return self.fetch_with_retry(url, params={'symbol': symbol, 'interval': interval, 'limit': limit})

    def get_ticker_24h(self, symbol: str) -> Optional[Dict[str, Any]]:
        """Get the 24h ticker statistics for a symbol, or None if the symbol is skipped."""
        url = f"{self.base_url}{TICKER_24H_PATH}"
        return self.fetch_with_retry(url, params={'symbol': symbol})
