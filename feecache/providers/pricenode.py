"""Price node fee provider implementation."""

import asyncio
import logging
import re
from typing import Any

import httpx

from feecache.constants import SOURCE_TIMESTAMP_KEY
from feecache.core.exceptions import (
    FeeProviderError,
    FeeProviderRateLimitError,
    FeeProviderTimeoutError,
)
from feecache.core.provider import FeeProvider
from feecache.models.fees import FeeData

logger = logging.getLogger(__name__)

# dataMap keys look like "btcTxFee"; other entries (e.g. "btcMinTxFee") are ignored
TX_FEE_KEY_PATTERN = re.compile(r"^([a-z]+)TxFee$")


class PriceNodeFeeProvider(FeeProvider):
    """
    Fee provider backed by a price node ``/getFees`` endpoint.

    Response format::

        {"bitcoinFeesTs": 1520000000, "dataMap": {"btcTxFee": 120, ...}}

    The dataMap is translated to fee rates keyed by upper case currency code.

    Features:
    - Retries with exponential backoff on timeouts, 429 and 5xx responses
    - Request counting and health checking
    """

    FEES_PATH = "getFees"

    def __init__(
        self,
        base_url: str = "https://price.bisq.wiz.biz",
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the price node provider.

        Args:
            base_url: Base URL of the price node.
            max_retries: Maximum number of attempts per request.
            retry_delay: Base delay between retries (exponential backoff).
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        self._base_url = base_url.rstrip("/")
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._transport = transport
        self._request_count = 0
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        """Provider name identifier."""
        return "pricenode"

    @property
    def base_url(self) -> str:
        return self._base_url

    def __str__(self) -> str:
        return f"{self.name}({self._base_url})"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers={
                    "Accept": "application/json",
                    "User-Agent": "FeeCache/1.0",
                },
                transport=self._transport,
            )
        return self._client

    async def _request(self, path: str) -> dict[str, Any]:
        """
        Make an HTTP GET request with retry logic.

        Args:
            path: API path.

        Returns:
            JSON response data.

        Raises:
            FeeProviderRateLimitError: If rate limit is exceeded.
            FeeProviderTimeoutError: If request times out.
            FeeProviderError: On any other transport or HTTP error.
        """
        url = f"{self._base_url}/{path.lstrip('/')}"
        logger.info(f"[PriceNode API] GET {url}")

        client = await self._get_client()

        for attempt in range(self._max_retries):
            last_attempt = attempt == self._max_retries - 1
            try:
                self._request_count += 1
                logger.debug(f"[PriceNode API] Attempt {attempt + 1}/{self._max_retries} - Request #{self._request_count}")
                response = await client.get(url)

                if response.status_code == 429:
                    retry_after = float(response.headers.get("Retry-After", self._retry_delay))
                    logger.warning(f"[PriceNode API] Rate limit hit (429) - Retry after: {retry_after}s")
                    if not last_attempt:
                        wait_time = retry_after * (2**attempt)
                        logger.info(f"[PriceNode API] Waiting {wait_time:.2f}s before retry {attempt + 2}/{self._max_retries}")
                        await asyncio.sleep(wait_time)
                        continue
                    raise FeeProviderRateLimitError(self.name, retry_after)

                if response.status_code >= 500 and not last_attempt:
                    wait_time = self._retry_delay * (2**attempt)
                    logger.warning(f"[PriceNode API] Server error ({response.status_code}) - retrying in {wait_time:.2f}s")
                    await asyncio.sleep(wait_time)
                    continue

                response.raise_for_status()
                logger.debug(f"[PriceNode API] Success - Status {response.status_code}")
                return response.json()

            except httpx.TimeoutException as e:
                logger.warning(f"[PriceNode API] Request timeout after {self._timeout}s")
                if not last_attempt:
                    wait_time = self._retry_delay * (2**attempt)
                    await asyncio.sleep(wait_time)
                    continue
                raise FeeProviderTimeoutError(self.name, self._timeout) from e

            except httpx.HTTPStatusError as e:
                logger.error(f"[PriceNode API] HTTP error {e.response.status_code}: {e.response.text[:200]}")
                raise FeeProviderError(
                    f"HTTP error {e.response.status_code} from {url}", self.name
                ) from e

            except httpx.HTTPError as e:
                logger.error(f"[PriceNode API] Request to {url} failed: {e!r}")
                raise FeeProviderError(f"Request to {url} failed: {e}", self.name) from e

            except ValueError as e:
                raise FeeProviderError(f"Invalid JSON from {url}", self.name) from e

        raise FeeProviderError(f"No response from {url}", self.name)

    async def get_fees(self) -> FeeData:
        """Fetch current fee rates from the price node."""
        data = await self._request(self.FEES_PATH)
        return self.parse_fees(data)

    def parse_fees(self, data: Any) -> FeeData:
        """
        Translate a ``/getFees`` response into FeeData.

        Raises:
            FeeProviderError: If the response does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise FeeProviderError("Unexpected fee response format", self.name)

        data_map = data.get("dataMap")
        source_ts = data.get(SOURCE_TIMESTAMP_KEY)
        if not isinstance(data_map, dict) or source_ts is None:
            raise FeeProviderError(
                f"Fee response is missing 'dataMap' or '{SOURCE_TIMESTAMP_KEY}'", self.name
            )

        fees: dict[str, int] = {}
        try:
            for key, value in data_map.items():
                match = TX_FEE_KEY_PATTERN.match(key)
                if match:
                    fees[match.group(1).upper()] = int(value)
            timestamps = {SOURCE_TIMESTAMP_KEY: int(source_ts)}
        except (TypeError, ValueError) as e:
            raise FeeProviderError(f"Non-numeric value in fee response: {e}", self.name) from e

        logger.debug(f"[PriceNode] Parsed fees {fees} at {source_ts}")
        return FeeData(timestamps=timestamps, fees=fees)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def get_request_count(self) -> int:
        """Get total number of API requests made."""
        return self._request_count

    def reset_request_count(self) -> None:
        """Reset the request counter."""
        self._request_count = 0

    async def health_check(self) -> dict[str, Any]:
        """Check provider health status."""
        logger.info("[PriceNode] Performing health check...")
        try:
            fees = await self.get_fees()
            return {
                "status": "healthy",
                "provider": self.name,
                "request_count": self._request_count,
                "api_responsive": True,
                "currencies": sorted(fees.fees),
            }
        except Exception as e:
            logger.error(f"[PriceNode] Health check failed - Error: {str(e)}")
            return {
                "status": "unhealthy",
                "provider": self.name,
                "request_count": self._request_count,
                "error": str(e),
                "api_responsive": False,
            }
