"""Custom exceptions for FeeCache."""


class FeeCacheError(Exception):
    """Base exception for all FeeCache errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or "FEECACHE_ERROR"
        super().__init__(self.message)


class FeeProviderError(FeeCacheError):
    """Raised when a fee provider could not deliver fee data."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message, "FEE_PROVIDER_ERROR")


class FeeProviderTimeoutError(FeeProviderError):
    """Raised when a fee provider request times out."""

    def __init__(self, provider: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"API timeout for {provider} after {timeout}s", provider)
        self.code = "FEE_PROVIDER_TIMEOUT"


class FeeProviderRateLimitError(FeeProviderError):
    """Raised when a fee provider rejects requests due to rate limiting."""

    def __init__(self, provider: str, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        message = f"Rate limit exceeded for {provider}"
        if retry_after:
            message += f". Retry after {retry_after}s"
        super().__init__(message, provider)
        self.code = "FEE_PROVIDER_RATE_LIMIT"


class FeeContractError(FeeCacheError):
    """Raised when a provider reports success but breaks the payload contract.

    This is a programming error on the provider side and is never absorbed by
    the fee service.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, "FEE_CONTRACT_VIOLATION")
