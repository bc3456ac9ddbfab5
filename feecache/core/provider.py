"""Abstract fee provider interface."""

from abc import ABC, abstractmethod

from feecache.models.fees import FeeData


class FeeProvider(ABC):
    """Abstract base class for fee data providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        ...

    @abstractmethod
    async def get_fees(self) -> FeeData | None:
        """
        Fetch the current fee data.

        Returns:
            FeeData with a timestamp mapping and a fee rate mapping. Returning
            None breaks the provider contract.

        Raises:
            FeeProviderError: If the provider could not deliver data.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the provider and release resources."""
        ...

    def __str__(self) -> str:
        return self.name
