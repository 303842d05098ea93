"""Abstract position sources for the two hedged venues."""

from abc import ABC, abstractmethod

from lph.data.models import FuturesHolding, RawLpPosition


class ProviderError(Exception):
    """Base error for position sources."""

    pass


class PositionNotFoundError(ProviderError):
    """No position matching the requested pair or symbol exists.

    Sources raise this instead of returning an empty (zero) holding, so a
    missing position can never be mistaken for a flat one.
    """

    pass


class AmmPositionSource(ABC):
    """Source of on-chain LP position data.

    Implementations read every LP position of an owner pinned to a single
    block, in raw token units. Selecting the BASE/USDT position and converting
    it to an ``AmmHolding`` is done by the monitoring data bridge.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name (e.g., 'uniswap_v3')."""
        pass

    @abstractmethod
    def get_block_number(self) -> int:
        """Get the latest block number."""
        pass

    @abstractmethod
    def list_positions(self, owner: str, block_number: int | None = None) -> list[RawLpPosition]:
        """Read all LP positions owned by ``owner``.

        Args:
            owner: Owner address.
            block_number: Block to read at. Defaults to the latest block.

        Returns:
            Positions in raw token units, ordered by token ID.
        """
        pass


class FuturesPositionSource(ABC):
    """Source of perpetual futures position data."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name (e.g., 'binance')."""
        pass

    @abstractmethod
    def get_holding(self, symbol: str) -> FuturesHolding:
        """Get the current futures position for ``symbol``.

        Raises:
            PositionNotFoundError: If the exchange has no record for the symbol.
        """
        pass
