"""Uniswap V3 NonfungiblePositionManager reader.

Reads every LP position owned by an address, pinned to one block:

1. ``balanceOf(owner)`` / ``tokenOfOwnerByIndex`` enumerate position NFTs
2. ``positions(tokenId)`` gives token0, token1 and liquidity
3. a static call of ``decreaseLiquidity`` for the full liquidity gives the
   withdrawable amounts
4. a static call of ``collect`` with max amounts gives the collectable fees

Static calls are sent from the owner, since the position manager only lets an
approved address decrease liquidity or collect.
"""

import logging
import os

from dotenv import load_dotenv
from web3 import Web3
from web3.exceptions import ContractLogicError

from lph.data.models import RawLpPosition
from lph.data.providers.base import AmmPositionSource, ProviderError

logger = logging.getLogger(__name__)

UINT128_MAX = 2**128 - 1
# Far-future deadline for simulated calls
SIMULATION_DEADLINE = 2**64 - 1

POSITION_MANAGER_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "tokenOfOwnerByIndex",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "index", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "positions",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [
            {"name": "nonce", "type": "uint96"},
            {"name": "operator", "type": "address"},
            {"name": "token0", "type": "address"},
            {"name": "token1", "type": "address"},
            {"name": "fee", "type": "uint24"},
            {"name": "tickLower", "type": "int24"},
            {"name": "tickUpper", "type": "int24"},
            {"name": "liquidity", "type": "uint128"},
            {"name": "feeGrowthInside0LastX128", "type": "uint256"},
            {"name": "feeGrowthInside1LastX128", "type": "uint256"},
            {"name": "tokensOwed0", "type": "uint128"},
            {"name": "tokensOwed1", "type": "uint128"},
        ],
    },
    {
        "name": "decreaseLiquidity",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "params",
                "type": "tuple",
                "components": [
                    {"name": "tokenId", "type": "uint256"},
                    {"name": "liquidity", "type": "uint128"},
                    {"name": "amount0Min", "type": "uint256"},
                    {"name": "amount1Min", "type": "uint256"},
                    {"name": "deadline", "type": "uint256"},
                ],
            }
        ],
        "outputs": [
            {"name": "amount0", "type": "uint256"},
            {"name": "amount1", "type": "uint256"},
        ],
    },
    {
        "name": "collect",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "params",
                "type": "tuple",
                "components": [
                    {"name": "tokenId", "type": "uint256"},
                    {"name": "recipient", "type": "address"},
                    {"name": "amount0Max", "type": "uint128"},
                    {"name": "amount1Max", "type": "uint128"},
                ],
            }
        ],
        "outputs": [
            {"name": "amount0", "type": "uint256"},
            {"name": "amount1", "type": "uint256"},
        ],
    },
]


class UniswapV3PositionManager(AmmPositionSource):
    """Reader for Uniswap V3 style position managers (incl. forks on BSC).

    Usage:
        reader = UniswapV3PositionManager(rpc_url, manager_address)
        block = reader.get_block_number()
        positions = reader.list_positions(owner, block)
    """

    def __init__(
        self,
        rpc_url: str,
        address: str,
        web3: Web3 | None = None,
        timeout: int = 30,
    ) -> None:
        """Initialize position manager reader.

        Args:
            rpc_url: JSON-RPC endpoint of the chain.
            address: Position manager contract address.
            web3: Preconfigured Web3 instance. Defaults to an HTTP provider on rpc_url.
            timeout: RPC request timeout in seconds.
        """
        self._w3 = web3 or Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
        self._address = Web3.to_checksum_address(address)
        self._contract = self._w3.eth.contract(address=self._address, abi=POSITION_MANAGER_ABI)

    @classmethod
    def from_env(cls, address: str | None = None) -> "UniswapV3PositionManager":
        """Create reader from LPH_RPC_URL / LPH_POSITION_MANAGER."""
        load_dotenv()
        rpc_url = os.getenv("LPH_RPC_URL", "")
        address = address or os.getenv("LPH_POSITION_MANAGER", "")
        if not rpc_url or not address:
            raise ProviderError("LPH_RPC_URL and LPH_POSITION_MANAGER must be set")
        return cls(rpc_url, address)

    @property
    def name(self) -> str:
        return "uniswap_v3"

    @property
    def address(self) -> str:
        return self._address

    def get_block_number(self) -> int:
        return int(self._w3.eth.block_number)

    def list_positions(self, owner: str, block_number: int | None = None) -> list[RawLpPosition]:
        """Read all positions of ``owner`` at one block.

        Raises:
            ProviderError: If a withdrawal or collect simulation reverts.
        """
        owner = Web3.to_checksum_address(owner)
        block = block_number if block_number is not None else self.get_block_number()
        fns = self._contract.functions

        balance = fns.balanceOf(owner).call(block_identifier=block)
        logger.debug(f"Owner {owner} holds {balance} positions at block {block}")

        positions: list[RawLpPosition] = []
        for index in range(int(balance)):
            token_id = fns.tokenOfOwnerByIndex(owner, index).call(block_identifier=block)
            info = fns.positions(token_id).call(block_identifier=block)
            token0, token1, liquidity = info[2], info[3], int(info[7])

            withdrawable0 = withdrawable1 = 0
            if liquidity > 0:
                params = (token_id, liquidity, 0, 0, SIMULATION_DEADLINE)
                withdrawable0, withdrawable1 = self._simulate(
                    fns.decreaseLiquidity(params), owner, block, token_id
                )

            collect_params = (token_id, owner, UINT128_MAX, UINT128_MAX)
            collectable0, collectable1 = self._simulate(
                fns.collect(collect_params), owner, block, token_id
            )

            positions.append(
                RawLpPosition(
                    token_id=int(token_id),
                    token0=Web3.to_checksum_address(token0),
                    token1=Web3.to_checksum_address(token1),
                    liquidity=liquidity,
                    withdrawable_amount0=int(withdrawable0),
                    withdrawable_amount1=int(withdrawable1),
                    collectable_amount0=int(collectable0),
                    collectable_amount1=int(collectable1),
                )
            )

        return sorted(positions, key=lambda p: p.token_id)

    @staticmethod
    def _simulate(call, owner: str, block: int, token_id: int) -> tuple[int, int]:
        try:
            amount0, amount1 = call.call({"from": owner}, block_identifier=block)
        except ContractLogicError as e:
            raise ProviderError(
                f"Simulation {call.fn_name} reverted for position {token_id} at block {block}: {e}"
            ) from e
        return int(amount0), int(amount1)
