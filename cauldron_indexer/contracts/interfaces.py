# cauldron_indexer/contracts/interfaces.py
"""
Read-only view of on-chain contract state.

Every call is a point-in-time read against a single contract address.
Implementations raise ResolutionError when the target reverts or does not
implement the call. Passing a block number pins the read to the state
after that block; None reads the latest state.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..types import EvmAddress


class ContractReader(ABC):

    @abstractmethod
    def master_contract(self, cauldron: EvmAddress, block: Optional[int] = None) -> EvmAddress:
        """Registry / master contract the cauldron was cloned from"""

    @abstractmethod
    def bento_box(self, cauldron: EvmAddress, block: Optional[int] = None) -> EvmAddress:
        """Custodial vault holding the cauldron's tokens"""

    @abstractmethod
    def collateral(self, cauldron: EvmAddress, block: Optional[int] = None) -> EvmAddress:
        pass

    @abstractmethod
    def token_symbol(self, token: EvmAddress, block: Optional[int] = None) -> str:
        pass

    @abstractmethod
    def token_name(self, token: EvmAddress, block: Optional[int] = None) -> str:
        pass

    @abstractmethod
    def token_decimals(self, token: EvmAddress, block: Optional[int] = None) -> int:
        pass

    @abstractmethod
    def fees_earned(self, cauldron: EvmAddress, legacy_layout: bool,
                    block: Optional[int] = None) -> int:
        """
        Raw feesEarned field of accrueInfo().

        Legacy master contracts return (lastAccrued, feesEarned); newer ones
        return (lastAccrued, feesEarned, INTEREST_PER_SECOND).
        """

    @abstractmethod
    def to_amount(self, vault: EvmAddress, token: EvmAddress, share: int,
                  round_up: bool = False, block: Optional[int] = None) -> int:
        """Convert vault shares of a token into the underlying token amount"""
