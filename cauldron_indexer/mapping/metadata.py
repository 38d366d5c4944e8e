# cauldron_indexer/mapping/metadata.py

from typing import Optional

from ..contracts.interfaces import ContractReader
from ..core.errors import ResolutionError
from ..core.logging import LoggingMixin
from ..core.networks import MarketCapabilities
from ..types import EntityId, EvmAddress, MarketFeeAccount


class MarketMetadataResolver(LoggingMixin):
    """
    Builds a fresh MarketFeeAccount from the cauldron's immutable on-chain
    configuration. Nothing is persisted here: if any call fails the error
    propagates and no account exists.
    """

    def __init__(self, reader: ContractReader, capabilities: MarketCapabilities):
        self.reader = reader
        self.capabilities = capabilities

    def resolve(self, cauldron: EvmAddress, block: Optional[int] = None) -> MarketFeeAccount:
        try:
            master_contract = self.reader.master_contract(cauldron, block)
            bento_box = self.reader.bento_box(cauldron, block)
            collateral = self.reader.collateral(cauldron, block)
            symbol = self.reader.token_symbol(collateral, block)
            decimals = self.reader.token_decimals(collateral, block)
            name = self.reader.token_name(collateral, block) if self.capabilities.collateral_name else None
        except ResolutionError as e:
            self.log_error("Market metadata resolution failed",
                          contract_address=cauldron,
                          block_number=block,
                          error=str(e))
            raise

        self.log_info("Resolved market metadata",
                     contract_address=cauldron,
                     master_contract=master_contract,
                     collateral=collateral,
                     collateral_symbol=symbol)

        return MarketFeeAccount(
            id=EntityId(cauldron.lower()),
            master_contract=master_contract,
            bento_box=bento_box,
            collateral=collateral,
            collateral_symbol=symbol,
            collateral_decimals=decimals,
            collateral_name=name,
        )
