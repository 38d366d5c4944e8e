# cauldron_indexer/contracts/reader.py

from typing import Any, Dict, Optional, Tuple

from web3 import Web3
from web3.contract import Contract

from ..core.errors import ResolutionError
from ..core.logging import LoggingMixin
from ..types import EvmAddress
from ..utils.addresses import normalize_address
from .abi_loader import ABILoader
from .interfaces import ContractReader

CAULDRON_ABI = "cauldron"
LEGACY_CAULDRON_ABI = "cauldron_medium_risk_v1"
ERC20_ABI = "erc20"
VAULT_ABI = "bentobox"


class Web3ContractReader(ContractReader, LoggingMixin):
    """
    Reads contract state through a web3 provider, caching bound contract
    instances per (abi, address).
    """

    def __init__(self, w3: Web3, abi_loader: ABILoader):
        self.w3 = w3
        self.abi_loader = abi_loader
        self.contract_cache: Dict[Tuple[str, str], Contract] = {}

    def get_contract(self, abi_name: str, address: str) -> Contract:
        key = (abi_name, address.lower())
        if key not in self.contract_cache:
            self.contract_cache[key] = self.w3.eth.contract(
                address=Web3.to_checksum_address(address),
                abi=self.abi_loader.load_abi(abi_name),
            )
        return self.contract_cache[key]

    def call_function(self, abi_name: str, address: str, function_name: str, *args,
                      block: Optional[int] = None) -> Any:
        contract = self.get_contract(abi_name, address)
        block_identifier = block if block is not None else "latest"

        try:
            func = getattr(contract.functions, function_name)
            return func(*args).call(block_identifier=block_identifier)
        except Exception as e:
            self.log_error("Contract call failed",
                          contract_address=address,
                          function_name=function_name,
                          block_number=block_identifier,
                          error=str(e),
                          exception_type=type(e).__name__)
            raise ResolutionError(address, function_name, str(e)) from e

    def master_contract(self, cauldron: EvmAddress, block: Optional[int] = None) -> EvmAddress:
        return normalize_address(self.call_function(CAULDRON_ABI, cauldron, "masterContract", block=block))

    def bento_box(self, cauldron: EvmAddress, block: Optional[int] = None) -> EvmAddress:
        return normalize_address(self.call_function(CAULDRON_ABI, cauldron, "bentoBox", block=block))

    def collateral(self, cauldron: EvmAddress, block: Optional[int] = None) -> EvmAddress:
        return normalize_address(self.call_function(CAULDRON_ABI, cauldron, "collateral", block=block))

    def token_symbol(self, token: EvmAddress, block: Optional[int] = None) -> str:
        return self.call_function(ERC20_ABI, token, "symbol", block=block)

    def token_name(self, token: EvmAddress, block: Optional[int] = None) -> str:
        return self.call_function(ERC20_ABI, token, "name", block=block)

    def token_decimals(self, token: EvmAddress, block: Optional[int] = None) -> int:
        return int(self.call_function(ERC20_ABI, token, "decimals", block=block))

    def fees_earned(self, cauldron: EvmAddress, legacy_layout: bool,
                    block: Optional[int] = None) -> int:
        abi_name = LEGACY_CAULDRON_ABI if legacy_layout else CAULDRON_ABI
        accrue_info = self.call_function(abi_name, cauldron, "accrueInfo", block=block)
        # feesEarned is the second field in both layouts
        return int(accrue_info[1])

    def to_amount(self, vault: EvmAddress, token: EvmAddress, share: int,
                  round_up: bool = False, block: Optional[int] = None) -> int:
        return int(self.call_function(
            VAULT_ABI, vault, "toAmount",
            Web3.to_checksum_address(token), share, round_up,
            block=block,
        ))
