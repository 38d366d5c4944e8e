# tests/fakes.py
"""
In-process stand-ins for the chain-facing collaborators
"""

from typing import Any, Dict, List, Optional, Set, Tuple

from cauldron_indexer.contracts.interfaces import ContractReader
from cauldron_indexer.core.errors import ResolutionError
from cauldron_indexer.mapping.interfaces import WatchRegistrar, CAULDRON_TEMPLATE
from cauldron_indexer.types import (
    BlockContext,
    EvmAddress,
    EvmHash,
    HexStr,
    LogEvent,
    TransactionContext,
)

CAULDRON = "0x7b7473a76d6ae86ce19f7352a1e89f6c9dc39020"
OTHER_CAULDRON = "0x5db0ebf9640e1cbd0fa4fe2c6d19e9faa7ec38f6"
MASTER_CONTRACT = "0x63905bb681b9e68682f392df2b22b7170f78d300" # CauldronV2Flat
LEGACY_MASTER_CONTRACT = "0x469a991a6bb8cbbfee42e7ab846edeef1bc0b3d3" # CauldronLowRiskV1
VAULT = "0xd96f48665a1410c0cd669a88898eca36b9fc2cce"
COLLATERAL = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"

USER = "0x1111111111111111111111111111111111111111"
LIQUIDATOR = "0x2222222222222222222222222222222222222222"
TX_HASH = "0x" + "ab" * 32
OTHER_TX_HASH = "0x" + "cd" * 32

E18 = 10 ** 18


class FakeContractReader(ContractReader):
    """Serves canned contract state and records every call"""

    def __init__(self):
        self.markets: Dict[str, Dict[str, str]] = {}
        self.tokens: Dict[str, Tuple[str, str, int]] = {}
        self.fees: Dict[str, int] = {}
        self.share_ratio: Tuple[int, int] = (1, 1)
        self.failing: Set[str] = set()
        self.calls: List[Tuple[Any, ...]] = []

    def add_market(self, cauldron: str, master_contract: str = MASTER_CONTRACT,
                   bento_box: str = VAULT, collateral: str = COLLATERAL,
                   symbol: str = "WETH", name: str = "Wrapped Ether", decimals: int = 18) -> None:
        self.markets[cauldron.lower()] = {
            "master_contract": master_contract,
            "bento_box": bento_box,
            "collateral": collateral,
        }
        self.tokens[collateral.lower()] = (symbol, name, decimals)

    def call_count(self, method: str) -> int:
        return len([call for call in self.calls if call[0] == method])

    def _record(self, method: str, address: str, *args) -> None:
        self.calls.append((method, address) + args)
        if method in self.failing:
            raise ResolutionError(address, method, "execution reverted")

    def _market(self, method: str, cauldron: str) -> Dict[str, str]:
        self._record(method, cauldron)
        if cauldron.lower() not in self.markets:
            raise ResolutionError(cauldron, method, "no contract code")
        return self.markets[cauldron.lower()]

    def _token(self, method: str, token: str) -> Tuple[str, str, int]:
        self._record(method, token)
        if token.lower() not in self.tokens:
            raise ResolutionError(token, method, "no contract code")
        return self.tokens[token.lower()]

    def master_contract(self, cauldron, block=None):
        return EvmAddress(self._market("master_contract", cauldron)["master_contract"])

    def bento_box(self, cauldron, block=None):
        return EvmAddress(self._market("bento_box", cauldron)["bento_box"])

    def collateral(self, cauldron, block=None):
        return EvmAddress(self._market("collateral", cauldron)["collateral"])

    def token_symbol(self, token, block=None):
        return self._token("token_symbol", token)[0]

    def token_name(self, token, block=None):
        return self._token("token_name", token)[1]

    def token_decimals(self, token, block=None):
        return self._token("token_decimals", token)[2]

    def fees_earned(self, cauldron, legacy_layout, block=None):
        self._record("fees_earned", cauldron, legacy_layout)
        return self.fees.get(cauldron.lower(), 0)

    def to_amount(self, vault, token, share, round_up=False, block=None):
        self._record("to_amount", vault, token, share)
        numerator, denominator = self.share_ratio
        return share * numerator // denominator


class RecordingWatcher(WatchRegistrar):
    def __init__(self):
        self.calls: List[Tuple[str, str, Optional[int]]] = []

    def begin_watching(self, address, template=CAULDRON_TEMPLATE, block=None):
        self.calls.append((address, template, block))
        return True


def make_event(name: str, params: Dict[str, Any], address: str = CAULDRON,
               sender: str = USER, tx_hash: str = TX_HASH, block: int = 100,
               timestamp: int = 1_650_000_000, tx_index: int = 0, log_index: int = 0,
               input_data: str = "0x", removed: bool = False) -> LogEvent:
    return LogEvent(
        name=name,
        address=EvmAddress(address.lower()),
        params=params,
        transaction=TransactionContext(
            hash=EvmHash(tx_hash),
            index=tx_index,
            sender=EvmAddress(sender.lower()),
            input=HexStr(input_data),
        ),
        block=BlockContext(number=block, timestamp=timestamp),
        log_index=log_index,
        removed=removed,
    )
