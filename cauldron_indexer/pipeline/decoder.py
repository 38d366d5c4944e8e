# cauldron_indexer/pipeline/decoder.py

from typing import Any, Dict, List, Optional

from web3 import Web3
from web3._utils.events import get_event_data
from web3.exceptions import MismatchedABI
from hexbytes import HexBytes
from eth_utils import is_address

from ..contracts.abi_loader import ABILoader
from ..core.logging import LoggingMixin
from ..mapping.interfaces import CAULDRON_TEMPLATE, FACTORY_TEMPLATE
from ..types import (
    BlockContext,
    EvmAddress,
    EvmHash,
    HexStr,
    LogEvent,
    TransactionContext,
)

TEMPLATE_ABIS = {
    CAULDRON_TEMPLATE: "cauldron",
    FACTORY_TEMPLATE: "bentobox",
}


def to_hex_str(value: Any) -> str:
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return Web3.to_hex(value)


class LogDecoder(LoggingMixin):
    """
    Turns raw web3 logs into LogEvents: decodes parameters against the
    template ABI and attaches transaction and block context. Transactions and
    blocks are cached until clear_cache().
    """

    def __init__(self, w3: Web3, abi_loader: ABILoader):
        self.w3 = w3
        self.abi_loader = abi_loader
        self._transactions: Dict[str, TransactionContext] = {}
        self._blocks: Dict[int, BlockContext] = {}

    def _event_abis(self, template: str) -> List[Dict[str, Any]]:
        return self.abi_loader.event_abis(TEMPLATE_ABIS[template])

    def decode(self, log: Dict[str, Any], template: str) -> Optional[LogEvent]:
        for event_abi in self._event_abis(template):
            try:
                event_data = get_event_data(self.w3.codec, event_abi, log)
            except MismatchedABI:
                continue

            return LogEvent(
                name=event_data["event"],
                address=EvmAddress(log["address"].lower()),
                params=self._normalize_args(event_data["args"]),
                transaction=self.get_transaction(to_hex_str(log["transactionHash"])),
                block=self.get_block(int(log["blockNumber"])),
                log_index=int(log["logIndex"]),
                removed=bool(log.get("removed", False)),
            )

        self.log_debug("Log did not match any event in template",
                      contract_address=log.get("address"),
                      template=template,
                      log_index=log.get("logIndex"))
        return None

    def _normalize_args(self, args) -> Dict[str, Any]:
        normalized = {}
        for key, value in dict(args).items():
            if isinstance(value, (bytes, HexBytes)):
                normalized[key] = Web3.to_hex(value)
            elif isinstance(value, str) and is_address(value):
                normalized[key] = EvmAddress(value.lower())
            else:
                normalized[key] = value
        return normalized

    def get_transaction(self, tx_hash: str) -> TransactionContext:
        tx_hash = tx_hash.lower()
        if tx_hash not in self._transactions:
            tx = self.w3.eth.get_transaction(tx_hash)
            self._transactions[tx_hash] = TransactionContext(
                hash=EvmHash(tx_hash),
                index=int(tx["transactionIndex"]),
                sender=EvmAddress(tx["from"].lower()),
                input=HexStr(to_hex_str(tx["input"])),
            )
        return self._transactions[tx_hash]

    def get_block(self, block_number: int) -> BlockContext:
        if block_number not in self._blocks:
            block = self.w3.eth.get_block(block_number)
            self._blocks[block_number] = BlockContext(
                number=block_number,
                timestamp=int(block["timestamp"]),
            )
        return self._blocks[block_number]

    def clear_cache(self) -> None:
        self._transactions.clear()
        self._blocks.clear()
