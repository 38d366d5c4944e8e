# cauldron_indexer/pipeline/stream.py

from typing import Any, Dict, Iterable, List

from web3 import Web3

from ..core.logging import LoggingMixin
from ..types import LogPosition


def log_position(log: Dict[str, Any]) -> LogPosition:
    return (int(log["blockNumber"]), int(log["transactionIndex"]), int(log["logIndex"]))


class LogStream(LoggingMixin):
    """eth_getLogs over a block range for a set of addresses, in chain order"""

    def __init__(self, w3: Web3):
        self.w3 = w3

    def latest_block(self) -> int:
        return self.w3.eth.block_number

    def fetch(self, addresses: Iterable[str], from_block: int, to_block: int) -> List[Dict[str, Any]]:
        addresses = [Web3.to_checksum_address(a) for a in addresses]
        if not addresses or from_block > to_block:
            return []

        logs = self.w3.eth.get_logs({
            "address": addresses,
            "fromBlock": from_block,
            "toBlock": to_block,
        })

        self.log_debug("Fetched logs",
                      address_count=len(addresses),
                      from_block=from_block,
                      to_block=to_block,
                      log_count=len(logs))
        return sorted(logs, key=log_position)
