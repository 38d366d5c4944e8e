# cauldron_indexer/contracts/__init__.py

from .abi_loader import ABILoader
from .interfaces import ContractReader
from .reader import Web3ContractReader
