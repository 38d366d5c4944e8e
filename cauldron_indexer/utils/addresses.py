# cauldron_indexer/utils/addresses.py

from typing import Iterable, Optional, FrozenSet

from ..types import EvmAddress, MethodSelector


def normalize_address(address: Optional[str]) -> Optional[EvmAddress]:
    if address is None:
        return None
    return EvmAddress(str(address).lower())


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive address equality"""
    if a is None or b is None:
        return False
    return a.lower() == b.lower()


def address_set(addresses: Iterable[str]) -> FrozenSet[EvmAddress]:
    return frozenset(EvmAddress(a.lower()) for a in addresses)


def in_address_set(address: Optional[str], addresses: Iterable[str]) -> bool:
    if address is None:
        return False
    return address.lower() in address_set(addresses)


def method_selector(input_data: Optional[str]) -> Optional[MethodSelector]:
    """Leading four bytes of transaction calldata as 0x-prefixed lowercase hex"""
    if not input_data:
        return None
    data = input_data.lower()
    if not data.startswith("0x"):
        data = f"0x{data}"
    if len(data) < 10:
        return None
    return MethodSelector(data[:10])
