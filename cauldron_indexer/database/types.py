# cauldron_indexer/database/types.py

from decimal import Decimal
from typing import Optional

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from ..types import EvmAddress, EvmHash


class EvmAddressType(TypeDecorator):
    impl = String(42)
    cache_ok = True

    def process_bind_param(self, value: Optional[EvmAddress], dialect) -> Optional[str]:
        return str(value).lower() if value else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[EvmAddress]:
        return EvmAddress(value) if value else None


class EvmHashType(TypeDecorator):
    impl = String(66)
    cache_ok = True

    def process_bind_param(self, value: Optional[EvmHash], dialect) -> Optional[str]:
        return str(value).lower() if value else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[EvmHash]:
        return EvmHash(value) if value else None


class DecimalStringType(TypeDecorator):
    """Stores Decimal as its exact string form; NUMERIC columns round on some backends"""
    impl = String(128)
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        return str(value) if value is not None else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        return Decimal(value) if value is not None else None
