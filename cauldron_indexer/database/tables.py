# cauldron_indexer/database/tables.py

from sqlalchemy import Column, String, Integer, BigInteger, Boolean

from .base import ModelBase, TimestampMixin
from .types import EvmAddressType, EvmHashType, DecimalStringType


class DBMarketFeeAccount(ModelBase, TimestampMixin):
    __tablename__ = 'market_fee_accounts'

    id = Column(EvmAddressType(), primary_key=True)
    master_contract = Column(EvmAddressType(), nullable=False, index=True)
    bento_box = Column(EvmAddressType(), nullable=False)
    collateral = Column(EvmAddressType(), nullable=False)
    collateral_symbol = Column(String(64), nullable=False)
    collateral_name = Column(String(256), nullable=True)
    collateral_decimals = Column(Integer, nullable=False)
    total_borrow_elastic = Column(DecimalStringType(), nullable=False)
    fees_earned = Column(DecimalStringType(), nullable=False)
    fees_withdrawn = Column(DecimalStringType(), nullable=False)

    def __repr__(self) -> str:
        return f"<MarketFeeAccount(cauldron={self.id}, symbol={self.collateral_symbol})>"


class DBExchangeRate(ModelBase, TimestampMixin):
    __tablename__ = 'exchange_rates'

    id = Column(EvmAddressType(), primary_key=True)
    rate = Column(DecimalStringType(), nullable=True)


class DBUserLiquidation(ModelBase, TimestampMixin):
    __tablename__ = 'user_liquidations'

    id = Column(String(120), primary_key=True)
    user_address = Column(EvmAddressType(), nullable=False, index=True)
    tx_hash = Column(EvmHashType(), nullable=False, index=True)
    cauldron = Column(EvmAddressType(), nullable=True, index=True)
    timestamp = Column(BigInteger, nullable=True, index=True)
    collateral_removed = Column(DecimalStringType(), nullable=False)
    loan_repaid = Column(DecimalStringType(), nullable=False)
    exchange_rate = Column(DecimalStringType(), nullable=True)
    direct = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<UserLiquidation(user={self.user_address}, tx={self.tx_hash[:10]}...)>"


class DBWatchedContract(ModelBase, TimestampMixin):
    __tablename__ = 'watched_contracts'

    id = Column(EvmAddressType(), primary_key=True)
    template = Column(String(32), nullable=False)
    network = Column(String(32), nullable=False, index=True)
    created_block = Column(BigInteger, nullable=True)


class DBProcessingCheckpoint(ModelBase, TimestampMixin):
    __tablename__ = 'processing_checkpoints'

    id = Column(String(32), primary_key=True)  # network name
    block_number = Column(BigInteger, nullable=False)
    transaction_index = Column(Integer, nullable=False)
    log_index = Column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<ProcessingCheckpoint(network={self.id}, block={self.block_number}, log={self.log_index})>"
