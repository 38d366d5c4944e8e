# cauldron_indexer/database/repositories.py

from typing import List

from sqlalchemy.orm import Session

from ..types import (
    EvmAddress,
    MarketFeeAccount,
    ExchangeRate,
    UserLiquidation,
    WatchedContract,
    ProcessingCheckpoint,
)
from .base_repository import BaseRepository
from .tables import (
    DBMarketFeeAccount,
    DBExchangeRate,
    DBUserLiquidation,
    DBWatchedContract,
    DBProcessingCheckpoint,
)


class MarketFeeAccountRepository(BaseRepository[DBMarketFeeAccount, MarketFeeAccount]):
    entity_class = MarketFeeAccount
    model_class = DBMarketFeeAccount


class ExchangeRateRepository(BaseRepository[DBExchangeRate, ExchangeRate]):
    entity_class = ExchangeRate
    model_class = DBExchangeRate


class UserLiquidationRepository(BaseRepository[DBUserLiquidation, UserLiquidation]):
    entity_class = UserLiquidation
    model_class = DBUserLiquidation
    column_map = {'user': 'user_address', 'transaction': 'tx_hash'}

    def get_by_user(self, session: Session, user: EvmAddress) -> List[DBUserLiquidation]:
        try:
            return session.query(self.model_class).filter(
                self.model_class.user_address == user
            ).order_by(self.model_class.timestamp, self.model_class.id).all()
        except Exception as e:
            self.logger.error(f"Error getting liquidations for user {user}: {e}")
            raise


class WatchedContractRepository(BaseRepository[DBWatchedContract, WatchedContract]):
    entity_class = WatchedContract
    model_class = DBWatchedContract

    def get_by_network(self, session: Session, network: str) -> List[DBWatchedContract]:
        return session.query(self.model_class).filter(
            self.model_class.network == network
        ).order_by(self.model_class.created_block, self.model_class.id).all()


class ProcessingCheckpointRepository(BaseRepository[DBProcessingCheckpoint, ProcessingCheckpoint]):
    entity_class = ProcessingCheckpoint
    model_class = DBProcessingCheckpoint


REPOSITORIES = {
    repo.entity_class.kind(): repo
    for repo in (
        MarketFeeAccountRepository,
        ExchangeRateRepository,
        UserLiquidationRepository,
        WatchedContractRepository,
        ProcessingCheckpointRepository,
    )
}
