# cauldron_indexer/mapping/cauldron.py

from decimal import Decimal

from ..contracts.interfaces import ContractReader
from ..core.logging import LoggingMixin
from ..core.networks import NetworkConfig
from ..types import ZERO, LogEvent
from ..utils.addresses import normalize_address
from ..utils.amounts import amount_to_int, to_decimal, add_amounts, subtract_amounts
from .accessors import EntityAccessor
from .heuristics import is_third_party, is_direct_liquidation


class CauldronHandlers(LoggingMixin):
    """
    Cauldron log handlers. One instance serves every cauldron on a network;
    MarketCapabilities selects between the protocol versions.
    """

    def __init__(self, accessor: EntityAccessor, reader: ContractReader, network: NetworkConfig):
        self.accessor = accessor
        self.reader = reader
        self.network = network
        self.capabilities = network.capabilities
        self.handler_map = {
            "LogAccrue": self._handle_accrue,
            "LogBorrow": self._handle_borrow,
            "LogRepay": self._handle_repay,
            "LogWithdrawFees": self._handle_withdraw_fees,
            "LogRemoveCollateral": self._handle_remove_collateral,
            "LogExchangeRate": self._handle_exchange_rate,
        }

    def handle(self, event: LogEvent) -> bool:
        handler = self.handler_map.get(event.name)
        if handler is None:
            self.log_debug("No handler found for event",
                          event_name=event.name,
                          contract_address=event.address)
            return False

        handler(event)
        return True

    def _handle_accrue(self, event: LogEvent) -> None:
        account = self.accessor.get_market_fee_account(event.address, event.block.number)
        accrued = to_decimal(event.params["accruedAmount"])

        account.fees_earned = add_amounts(account.fees_earned, accrued)
        account.total_borrow_elastic = add_amounts(account.total_borrow_elastic, accrued)
        self.accessor.save(account)

    def _handle_borrow(self, event: LogEvent) -> None:
        account = self.accessor.get_market_fee_account(event.address, event.block.number)
        borrowed = to_decimal(event.params["amount"])
        account.total_borrow_elastic = add_amounts(account.total_borrow_elastic, borrowed)

        # The fee share of a borrow against an open loan is not reliable in the
        # event, so feesEarned is re-read from accrueInfo instead of accumulated.
        legacy_layout = self.network.is_legacy_master_contract(account.master_contract)
        fees_earned = self.reader.fees_earned(
            account.id, legacy_layout=legacy_layout, block=event.block.number
        )
        account.fees_earned = to_decimal(fees_earned)

        self.log_debug("Recomputed fees earned from accrueInfo",
                      contract_address=account.id,
                      block_number=event.block.number,
                      legacy_layout=legacy_layout,
                      fees_earned=str(account.fees_earned))
        self.accessor.save(account)

    def _handle_repay(self, event: LogEvent) -> None:
        account = self.accessor.get_market_fee_account(event.address, event.block.number)
        repaid = to_decimal(event.params["amount"])
        account.total_borrow_elastic = subtract_amounts(account.total_borrow_elastic, repaid)
        self.accessor.save(account)

        user = event.params["to"]
        tx = event.transaction
        if not is_third_party(tx.sender, user):
            return

        liquidation = self.accessor.get_user_liquidation(user, tx.hash)
        liquidation.timestamp = event.block.timestamp
        liquidation.loan_repaid = repaid
        liquidation.exchange_rate = self.accessor.current_exchange_rate(event.address)
        if self.capabilities.direct_liquidation_flag:
            liquidation.direct = is_direct_liquidation(tx.input, self.network.direct_liquidation_selector)

        self.log_info("Recorded liquidation repay",
                     entity_id=liquidation.id,
                     tx_hash=tx.hash,
                     contract_address=event.address,
                     loan_repaid=str(repaid),
                     direct=liquidation.direct)
        self.accessor.save(liquidation)

    def _handle_withdraw_fees(self, event: LogEvent) -> None:
        account = self.accessor.get_market_fee_account(event.address, event.block.number)
        withdrawn = to_decimal(event.params["feesEarnedFraction"])

        account.fees_withdrawn = add_amounts(account.fees_withdrawn, withdrawn)
        account.fees_earned = ZERO
        self.accessor.save(account)

    def _handle_remove_collateral(self, event: LogEvent) -> None:
        user = event.params["from"]
        tx = event.transaction
        if not is_third_party(tx.sender, user):
            return

        removed = self._collateral_amount(event, amount_to_int(event.params["share"]))

        liquidation = self.accessor.get_user_liquidation(user, tx.hash)
        liquidation.collateral_removed = removed
        liquidation.cauldron = normalize_address(event.address)

        self.log_info("Recorded liquidation collateral removal",
                     entity_id=liquidation.id,
                     tx_hash=tx.hash,
                     contract_address=event.address,
                     collateral_removed=str(removed))
        self.accessor.save(liquidation)

    def _collateral_amount(self, event: LogEvent, share: int) -> Decimal:
        if not self.capabilities.corrected_collateral_conversion:
            return to_decimal(share)

        account = self.accessor.ensure_market_fee_account(event.address, event.block.number)
        amount = self.reader.to_amount(
            account.bento_box, account.collateral, share,
            round_up=False, block=event.block.number,
        )
        return to_decimal(amount, account.collateral_decimals)

    def _handle_exchange_rate(self, event: LogEvent) -> None:
        exchange_rate = self.accessor.get_exchange_rate(event.address)
        exchange_rate.rate = to_decimal(event.params["rate"])
        self.accessor.save(exchange_rate)
