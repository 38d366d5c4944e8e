# cauldron_indexer/mapping/heuristics.py

from typing import Optional

from ..core.networks import DIRECT_LIQUIDATION_SELECTOR
from ..utils.addresses import method_selector, same_address


def is_third_party(sender: Optional[str], affected_user: Optional[str]) -> bool:
    """True when the transaction was initiated by someone other than the position owner"""
    return not same_address(sender, affected_user)


def is_direct_liquidation(input_data: Optional[str], selector: str = DIRECT_LIQUIDATION_SELECTOR) -> bool:
    leading = method_selector(input_data)
    return leading is not None and leading == selector.lower()
