# cauldron_indexer/utils/__init__.py

from .amounts import (
    DEFAULT_DECIMALS,
    amount_to_int,
    to_decimal,
    add_amounts,
    subtract_amounts,
)
from .addresses import (
    normalize_address,
    same_address,
    address_set,
    in_address_set,
    method_selector,
)
