from .events import (
    AmountReceivedEdited,
    DiscountPercentageEdited,
    ItemAmountEdited,
    ItemNameEdited,
    SlotAdded,
    TotalAmountEdited,
    event_from_dict,
)
from .reducer import blank_ledger, reduce, reduce_all, seed_ledger
from .types import MAX_ITEMS, MIN_VISIBLE_ITEMS, LedgerState, LineItem
from .wire import PREFIXES, from_wire, to_wire

__all__ = [
    "AmountReceivedEdited",
    "DiscountPercentageEdited",
    "ItemAmountEdited",
    "ItemNameEdited",
    "LedgerState",
    "LineItem",
    "MAX_ITEMS",
    "MIN_VISIBLE_ITEMS",
    "PREFIXES",
    "SlotAdded",
    "TotalAmountEdited",
    "blank_ledger",
    "event_from_dict",
    "from_wire",
    "reduce",
    "reduce_all",
    "seed_ledger",
    "to_wire",
]
