"""
Ledger ⇄ stored lab record fields.

The storage contract uses bare keys for the in-house ledger and the same keys
prefixed with "V" for the partner-lab ledger:

    LAB TEST 1 .. LAB TEST 10 / AMOUNT 1 .. AMOUNT 10
    TOTAL AMOUNT / DISCOUNT PERCENTAGE / AMOUNT RECEIVED / AMOUNT DUE

    VLAB TEST 1 ... VAMOUNT DUE

Existing records depend on these exact names.
"""

from dataclasses import replace

from ..extraction.types import Category
from .money import as_number, clamp_percentage, non_negative, to_decimal
from .reducer import derive_amount_due, parse_item_amount
from .types import MAX_ITEMS, MIN_VISIBLE_ITEMS, LedgerState, LineItem

PREFIXES = {
    Category.IN_HOUSE: "",
    Category.PARTNER_LAB: "V",
}

TOTAL_AMOUNT = "TOTAL AMOUNT"
DISCOUNT_PERCENTAGE = "DISCOUNT PERCENTAGE"
AMOUNT_RECEIVED = "AMOUNT RECEIVED"
AMOUNT_DUE = "AMOUNT DUE"


def lab_test_key(prefix: str, slot: int) -> str:
    return f"{prefix}LAB TEST {slot}"


def amount_key(prefix: str, slot: int) -> str:
    return f"{prefix}AMOUNT {slot}"


def to_wire(state: LedgerState, prefix: str = "") -> dict:
    fields = {}
    for slot, item in enumerate(state.items, start=1):
        fields[lab_test_key(prefix, slot)] = item.test_name or ""
        fields[amount_key(prefix, slot)] = "" if item.amount is None else as_number(item.amount)

    fields[prefix + TOTAL_AMOUNT] = as_number(state.total_amount)
    fields[prefix + DISCOUNT_PERCENTAGE] = as_number(state.discount_percentage)
    fields[prefix + AMOUNT_RECEIVED] = as_number(state.amount_received)
    fields[prefix + AMOUNT_DUE] = as_number(state.amount_due)
    return fields


def from_wire(record: dict, prefix: str = "") -> LedgerState:
    """
    Rebuild a ledger from stored fields.

    The stored total is kept as-is (it may be a manual override); only the
    amount due is re-derived so the floor-at-zero rule holds.
    """
    items = []
    last_filled = 0
    for slot in range(1, MAX_ITEMS + 1):
        name = record.get(lab_test_key(prefix, slot))
        item = LineItem(
            test_name="" if name is None else str(name).strip(),
            amount=parse_item_amount(record.get(amount_key(prefix, slot))),
        )
        if not item.is_blank:
            last_filled = slot
        items.append(item)

    state = LedgerState(
        items=tuple(items),
        visible_items=max(MIN_VISIBLE_ITEMS, last_filled),
    )

    stored_total = to_decimal(record.get(prefix + TOTAL_AMOUNT))
    state = replace(
        state,
        total_amount=state.items_total if stored_total is None else non_negative(stored_total),
        discount_percentage=clamp_percentage(record.get(prefix + DISCOUNT_PERCENTAGE)),
        amount_received=non_negative(record.get(prefix + AMOUNT_RECEIVED)),
    )
    return replace(state, amount_due=derive_amount_due(
        state.total_amount, state.discount_percentage, state.amount_received,
    ))
