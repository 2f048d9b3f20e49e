"""
Ledger reducer: reduce(state, event) -> state.

Every edit path ends in the same derivation

    amount_due = max(0, total - discount - received)
    discount   = round(total * discount% / 100, 2)

so the floor at zero is applied uniformly and the displayed discount always
reconciles with the amount due. Input parsing:
  - blank / non-numeric amounts count as 0 (an item amount stays blank);
    so do amounts of 10**12 or more
  - negative amounts, totals and receipts are clamped to 0
  - discount percentage is clamped to [0, 100]
"""

from dataclasses import replace

from ..exceptions import ValidationError
from .events import (
    AmountReceivedEdited,
    DiscountPercentageEdited,
    ItemAmountEdited,
    ItemNameEdited,
    SlotAdded,
    TotalAmountEdited,
)
from .money import ZERO, clamp_percentage, discount_of, money2, non_negative, to_decimal
from .types import MAX_ITEMS, MIN_VISIBLE_ITEMS, LedgerState, LineItem


def derive_amount_due(total, discount_percentage, received):
    return money2(max(ZERO, total - discount_of(total, discount_percentage) - received))


def parse_item_amount(value):
    number = to_decimal(value)
    if number is None:
        return None
    return non_negative(number)


def _slot_index(slot) -> int:
    if not isinstance(slot, int) or not 1 <= slot <= MAX_ITEMS:
        raise ValidationError(
            message=f"Line item slot must be between 1 and {MAX_ITEMS}.",
            code="INVALID_SLOT",
            detail={"slot": slot},
        )
    return slot - 1


def _with_item(items, slot, **changes):
    index = _slot_index(slot)
    updated = list(items)
    updated[index] = replace(updated[index], **changes)
    return tuple(updated)


def _rederive(state: LedgerState) -> LedgerState:
    return replace(state, amount_due=derive_amount_due(
        state.total_amount, state.discount_percentage, state.amount_received,
    ))


def reduce(state: LedgerState, event) -> LedgerState:
    if isinstance(event, ItemAmountEdited):
        items = _with_item(state.items, event.slot, amount=parse_item_amount(event.value))
        state = replace(state, items=items)
        return _rederive(replace(state, total_amount=state.items_total))

    if isinstance(event, ItemNameEdited):
        name = "" if event.value is None else str(event.value)
        return replace(state, items=_with_item(state.items, event.slot, test_name=name))

    if isinstance(event, TotalAmountEdited):
        return _rederive(replace(state, total_amount=non_negative(event.value)))

    if isinstance(event, DiscountPercentageEdited):
        return _rederive(replace(state, discount_percentage=clamp_percentage(event.value)))

    if isinstance(event, AmountReceivedEdited):
        return _rederive(replace(state, amount_received=non_negative(event.value)))

    if isinstance(event, SlotAdded):
        return replace(state, visible_items=min(state.visible_items + 1, MAX_ITEMS))

    raise ValidationError(
        message=f"Unsupported ledger event: {type(event).__name__}.",
        code="UNKNOWN_LEDGER_EVENT",
    )


def reduce_all(state: LedgerState, events) -> LedgerState:
    for event in events:
        state = reduce(state, event)
    return state


def blank_ledger() -> LedgerState:
    return LedgerState()


def seed_ledger(tests) -> LedgerState:
    """
    Ledger pre-filled from extracted tests (first 10, in order).

    Received defaults to the full total, so a freshly seeded ledger shows
    nothing due until the clinician edits it.
    """
    tests = list(tests)
    items = [LineItem(test_name=t.name, amount=money2(t.amount)) for t in tests[:MAX_ITEMS]]
    items += [LineItem()] * (MAX_ITEMS - len(items))

    state = LedgerState(
        items=tuple(items),
        visible_items=max(MIN_VISIBLE_ITEMS, min(len(tests), MAX_ITEMS)),
    )
    total = state.items_total
    return _rederive(replace(state, total_amount=total, amount_received=total))
