"""
Ledger edit events.

Each clinician edit maps to exactly one event; reducer.reduce() is the only
place that interprets them. event_from_dict() turns the JSON shape sent by
the desk client into an event:

  {"type": "item_amount",   "slot": 1, "value": "300"}
  {"type": "item_name",     "slot": 1, "value": "CBP"}
  {"type": "total_amount",  "value": "500"}
  {"type": "discount",      "value": "10"}
  {"type": "amount_received", "value": "400"}
  {"type": "add_slot"}
"""

from dataclasses import dataclass
from typing import Any

from ..exceptions import ValidationError


@dataclass(frozen=True)
class ItemAmountEdited:
    slot: int          # 1..10
    value: Any


@dataclass(frozen=True)
class ItemNameEdited:
    slot: int
    value: Any


@dataclass(frozen=True)
class TotalAmountEdited:
    value: Any


@dataclass(frozen=True)
class DiscountPercentageEdited:
    value: Any


@dataclass(frozen=True)
class AmountReceivedEdited:
    value: Any


@dataclass(frozen=True)
class SlotAdded:
    pass


_SLOT_EVENTS = {
    "item_amount": ItemAmountEdited,
    "item_name":   ItemNameEdited,
}

_VALUE_EVENTS = {
    "total_amount":    TotalAmountEdited,
    "discount":        DiscountPercentageEdited,
    "amount_received": AmountReceivedEdited,
}


def event_from_dict(raw: dict):
    """
    Build an event from its JSON form.

    Raises:
        ValidationError: unknown type, or a slot that is not an integer
    """
    raw = raw if isinstance(raw, dict) else {}
    kind = raw.get("type")

    if kind in _SLOT_EVENTS:
        try:
            slot = int(raw.get("slot"))
        except (TypeError, ValueError):
            raise ValidationError(
                message=f"Ledger event {kind!r} needs an integer slot.",
                code="INVALID_SLOT",
                detail={"slot": raw.get("slot")},
            )
        return _SLOT_EVENTS[kind](slot=slot, value=raw.get("value"))

    if kind in _VALUE_EVENTS:
        return _VALUE_EVENTS[kind](value=raw.get("value"))

    if kind == "add_slot":
        return SlotAdded()

    raise ValidationError(
        message=f"Unknown ledger event type: {kind!r}.",
        code="UNKNOWN_LEDGER_EVENT",
        detail={"known_types": [*_SLOT_EVENTS, *_VALUE_EVENTS, "add_slot"]},
    )
