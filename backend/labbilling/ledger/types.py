"""
Ledger state: one billing category's line items and derived totals.

States are frozen; every edit goes through reducer.reduce() and yields a new
state. All amounts are Decimal rounded to 0.01.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from .money import ZERO, D, discount_of, money2

MAX_ITEMS = 10
MIN_VISIBLE_ITEMS = 2


@dataclass(frozen=True)
class LineItem:
    test_name: str = ""
    amount: Decimal | None = None     # None = blank slot

    @property
    def is_blank(self) -> bool:
        return not self.test_name and self.amount is None


def _blank_items() -> tuple[LineItem, ...]:
    return tuple(LineItem() for _ in range(MAX_ITEMS))


@dataclass(frozen=True)
class LedgerState:
    items: tuple[LineItem, ...] = field(default_factory=_blank_items)
    total_amount: Decimal = ZERO
    discount_percentage: Decimal = ZERO
    amount_received: Decimal = ZERO
    amount_due: Decimal = ZERO
    visible_items: int = MIN_VISIBLE_ITEMS

    @property
    def discount_amount(self) -> Decimal:
        return discount_of(self.total_amount, self.discount_percentage)

    @property
    def items_total(self) -> Decimal:
        return money2(sum((D(item.amount) for item in self.items), ZERO))

    @property
    def filled_items(self) -> list[LineItem]:
        return [item for item in self.items if not item.is_blank]
