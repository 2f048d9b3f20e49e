"""
Value types shared by the catalog, matcher and categorizer.

ExtractedTest is ephemeral: produced per search, copied into a ledger's line
items when a draft is seeded, then discarded.
"""

from dataclasses import dataclass, field
from decimal import Decimal


class Category:
    IN_HOUSE = "inHouse"
    PARTNER_LAB = "partnerLab"

    ALL = (IN_HOUSE, PARTNER_LAB)


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    standard_amount: Decimal
    category: str
    price_note: str = ""        # "BE 800" etc.; display only


@dataclass(frozen=True)
class ExtractedTest:
    name: str
    amount: Decimal
    category: str
    custom: bool = False        # synthesized from an unmatched advice line

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "ExtractedTest":
        return cls(name=entry.name, amount=entry.standard_amount, category=entry.category)

    @classmethod
    def custom_from_line(cls, line: str) -> "ExtractedTest":
        return cls(name=line, amount=Decimal("0"), category=Category.IN_HOUSE, custom=True)


@dataclass
class ExtractionResult:
    """
    Categorized, de-duplicated tests for one prescription.

    all_lines_were_non_billable  every non-empty advice line was an
                                 investigation note; the prescription is
                                 clinical advice, not a lab order.
    """

    in_house: list[ExtractedTest] = field(default_factory=list)
    partner_lab: list[ExtractedTest] = field(default_factory=list)
    all_lines_were_non_billable: bool = False

    @property
    def is_convertible(self) -> bool:
        if self.all_lines_were_non_billable:
            return False
        return bool(self.in_house or self.partner_lab)
