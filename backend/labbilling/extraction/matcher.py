"""
Advice-line matcher.

Rules, in order:
  1. a line mentioning "investigation" is a clinical note → no tests
  2. the whole line must equal a catalog name (case-insensitive); no
     substring matching, since several test names are prefixes of others
  3. no catalog hit → one custom in-house test with amount 0, for the
     clinician to price by hand
"""

from .catalog import Catalog, get_catalog
from .types import ExtractedTest

INVESTIGATION_MARKER = "investigation"


def is_investigation_note(line: str) -> bool:
    return INVESTIGATION_MARKER in (line or "").lower()


def match(advice_line: str, catalog: Catalog | None = None) -> list[ExtractedTest]:
    line = (advice_line or "").strip()
    if not line:
        raise ValueError("match() needs a non-empty advice line")

    if is_investigation_note(line):
        return []

    catalog = catalog if catalog is not None else get_catalog()
    entry = catalog.lookup(line)
    if entry is None:
        return [ExtractedTest.custom_from_line(line)]
    return [ExtractedTest.from_entry(entry)]
