"""
Prescription advice → categorized lab tests.

extract_lab_tests() is the entry point the service layer uses; dedupe() and
categorize() are exposed on their own for callers that already hold matcher
output.
"""

from .catalog import Catalog
from .matcher import is_investigation_note, match
from .types import Category, ExtractedTest, ExtractionResult

MAX_ADVICE_LINES = 10


def dedupe(tests: list[ExtractedTest]) -> list[ExtractedTest]:
    """Drop repeated test names (case-insensitive), keeping the first occurrence."""
    seen = set()
    unique = []
    for test in tests:
        key = test.name.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(test)
    return unique


def categorize(tests: list[ExtractedTest], advice_lines=()) -> ExtractionResult:
    """
    Split de-duplicated tests by billing category.

    advice_lines is only needed to compute all_lines_were_non_billable:
    true iff there is at least one non-empty line and every one of them is an
    investigation note.
    """
    result = ExtractionResult()
    for test in tests:
        if test.category == Category.PARTNER_LAB:
            result.partner_lab.append(test)
        else:
            result.in_house.append(test)

    non_empty = [line for line in advice_lines if (line or "").strip()]
    result.all_lines_were_non_billable = bool(non_empty) and all(
        is_investigation_note(line) for line in non_empty
    )
    return result


def extract_lab_tests(advice_lines, catalog: Catalog | None = None) -> ExtractionResult:
    """Run match → dedupe → categorize over up to 10 ordered advice slots."""
    lines = list(advice_lines)[:MAX_ADVICE_LINES]

    matched = []
    for line in lines:
        if not (line or "").strip():
            continue
        matched.extend(match(line, catalog=catalog))

    return categorize(dedupe(matched), advice_lines=lines)
