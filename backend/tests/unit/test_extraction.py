"""
Catalog, matcher, dedupe and categorize.

Pure Python against the bundled catalog (no database).
"""
import json
from decimal import Decimal

import pytest
from django.core.exceptions import ImproperlyConfigured

from labbilling.extraction import (
    Catalog,
    Category,
    ExtractedTest,
    categorize,
    dedupe,
    extract_lab_tests,
    get_catalog,
    load_catalog,
    match,
)


def _names(tests):
    return [t.name for t in tests]


# ── Catalog ────────────────────────────────────────────────────────────────

class TestCatalog:

    def test_bundled_catalog_loads(self):
        catalog = get_catalog()
        assert len(catalog) > 0
        assert catalog.version

    def test_lookup_is_case_insensitive(self):
        entry = get_catalog().lookup('cbp')
        assert entry.name == 'CBP'
        assert entry.standard_amount == Decimal('250')
        assert entry.category == Category.IN_HOUSE

    def test_partner_lab_entry(self):
        entry = get_catalog().lookup('IOP')
        assert entry.category == Category.PARTNER_LAB
        assert entry.standard_amount == Decimal('400')

    def test_price_note_kept_apart_from_amount(self):
        entry = get_catalog().lookup('SYRINGYING')
        assert entry.standard_amount == Decimal('400')
        assert entry.price_note == 'BE 800'

    def test_names_are_unique(self):
        names = [e.name.lower() for e in get_catalog()]
        assert len(names) == len(set(names))

    def test_duplicate_name_rejected(self):
        with pytest.raises(ImproperlyConfigured):
            Catalog.from_dict({'entries': [
                {'name': 'CBP', 'standard_amount': '250', 'category': 'inHouse'},
                {'name': 'cbp', 'standard_amount': '100', 'category': 'inHouse'},
            ]})

    def test_unknown_category_rejected(self):
        with pytest.raises(ImproperlyConfigured):
            Catalog.from_dict({'entries': [
                {'name': 'CBP', 'standard_amount': '250', 'category': 'outside'},
            ]})

    def test_negative_amount_rejected(self):
        with pytest.raises(ImproperlyConfigured):
            Catalog.from_dict({'entries': [
                {'name': 'CBP', 'standard_amount': '-1', 'category': 'inHouse'},
            ]})

    def test_load_from_custom_path(self, tmp_path):
        path = tmp_path / 'catalog.json'
        path.write_text(json.dumps({'version': 't1', 'entries': [
            {'name': 'XYZ', 'standard_amount': '10', 'category': 'inHouse'},
        ]}))

        catalog = load_catalog(path)
        assert catalog.version == 't1'
        assert _names(catalog) == ['XYZ']

    def test_missing_file_is_configuration_error(self, tmp_path):
        with pytest.raises(ImproperlyConfigured):
            load_catalog(tmp_path / 'nope.json')


# ── Matcher ────────────────────────────────────────────────────────────────

class TestMatch:

    def test_exact_match(self):
        [test] = match('IOP')
        assert test.name == 'IOP'
        assert test.amount == Decimal('400')
        assert test.category == Category.PARTNER_LAB
        assert test.custom is False

    def test_case_and_whitespace_insensitive(self):
        [test] = match('  hba1c ')
        assert test.name == 'HBA1C'

    def test_no_substring_matching(self):
        """'CBP 2 times' is not CBP; it becomes a custom line."""
        [test] = match('CBP 2 times')
        assert test.custom is True
        assert test.name == 'CBP 2 times'

    def test_unmatched_line_becomes_custom_in_house_zero(self):
        [test] = match('Vitamin D3')
        assert test.name == 'Vitamin D3'
        assert test.amount == Decimal('0')
        assert test.category == Category.IN_HOUSE
        assert test.custom is True

    def test_investigation_note_yields_nothing(self):
        assert match('Investigations needed') == []
        assert match('further INVESTIGATION after review') == []

    def test_blank_line_rejected(self):
        with pytest.raises(ValueError):
            match('   ')

    def test_custom_catalog(self):
        catalog = Catalog.from_dict({'entries': [
            {'name': 'ZZ', 'standard_amount': '5', 'category': 'partnerLab'},
        ]})
        [test] = match('zz', catalog=catalog)
        assert test.category == Category.PARTNER_LAB


# ── Dedupe / categorize ────────────────────────────────────────────────────

class TestDedupe:

    def test_first_occurrence_wins(self):
        first = ExtractedTest('IOP', Decimal('400'), Category.PARTNER_LAB)
        second = ExtractedTest('iop', Decimal('0'), Category.IN_HOUSE, custom=True)
        assert dedupe([first, second]) == [first]

    def test_idempotent(self):
        tests = match('CBP') + match('IOP') + match('CBP')
        once = dedupe(tests)
        assert dedupe(once) == once
        assert _names(once) == ['CBP', 'IOP']


class TestCategorize:

    def test_splits_by_category(self):
        result = categorize(match('IOP') + match('CBP'))
        assert _names(result.in_house) == ['CBP']
        assert _names(result.partner_lab) == ['IOP']

    def test_flag_needs_at_least_one_line(self):
        assert categorize([], advice_lines=['', '  ']).all_lines_were_non_billable is False

    def test_flag_false_when_any_line_is_billable(self):
        result = categorize(match('CBP'), advice_lines=['CBP', 'investigations needed'])
        assert result.all_lines_were_non_billable is False


# ── extract_lab_tests end to end ───────────────────────────────────────────

class TestExtractLabTests:

    def test_mixed_prescription(self, advice_lines):
        result = extract_lab_tests(advice_lines)

        assert [(t.name, t.amount) for t in result.in_house] == [('CBP', Decimal('250'))]
        assert [(t.name, t.amount) for t in result.partner_lab] == [('IOP', Decimal('400'))]
        assert result.all_lines_were_non_billable is False
        assert result.is_convertible is True

    def test_investigation_only_prescription(self):
        result = extract_lab_tests(['investigations needed'])

        assert result.all_lines_were_non_billable is True
        assert result.in_house == []
        assert result.partner_lab == []
        assert result.is_convertible is False

    def test_repeated_test_kept_once(self):
        result = extract_lab_tests(['IOP', 'IOP'])
        assert _names(result.partner_lab) == ['IOP']

    def test_order_follows_advice_slots(self):
        result = extract_lab_tests(['ESR', 'CBP', 'FBS'])
        assert _names(result.in_house) == ['ESR', 'CBP', 'FBS']

    def test_blank_slots_skipped(self):
        result = extract_lab_tests(['', None, 'CBP', ''])
        assert _names(result.in_house) == ['CBP']

    def test_only_first_ten_slots_read(self):
        lines = [''] * 10 + ['CBP']
        result = extract_lab_tests(lines)
        assert result.in_house == []
        assert result.is_convertible is False

    def test_all_blank_is_not_convertible(self):
        result = extract_lab_tests([''] * 10)
        assert result.all_lines_were_non_billable is False
        assert result.is_convertible is False
