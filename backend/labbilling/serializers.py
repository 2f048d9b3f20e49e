"""
Response serializers: domain objects / ORM rows → JSON-able dict.

Output formatting only; no parsing or validation here. Input parsing and
validation live in labbilling/intake/ and labbilling/ledger/events.py.
"""

from .extraction.types import Category
from .ledger.money import as_number
from .ledger.wire import PREFIXES, to_wire


def serialize_lab_record(lab):
    """
    Stored flat field dict plus the identity columns.

    The stored `type` marker is returned as `recordType`: a top-level `type`
    key is reserved for error bodies.
    """
    fields = dict(lab.record)
    record_type = fields.pop('type', '')
    return {
        **fields,
        'recordType': record_type,
        'id': str(lab.id),
        'createdAt': lab.created_at.isoformat(),
        'Sno': lab.sno,
        'createdBy': lab.created_by,
    }


def serialize_lab_records(labs):
    results = [serialize_lab_record(lab) for lab in labs]
    return {
        'count': len(results),
        'labs': results,
    }


def _serialize_test(test):
    return {
        'name': test.name,
        'amount': as_number(test.amount),
        'category': test.category,
        'custom': test.custom,
    }


def serialize_extraction(result):
    return {
        'inHouse': [_serialize_test(t) for t in result.in_house],
        'partnerLab': [_serialize_test(t) for t in result.partner_lab],
        'allLinesWereNonBillable': result.all_lines_were_non_billable,
        'convertible': result.is_convertible,
    }


def serialize_prescription_labs(entries):
    """
    entries: iterable of (Prescription, ExtractionResult) pairs.
    """
    results = [
        {
            'prescription_id': str(prescription.id),
            'patient_id': prescription.patient_id,
            'patient_name': prescription.patient_name,
            'date': prescription.date.isoformat(),
            'advice': prescription.advice,
            'tests': serialize_extraction(result),
        }
        for prescription, result in entries
    ]
    return {
        'count': len(results),
        'prescriptions': results,
    }


def serialize_ledger(state, prefix=''):
    """Wire fields of one ledger plus the values the form displays."""
    return {
        'fields': to_wire(state, prefix),
        'visible_items': state.visible_items,
        'discount_amount': as_number(state.discount_amount),
    }


def serialize_draft(coordinator):
    """A coordinator that has not been submitted yet: what the desk form renders."""
    ledgers = {}
    for category in Category.ALL:
        if coordinator.is_walk_in and category == Category.IN_HOUSE:
            continue
        ledgers[category] = serialize_ledger(coordinator.ledgers[category], PREFIXES[category])

    return {
        'walk_in': coordinator.is_walk_in,
        'patient': coordinator.context.to_record(),
        'ledgers': ledgers,
        'record': coordinator.build_record(),
    }
