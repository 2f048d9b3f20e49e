"""
Service layer: everything the views call.

Services raise BaseAppException subclasses; views never catch them,
exception_handler formats the response.
"""

import logging
from dataclasses import replace
from datetime import date

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from .coordinator import DualLedgerCoordinator
from .exceptions import BlockError, PersistenceError, ValidationError
from .extraction import extract_lab_tests
from .extraction.types import Category
from .intake import PatientContext, get_adapter
from .ledger import MAX_ITEMS, event_from_dict, from_wire, reduce_all
from .ledger.wire import PREFIXES
from .models import LabRecord, Prescription
from .serializers import serialize_lab_record
from .store import OrmLabRecordStore, next_lab_serial, parse_lab_id  # noqa: F401  (next_lab_serial re-exported)

logger = logging.getLogger(__name__)


def _visit_defaults() -> dict:
    return {
        'doctor_name': settings.LAB_DEFAULT_DOCTOR,
        'department': settings.LAB_DEFAULT_DEPARTMENT,
        'referred_by': settings.LAB_DEFAULT_REFERRED_BY,
        'date': timezone.localdate().isoformat(),
    }


# ---------------------------------------------------------------------------
# Prescriptions
# ---------------------------------------------------------------------------

def ingest_prescription(source, raw_body):
    """
    Run the source adapter and store the prescription.
    Raises ValidationError (unknown source / invalid payload).
    """
    adapter = get_adapter(source, raw_body)
    internal = adapter.process()

    prescription = Prescription.objects.create(
        patient_id=str(internal.patient.patient_id),
        patient_name=internal.patient.patient_name,
        date=date.fromisoformat(internal.date) if internal.date else timezone.localdate(),
        advice=internal.advice_slots,
        record=internal.patient.to_record(),
        source=internal.source,
    )
    logger.info("[Prescriptions] stored %s for patient_id=%s (source=%s)",
                prescription.id, prescription.patient_id, prescription.source)
    return prescription


def search_prescriptions_by_patient(patient_id):
    """All prescriptions of one patient, newest first."""
    patient_id = str(patient_id or '').strip()
    if not patient_id:
        raise ValidationError(
            message='Patient id is required',
            code='MISSING_PATIENT_ID',
        )
    return Prescription.objects.filter(patient_id=patient_id).order_by('-date', '-created_at')


def extract_prescription_labs(prescriptions):
    """[(prescription, ExtractionResult), ...] for each prescription."""
    return [(p, extract_lab_tests(p.advice)) for p in prescriptions]


def get_todays_prescription_labs(on_date=None):
    """
    Today's prescriptions that are real lab orders: at least one non-empty
    advice slot and something billable after extraction.
    """
    on_date = on_date or timezone.localdate()
    entries = []
    for prescription in Prescription.objects.filter(date=on_date).order_by('-created_at'):
        if not any(str(line or '').strip() for line in prescription.advice):
            continue
        result = extract_lab_tests(prescription.advice)
        if result.is_convertible:
            entries.append((prescription, result))
    return entries


def get_prescription(prescription_id):
    try:
        return Prescription.objects.get(id=prescription_id)
    except Prescription.DoesNotExist:
        raise BlockError(
            message='Prescription not found',
            code='PRESCRIPTION_NOT_FOUND',
            detail={'prescription_id': str(prescription_id)},
            http_status=404,
        )


# ---------------------------------------------------------------------------
# Drafts / ledgers
# ---------------------------------------------------------------------------

def build_lab_draft(prescription_id):
    """Coordinator seeded from a prescription's extracted tests."""
    prescription = get_prescription(prescription_id)
    result = extract_lab_tests(prescription.advice)
    if not result.is_convertible:
        raise BlockError(
            message='Prescription has no billable lab tests',
            code='NOT_A_LAB_ORDER',
            detail={
                'prescription_id': str(prescription.id),
                'all_lines_were_non_billable': result.all_lines_were_non_billable,
            },
        )

    context = PatientContext.from_record(prescription.record)
    context = context.with_defaults(patient_id=prescription.patient_id, **_visit_defaults())
    return DualLedgerCoordinator.from_extraction(context, result)


def walk_in_draft(doctor_name=None):
    defaults = _visit_defaults()
    return DualLedgerCoordinator.walk_in(
        doctor_name=doctor_name or defaults['doctor_name'],
        department=defaults['department'],
        referred_by=defaults['referred_by'],
        date=defaults['date'],
    )


def reduce_ledger(data):
    """
    Apply a list of edit events to one ledger given in its stored field form.

    data: {"category": "inHouse" | "partnerLab",
           "ledger":   {<wire fields>},
           "visible_items": int (optional),
           "events":   [{"type": ..., ...}, ...]}
    """
    if not isinstance(data, dict):
        raise ValidationError(message='Request body must be a JSON object', code='INVALID_JSON')

    category = data.get('category', Category.IN_HOUSE)
    if category not in PREFIXES:
        raise ValidationError(
            message=f"Unknown billing category: {category!r}.",
            code='UNKNOWN_CATEGORY',
            detail={'known_categories': list(Category.ALL)},
        )

    raw_events = data.get('events') or []
    if not isinstance(raw_events, list):
        raise ValidationError(message='events must be a list', code='INVALID_EVENTS')

    fields = data.get('ledger') or {}
    if not isinstance(fields, dict):
        raise ValidationError(message='ledger must be an object of stored fields', code='INVALID_LEDGER')

    prefix = PREFIXES[category]
    state = from_wire(fields, prefix)
    visible = data.get('visible_items')
    if isinstance(visible, int) and not isinstance(visible, bool) and visible > state.visible_items:
        state = replace(state, visible_items=min(visible, MAX_ITEMS))

    state = reduce_all(state, [event_from_dict(raw) for raw in raw_events])
    return state, prefix


# ---------------------------------------------------------------------------
# Lab records
# ---------------------------------------------------------------------------

def _coordinator_for(payload):
    if not isinstance(payload, dict):
        raise ValidationError(message='Request body must be a JSON object', code='INVALID_JSON')
    coordinator = DualLedgerCoordinator.from_record(payload)
    coordinator.update_context(**{
        k: v for k, v in _visit_defaults().items()
        if not getattr(coordinator.context, k)
    })
    return coordinator


def create_lab_record(payload, created_by=None):
    """Normalize both ledgers of the payload and store them as one new record."""
    coordinator = _coordinator_for(payload)
    coordinator.record_id = None
    coordinator.created_at = None
    return coordinator.submit(OrmLabRecordStore(), created_by)


def update_lab_record(lab_id, payload, created_by=None):
    """
    Replace an existing record.
    Raises ValidationError before touching the store when the id is missing.
    """
    if not lab_id:
        raise ValidationError(
            message='Cannot update lab record without an id',
            code='MISSING_LAB_ID',
        )
    coordinator = _coordinator_for(payload)
    coordinator.record_id = str(lab_id)
    # store.update raises LAB_NOT_FOUND (404) for an unknown id
    return coordinator.submit(OrmLabRecordStore(), created_by)


def delete_lab_record(lab_id):
    if not lab_id:
        raise ValidationError(
            message='Cannot delete lab record without an id',
            code='MISSING_LAB_ID',
        )
    return OrmLabRecordStore().delete(lab_id)


def get_lab_record(lab_id):
    try:
        lab = LabRecord.objects.get(id=parse_lab_id(lab_id))
    except LabRecord.DoesNotExist:
        raise BlockError(
            message='Lab record not found',
            code='LAB_NOT_FOUND',
            detail={'lab_id': str(lab_id)},
            http_status=404,
        )
    return serialize_lab_record(lab)


def search_lab_records(patient_id):
    patient_id = str(patient_id or '').strip()
    if not patient_id:
        raise ValidationError(
            message='Patient id is required',
            code='MISSING_PATIENT_ID',
        )
    try:
        return list(LabRecord.objects.filter(patient_id=patient_id).order_by('-date', '-created_at'))
    except DatabaseError as exc:
        raise PersistenceError(message='Failed to load lab records', detail={'reason': str(exc)}) from exc


def get_todays_labs(on_date=None):
    on_date = on_date or timezone.localdate()
    return list(LabRecord.objects.filter(date=on_date).order_by('sno'))
