"""
Lab record store: the only persistence boundary the coordinator talks to.

Each call is atomic: it either returns the saved record (flat field dict with
id / createdAt) or raises. DB failures surface as PersistenceError so the
caller can keep its local state and retry.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import date

from django.db import DatabaseError, transaction
from django.utils import timezone

from .exceptions import BlockError, PersistenceError, ValidationError
from .models import LabRecord
from .serializers import serialize_lab_record

logger = logging.getLogger(__name__)

# keys that live in model columns, not in LabRecord.record
_IDENTITY_KEYS = ('id', 'createdAt', 'Sno')


class BaseLabRecordStore(ABC):

    @abstractmethod
    def create(self, record: dict) -> dict:
        """Persist a new record; returns it with id / createdAt / Sno filled in."""

    @abstractmethod
    def update(self, lab_id, record: dict) -> dict:
        """Replace the stored fields of an existing record."""

    @abstractmethod
    def delete(self, lab_id) -> bool:
        """Delete by id."""


def next_lab_serial(on_date: date | None = None) -> int:
    """Serial number of the next lab bill of the day (today's count + 1)."""
    on_date = on_date or timezone.localdate()
    return LabRecord.objects.filter(date=on_date).count() + 1


def _record_date(record: dict) -> date:
    raw = str(record.get('DATE') or '').strip()
    if not raw:
        return timezone.localdate()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(
            message='DATE must be YYYY-MM-DD.',
            code='INVALID_DATE',
            detail={'DATE': raw},
        )


def _stored_fields(record: dict) -> dict:
    return {k: v for k, v in record.items() if k not in _IDENTITY_KEYS}


def _not_found(lab_id):
    return BlockError(
        message='Lab record not found',
        code='LAB_NOT_FOUND',
        detail={'lab_id': str(lab_id)},
        http_status=404,
    )


def parse_lab_id(lab_id) -> uuid.UUID:
    """Lab ids are UUIDs; anything else cannot name a stored record."""
    if isinstance(lab_id, uuid.UUID):
        return lab_id
    try:
        return uuid.UUID(str(lab_id))
    except (TypeError, ValueError):
        raise _not_found(lab_id)


class OrmLabRecordStore(BaseLabRecordStore):

    def create(self, record: dict) -> dict:
        on_date = _record_date(record)
        try:
            with transaction.atomic():
                lab = LabRecord.objects.create(
                    patient_id=str(record.get('PATIENT ID') or ''),
                    patient_name=str(record.get('PATIENT NAME') or ''),
                    date=on_date,
                    sno=next_lab_serial(on_date),
                    created_by=str(record.get('createdBy') or ''),
                    record=_stored_fields(record),
                )
        except DatabaseError as exc:
            logger.error("[Store] create failed: %s", exc)
            raise PersistenceError(message='Failed to add lab record', detail={'reason': str(exc)}) from exc

        logger.info("[Store] lab record %s created (patient_id=%s, sno=%d)", lab.id, lab.patient_id, lab.sno)
        return serialize_lab_record(lab)

    def update(self, lab_id, record: dict) -> dict:
        lab_id = parse_lab_id(lab_id)
        on_date = _record_date(record)
        try:
            with transaction.atomic():
                lab = LabRecord.objects.select_for_update().filter(id=lab_id).first()
                if lab is None:
                    raise _not_found(lab_id)
                lab.patient_id = str(record.get('PATIENT ID') or '')
                lab.patient_name = str(record.get('PATIENT NAME') or '')
                lab.date = on_date
                if record.get('createdBy'):
                    lab.created_by = str(record['createdBy'])
                lab.record = _stored_fields(record)
                lab.save()
        except DatabaseError as exc:
            logger.error("[Store] update of %s failed: %s", lab_id, exc)
            raise PersistenceError(message='Failed to update lab record', detail={'reason': str(exc)}) from exc

        logger.info("[Store] lab record %s updated", lab.id)
        return serialize_lab_record(lab)

    def delete(self, lab_id) -> bool:
        lab_id = parse_lab_id(lab_id)
        try:
            deleted, _ = LabRecord.objects.filter(id=lab_id).delete()
        except DatabaseError as exc:
            logger.error("[Store] delete of %s failed: %s", lab_id, exc)
            raise PersistenceError(message='Failed to delete lab record', detail={'reason': str(exc)}) from exc

        if not deleted:
            raise _not_found(lab_id)
        logger.info("[Store] lab record %s deleted", lab_id)
        return True
