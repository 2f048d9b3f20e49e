"""
DualLedgerCoordinator: one lab bill being edited.

Owns the in-house ledger and the partner-lab ledger. They never share items
but share one PatientContext, are submitted together as one record, and are
reset together afterwards.

Lifecycle:
  from_extraction() / walk_in() / from_record()
      → dispatch() edits (each one touches exactly one ledger)
      → submit(store, created_by)
      → reset() (automatic after a successful submit)
"""

import logging
import threading
from dataclasses import replace

from .exceptions import BaseAppException, BlockError, PersistenceError, ValidationError
from .extraction.types import Category, ExtractionResult
from .intake.types import PatientContext
from .ledger import LedgerState, blank_ledger, from_wire, reduce, seed_ledger, to_wire
from .ledger.wire import PREFIXES

logger = logging.getLogger(__name__)

RECORD_TYPE = 'combined'
UNKNOWN_USER = 'Unknown User'

# walk-in customers have no registered identity; only these stay editable
WALK_IN_EDITABLE_FIELDS = ('patient_name', 'doctor_name')


class DualLedgerCoordinator:

    def __init__(self, context: PatientContext | None = None, in_house: LedgerState | None = None,
                 partner_lab: LedgerState | None = None, walk_in: bool = False,
                 record_id=None, created_at=None):
        self.context = context or PatientContext()
        self.ledgers = {
            Category.IN_HOUSE: in_house or blank_ledger(),
            Category.PARTNER_LAB: partner_lab or blank_ledger(),
        }
        self.is_walk_in = walk_in
        self.record_id = record_id
        self.created_at = created_at
        self._submit_lock = threading.Lock()

    # ── construction ───────────────────────────────────────────────────────

    @classmethod
    def from_extraction(cls, context: PatientContext, result: ExtractionResult) -> "DualLedgerCoordinator":
        """Draft seeded from a prescription's extracted tests."""
        return cls(
            context=context,
            in_house=seed_ledger(result.in_house),
            partner_lab=seed_ledger(result.partner_lab),
        )

    @classmethod
    def walk_in(cls, doctor_name: str | None = None, **visit) -> "DualLedgerCoordinator":
        """
        General / walk-in customer: blank ledgers, only the partner-lab side
        in use. `visit` may carry department / referred_by / date.
        """
        return cls(
            context=PatientContext(doctor_name=doctor_name or '', **visit),
            walk_in=True,
        )

    @classmethod
    def from_record(cls, record: dict) -> "DualLedgerCoordinator":
        """Existing stored record, opened for editing (keeps id / createdAt)."""
        return cls(
            context=PatientContext.from_record(record),
            in_house=from_wire(record, PREFIXES[Category.IN_HOUSE]),
            partner_lab=from_wire(record, PREFIXES[Category.PARTNER_LAB]),
            record_id=record.get('id') or None,
            created_at=record.get('createdAt') or None,
        )

    # ── editing ────────────────────────────────────────────────────────────

    @property
    def in_house(self) -> LedgerState:
        return self.ledgers[Category.IN_HOUSE]

    @property
    def partner_lab(self) -> LedgerState:
        return self.ledgers[Category.PARTNER_LAB]

    def dispatch(self, category: str, event) -> LedgerState:
        """Apply one edit to one ledger; the other ledger is never touched."""
        if category not in self.ledgers:
            raise ValidationError(
                message=f"Unknown billing category: {category!r}.",
                code='UNKNOWN_CATEGORY',
                detail={'known_categories': list(Category.ALL)},
            )
        if self.is_walk_in and category == Category.IN_HOUSE:
            raise BlockError(
                message='Walk-in lab bills only use the partner-lab ledger.',
                code='IN_HOUSE_LEDGER_HIDDEN',
            )

        self.ledgers[category] = reduce(self.ledgers[category], event)
        return self.ledgers[category]

    def update_context(self, **changes) -> PatientContext:
        unknown = [name for name in changes if not hasattr(self.context, name)]
        if unknown:
            raise ValidationError(
                message='Unknown patient field.',
                code='UNKNOWN_FIELD',
                detail={'fields': unknown},
            )
        if self.is_walk_in:
            locked = [name for name in changes if name not in WALK_IN_EDITABLE_FIELDS]
            if locked:
                raise BlockError(
                    message='Only patient name and doctor name can be edited for a walk-in customer.',
                    code='PATIENT_CONTEXT_LOCKED',
                    detail={'fields': locked},
                )
        self.context = replace(self.context, **changes)
        return self.context

    # ── submit / reset ─────────────────────────────────────────────────────

    def build_record(self, created_by: str | None = None) -> dict:
        """
        Merge context + both ledgers into the stored field layout.

        Both key families (bare and V-prefixed) are always emitted, even for
        an untouched ledger.
        """
        record = self.context.to_record()
        record.update(to_wire(self.in_house, PREFIXES[Category.IN_HOUSE]))
        record.update(to_wire(self.partner_lab, PREFIXES[Category.PARTNER_LAB]))
        record['createdBy'] = created_by or UNKNOWN_USER
        record['type'] = RECORD_TYPE

        if self.record_id:
            record['id'] = str(self.record_id)
        if self.created_at:
            record['createdAt'] = self.created_at
        return record

    def submit(self, store, created_by: str | None = None) -> dict:
        """
        Persist both ledgers as one record, then reset.

        Raises:
            BlockError:       a submit is already in flight
            PersistenceError: the store failed; ledgers are left as they were
        """
        if not self._submit_lock.acquire(blocking=False):
            raise BlockError(
                message='This lab bill is already being submitted.',
                code='SUBMIT_IN_PROGRESS',
            )

        try:
            record = self.build_record(created_by)
            try:
                if self.record_id:
                    saved = store.update(self.record_id, record)
                else:
                    saved = store.create(record)
            except BaseAppException:
                logger.warning("[Coordinator] submit rejected for patient_id=%s", self.context.patient_id)
                raise
            except Exception as exc:
                logger.exception("[Coordinator] submit failed for patient_id=%s", self.context.patient_id)
                raise PersistenceError(
                    message='Failed to save lab record',
                    detail={'reason': str(exc)},
                ) from exc

            logger.info("[Coordinator] submitted lab record %s", saved.get('id'))
            self.reset()
            return saved
        finally:
            self._submit_lock.release()

    def reset(self) -> None:
        """Blank both ledgers (not re-seeded); patient context is kept."""
        self.ledgers = {
            Category.IN_HOUSE: blank_ledger(),
            Category.PARTNER_LAB: blank_ledger(),
        }
        self.record_id = None
        self.created_at = None
