"""
Concrete adapters.

New source: add a class here, then register it in factory.py.

Registered sources:
  clinic_record: ClinicRecordAdapter  (flat stored row, SCREAMING keys, ADVICE 1..10)
  structured   : StructuredAdapter    (nested JSON, advice as a list)
"""

from typing import Any

from .base import BaseIntakeAdapter, raise_validation_errors
from .types import MAX_ADVICE_SLOTS, InternalPrescription, PatientContext


# ── ClinicRecordAdapter ────────────────────────────────────────────────────
#
# The clinic desk app's prescription row, one flat object:
#
# {
#   "PATIENT ID":   "P-1042",
#   "PATIENT NAME": "Ravi Kumar",
#   "GUARDIAN NAME": "S. Kumar",
#   "AGE":          54,
#   "GENDER":       "Male",
#   "PHONE NUMBER": "9876543210",
#   "DATE":         "2024-06-03",
#   "ADVICE 1":     "IOP",
#   "ADVICE 2":     "investigations needed",
#   "ADVICE 3":     "CBP",
#   ...
#   "ADVICE 10":    ""
# }
#
# Advice slots keep their position; a blank slot stays blank.

class ClinicRecordAdapter(BaseIntakeAdapter):
    source = "clinic_record"

    def parse(self) -> Any:
        self._parsed = self._load_json()
        return self._parsed

    @staticmethod
    def _collect_advice_slots(raw: dict) -> list[str]:
        """ADVICE 1 .. ADVICE 10 → ordered list; missing slots become ""."""
        slots = []
        for i in range(1, MAX_ADVICE_SLOTS + 1):
            value = raw.get(f"ADVICE {i}")
            slots.append("" if value is None else str(value))
        return slots

    def transform(self) -> InternalPrescription:
        raw = self._parsed
        patient = PatientContext.from_record(raw)

        return InternalPrescription(
            source=self.source,
            raw_payload=raw,
            patient=patient,
            advice=self._collect_advice_slots(raw),
            date=str(raw.get("DATE") or "").strip(),
        )


# ── StructuredAdapter ──────────────────────────────────────────────────────
#
# Nested JSON used by the booking front end:
#
# {
#   "patient": {
#     "patientId": "P-1042",
#     "name":      "Ravi Kumar",
#     "phone":     "9876543210",
#     "age":       54,
#     "gender":    "Male"
#   },
#   "doctor": "Dr. Srilatha ch",
#   "date":   "2024-06-03",
#   "advice": ["IOP", "investigations needed", "CBP"]
# }
#
# Differences from clinic_record:
#   1. patient fields are nested and camelCase
#   2. advice is a list (validate() rejects more than 10 lines)
#   3. doctor name sits at the top level

class StructuredAdapter(BaseIntakeAdapter):
    source = "structured"

    def parse(self) -> Any:
        self._parsed = self._load_json()
        errors = []
        patient_raw = self._parsed.get("patient")
        if patient_raw is not None and not isinstance(patient_raw, dict):
            errors.append({"field": "patient", "message": "Patient must be an object."})
        advice = self._parsed.get("advice")
        if advice is not None and not isinstance(advice, (list, str)):
            errors.append({"field": "advice", "message": "Advice must be a list of lines or a single line."})
        if errors:
            raise_validation_errors(errors)
        return self._parsed

    def transform(self) -> InternalPrescription:
        raw = self._parsed
        patient_raw = raw.get("patient") or {}
        patient = PatientContext.from_record(patient_raw)
        if raw.get("doctor"):
            patient.doctor_name = str(raw["doctor"]).strip()

        advice = raw.get("advice") or []
        if isinstance(advice, str):
            advice = [advice]

        return InternalPrescription(
            source=self.source,
            raw_payload=raw,
            patient=patient,
            advice=list(advice),
            date=str(raw.get("date") or "").strip(),
        )
