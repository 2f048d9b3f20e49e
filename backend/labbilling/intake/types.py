"""
InternalPrescription / PatientContext: the only prescription shapes the
business layer knows about.

Every adapter's transform() returns an InternalPrescription. The coordinator
and services never look at raw source payloads.
"""

from dataclasses import dataclass, field, fields
from typing import Any

MAX_ADVICE_SLOTS = 10

# python attribute → stored record key
CONTEXT_KEYS = {
    "patient_id":    "PATIENT ID",
    "patient_name":  "PATIENT NAME",
    "guardian_name": "GUARDIAN NAME",
    "dob":           "DOB",
    "age":           "AGE",
    "gender":        "GENDER",
    "phone_number":  "PHONE NUMBER",
    "address":       "ADDRESS",
    "doctor_name":   "DOCTOR NAME",
    "department":    "DEPARTMENT",
    "referred_by":   "REFFERED BY",
    "date":          "DATE",
}

# patient-registry (camelCase) key → python attribute
_PATIENT_ALIASES = {
    "patientId": "patient_id",
    "name":      "patient_name",
    "guardian":  "guardian_name",
    "dob":       "dob",
    "age":       "age",
    "gender":    "gender",
    "phone":     "phone_number",
    "address":   "address",
}


@dataclass
class PatientContext:
    """Patient identity and visit metadata shared by both ledgers."""

    patient_id: str = ""
    patient_name: str = ""
    guardian_name: str = ""
    dob: str = ""
    age: Any = ""
    gender: str = ""
    phone_number: str = ""
    address: str = ""
    doctor_name: str = ""
    department: str = ""
    referred_by: str = ""
    date: str = ""       # ISO 8601: "YYYY-MM-DD"

    @classmethod
    def from_record(cls, raw: dict) -> "PatientContext":
        """Accepts both the stored upper-case shape and the camelCase patient shape."""
        raw = raw or {}
        values = {}
        for attr, key in CONTEXT_KEYS.items():
            if raw.get(key) not in (None, ""):
                values[attr] = raw[key]
        for alias, attr in _PATIENT_ALIASES.items():
            if attr not in values and raw.get(alias) not in (None, ""):
                values[attr] = raw[alias]
        return cls(**values)

    def to_record(self) -> dict:
        return {key: getattr(self, attr) for attr, key in CONTEXT_KEYS.items()}

    def with_defaults(self, **defaults) -> "PatientContext":
        """Fill only the blank fields from defaults."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for attr, value in defaults.items():
            if values.get(attr) in (None, ""):
                values[attr] = value
        return PatientContext(**values)


@dataclass
class InternalPrescription:
    """
    Standard internal prescription.

    advice       ordered advice lines as received (slot 1 first)
    raw_payload  original source data, kept for troubleshooting only
    source       where it came from ("clinic_record" / "structured")
    """

    patient: PatientContext
    advice: list[str] = field(default_factory=list)
    date: str = ""
    source: str = ""
    raw_payload: Any = field(default=None, repr=False)

    @property
    def advice_slots(self) -> list[str]:
        """Exactly 10 slots, blank-padded."""
        slots = [str(line or "") for line in self.advice[:MAX_ADVICE_SLOTS]]
        return slots + [""] * (MAX_ADVICE_SLOTS - len(slots))
