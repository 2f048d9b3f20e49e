"""
Intake adapter system:
- ClinicRecordAdapter (flat stored row)
- StructuredAdapter (nested JSON)
- the get_adapter factory
- validate() failure paths
"""

import json
import pytest

from labbilling.exceptions import ValidationError
from labbilling.intake import PatientContext, get_adapter
from labbilling.intake.adapters import ClinicRecordAdapter, StructuredAdapter
from labbilling.intake.types import InternalPrescription


# ── payloads ──────────────────────────────────────────────────────────────

CLINIC_RECORD_PAYLOAD = {
    "PATIENT ID": "P-1042",
    "PATIENT NAME": "Ravi Kumar",
    "GUARDIAN NAME": "S. Kumar",
    "AGE": 54,
    "GENDER": "Male",
    "PHONE NUMBER": "9876543210",
    "DATE": "2024-06-03",
    "ADVICE 1": "IOP",
    "ADVICE 2": "investigations needed",
    "ADVICE 3": "CBP",
}

STRUCTURED_PAYLOAD = {
    "patient": {
        "patientId": "P-2001",
        "name": "Lakshmi Devi",
        "phone": "9000000001",
        "age": 61,
        "gender": "Female",
    },
    "doctor": "Dr. Rao",
    "date": "2024-06-04",
    "advice": ["HBA1C", "FIELDS"],
}


# ── ClinicRecordAdapter ───────────────────────────────────────────────────

class TestClinicRecordAdapter:

    def test_process_from_bytes(self):
        adapter = ClinicRecordAdapter(json.dumps(CLINIC_RECORD_PAYLOAD).encode())
        rx = adapter.process()

        assert isinstance(rx, InternalPrescription)
        assert rx.source == "clinic_record"
        assert rx.patient.patient_id == "P-1042"
        assert rx.patient.patient_name == "Ravi Kumar"
        assert rx.patient.phone_number == "9876543210"
        assert rx.date == "2024-06-03"

    def test_advice_slots_keep_position(self):
        rx = ClinicRecordAdapter(dict(CLINIC_RECORD_PAYLOAD)).process()

        assert len(rx.advice) == 10
        assert rx.advice[:3] == ["IOP", "investigations needed", "CBP"]
        assert rx.advice[3:] == [""] * 7

    def test_raw_payload_kept(self):
        rx = ClinicRecordAdapter(dict(CLINIC_RECORD_PAYLOAD)).process()
        assert rx.raw_payload["PATIENT ID"] == "P-1042"

    def test_missing_patient_id(self):
        payload = {k: v for k, v in CLINIC_RECORD_PAYLOAD.items() if k != "PATIENT ID"}
        with pytest.raises(ValidationError) as exc_info:
            ClinicRecordAdapter(payload).process()

        fields = [e["field"] for e in exc_info.value.detail["errors"]]
        assert "patient.patient_id" in fields

    @pytest.mark.parametrize("bad_date", ["03/06/2024", "2024-02-30", "yesterday"])
    def test_bad_date(self, bad_date):
        payload = {**CLINIC_RECORD_PAYLOAD, "DATE": bad_date}
        with pytest.raises(ValidationError) as exc_info:
            ClinicRecordAdapter(payload).process()

        fields = [e["field"] for e in exc_info.value.detail["errors"]]
        assert fields == ["date"]

    def test_invalid_json(self):
        with pytest.raises(ValidationError) as exc_info:
            ClinicRecordAdapter(b"{not json").process()
        assert exc_info.value.code == "INVALID_JSON"

    def test_json_array_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ClinicRecordAdapter(b"[1, 2]").process()
        assert exc_info.value.code == "INVALID_JSON"


# ── StructuredAdapter ─────────────────────────────────────────────────────

class TestStructuredAdapter:

    def test_process(self):
        rx = StructuredAdapter(json.dumps(STRUCTURED_PAYLOAD)).process()

        assert rx.source == "structured"
        assert rx.patient.patient_id == "P-2001"
        assert rx.patient.patient_name == "Lakshmi Devi"
        assert rx.patient.doctor_name == "Dr. Rao"
        assert rx.advice == ["HBA1C", "FIELDS"]
        assert rx.advice_slots[2:] == [""] * 8

    def test_single_advice_string(self):
        rx = StructuredAdapter({**STRUCTURED_PAYLOAD, "advice": "CBP"}).process()
        assert rx.advice == ["CBP"]

    def test_too_many_advice_lines(self):
        payload = {**STRUCTURED_PAYLOAD, "advice": ["CBP"] * 11}
        with pytest.raises(ValidationError) as exc_info:
            StructuredAdapter(payload).process()

        fields = [e["field"] for e in exc_info.value.detail["errors"]]
        assert "advice" in fields

    def test_non_text_advice(self):
        payload = {**STRUCTURED_PAYLOAD, "advice": ["CBP", {"test": "ESR"}]}
        with pytest.raises(ValidationError) as exc_info:
            StructuredAdapter(payload).process()

        fields = [e["field"] for e in exc_info.value.detail["errors"]]
        assert "advice[1]" in fields

    @pytest.mark.parametrize("patient", ["P-1", ["P-1"], 7])
    def test_patient_must_be_object(self, patient):
        with pytest.raises(ValidationError) as exc_info:
            StructuredAdapter({"patient": patient, "advice": ["IOP"]}).process()

        assert exc_info.value.http_status == 400
        fields = [e["field"] for e in exc_info.value.detail["errors"]]
        assert fields == ["patient"]

    @pytest.mark.parametrize("advice", [5, {"line": "CBP"}, True])
    def test_advice_must_be_list_or_line(self, advice):
        with pytest.raises(ValidationError) as exc_info:
            StructuredAdapter({**STRUCTURED_PAYLOAD, "advice": advice}).process()

        fields = [e["field"] for e in exc_info.value.detail["errors"]]
        assert fields == ["advice"]

    def test_patient_and_advice_errors_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            StructuredAdapter({"patient": "P-1", "advice": 5}).process()

        fields = [e["field"] for e in exc_info.value.detail["errors"]]
        assert fields == ["patient", "advice"]

    def test_no_advice_is_valid(self):
        rx = StructuredAdapter({**STRUCTURED_PAYLOAD, "advice": []}).process()
        assert rx.advice_slots == [""] * 10


# ── PatientContext ────────────────────────────────────────────────────────

class TestPatientContext:

    def test_record_round_trip_keys(self):
        record = PatientContext(patient_id="P-1", referred_by="Self").to_record()
        assert record["PATIENT ID"] == "P-1"
        assert record["REFFERED BY"] == "Self"
        assert record["DATE"] == ""

    def test_with_defaults_fills_blanks_only(self):
        ctx = PatientContext(doctor_name="Dr. Rao").with_defaults(doctor_name="Dr. X", department="Opthalmology")
        assert ctx.doctor_name == "Dr. Rao"
        assert ctx.department == "Opthalmology"


# ── factory ───────────────────────────────────────────────────────────────

class TestGetAdapter:

    def test_default_source_is_clinic_record(self):
        assert isinstance(get_adapter("", b"{}"), ClinicRecordAdapter)

    def test_structured(self):
        assert isinstance(get_adapter("structured", b"{}"), StructuredAdapter)

    def test_unknown_source(self):
        with pytest.raises(ValidationError) as exc_info:
            get_adapter("fax", b"{}")

        assert exc_info.value.code == "UNKNOWN_SOURCE"
        assert "clinic_record" in exc_info.value.detail["known_sources"]
