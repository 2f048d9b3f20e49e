"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
"""
import pytest
from django.test import Client
from django.utils import timezone

import factory
from labbilling.models import LabRecord, Prescription


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def _advice(*lines):
    lines = list(lines)[:10]
    return lines + [''] * (10 - len(lines))


class PrescriptionFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Prescription

    patient_id = factory.Sequence(lambda n: f'P-{1000 + n}')
    patient_name = 'Ravi Kumar'
    date = factory.LazyFunction(timezone.localdate)
    advice = factory.LazyFunction(lambda: _advice('IOP', 'investigations needed', 'CBP'))
    record = factory.LazyAttribute(lambda o: {
        'PATIENT ID': o.patient_id,
        'PATIENT NAME': o.patient_name,
        'AGE': 54,
        'GENDER': 'Male',
    })
    source = 'clinic_record'


class LabRecordFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = LabRecord

    patient_id = factory.Sequence(lambda n: f'P-{2000 + n}')
    patient_name = 'Lakshmi Devi'
    date = factory.LazyFunction(timezone.localdate)
    sno = factory.Sequence(lambda n: n + 1)
    created_by = 'desk@clinic'
    record = factory.LazyAttribute(lambda o: {
        'PATIENT ID': o.patient_id,
        'PATIENT NAME': o.patient_name,
        'LAB TEST 1': 'CBP',
        'AMOUNT 1': 250,
        'TOTAL AMOUNT': 250,
        'DISCOUNT PERCENTAGE': 0,
        'AMOUNT RECEIVED': 250,
        'AMOUNT DUE': 0,
        'VLAB TEST 1': 'IOP',
        'VAMOUNT 1': 400,
        'VTOTAL AMOUNT': 400,
        'VDISCOUNT PERCENTAGE': 0,
        'VAMOUNT RECEIVED': 400,
        'VAMOUNT DUE': 0,
        'type': 'combined',
    })


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def api_client():
    """Django test client for integration tests."""
    return Client()


@pytest.fixture
def advice_lines():
    return _advice('IOP', 'investigations needed', 'CBP')


@pytest.fixture
def sample_clinic_record():
    """Minimal valid clinic_record prescription for POST /api/prescriptions/."""
    return {
        'PATIENT ID': 'P-1042',
        'PATIENT NAME': 'Ravi Kumar',
        'AGE': 54,
        'GENDER': 'Male',
        'DATE': timezone.localdate().isoformat(),
        'ADVICE 1': 'IOP',
        'ADVICE 2': 'investigations needed',
        'ADVICE 3': 'CBP',
    }


@pytest.fixture
def sample_lab_payload():
    """A lab bill as the desk form submits it (POST /api/labs/)."""
    return {
        'PATIENT ID': 'P-1042',
        'PATIENT NAME': 'Ravi Kumar',
        'DOCTOR NAME': 'Dr. Srilatha ch',
        'DATE': timezone.localdate().isoformat(),
        'LAB TEST 1': 'CBP',
        'AMOUNT 1': '300',
        'LAB TEST 2': 'ESR',
        'AMOUNT 2': '200',
        'TOTAL AMOUNT': '500',
        'DISCOUNT PERCENTAGE': '10',
        'AMOUNT RECEIVED': '400',
    }
