"""
HTTP views: thin: read the request, call one service, serialize.

No try/except here; business exceptions reach
exception_handler.unified_exception_handler through DRF.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .coordinator import UNKNOWN_USER
from .serializers import (
    serialize_draft,
    serialize_lab_records,
    serialize_ledger,
    serialize_prescription_labs,
)


def _created_by(request):
    return request.headers.get('X-Created-By', '').strip() or UNKNOWN_USER


class PrescriptionIngestView(APIView):
    """POST /api/prescriptions/ - store a prescription (header X-Prescription-Source picks the adapter)"""

    def post(self, request):
        source = request.headers.get('X-Prescription-Source', '')
        prescription = services.ingest_prescription(source, request.body)
        return Response({
            'prescription_id': str(prescription.id),
            'patient_id': prescription.patient_id,
            'date': prescription.date.isoformat(),
            'source': prescription.source,
        }, status=status.HTTP_201_CREATED)


class PatientLabOrdersView(APIView):
    """GET /api/patients/<patient_id>/lab-orders/ - patient's prescriptions with extracted tests"""

    def get(self, request, patient_id):
        prescriptions = services.search_prescriptions_by_patient(patient_id)
        entries = services.extract_prescription_labs(prescriptions)
        return Response(serialize_prescription_labs(entries))


class TodaysPrescriptionLabsView(APIView):
    """GET /api/prescriptions/today/lab-orders/ - today's convertible lab orders"""

    def get(self, request):
        return Response(serialize_prescription_labs(services.get_todays_prescription_labs()))


class LabDraftView(APIView):
    """GET /api/prescriptions/<id>/lab-draft/ - both ledgers seeded from the prescription"""

    def get(self, request, prescription_id):
        coordinator = services.build_lab_draft(prescription_id)
        body = serialize_draft(coordinator)
        body['Sno'] = services.next_lab_serial()
        return Response(body)


class WalkInDraftView(APIView):
    """GET /api/labs/walk-in-draft/?doctor= - blank partner-lab draft for a general customer"""

    def get(self, request):
        coordinator = services.walk_in_draft(request.query_params.get('doctor'))
        body = serialize_draft(coordinator)
        body['Sno'] = services.next_lab_serial()
        return Response(body)


class LedgerReduceView(APIView):
    """POST /api/ledgers/reduce/ - apply edit events to one ledger and return the derived fields"""

    def post(self, request):
        state, prefix = services.reduce_ledger(request.data)
        return Response(serialize_ledger(state, prefix))


class LabListCreateView(APIView):
    """
    GET  /api/labs/?patient_id= - lab records of one patient
    POST /api/labs/             - submit a new lab bill (both ledgers)
    """

    def get(self, request):
        labs = services.search_lab_records(request.query_params.get('patient_id'))
        return Response(serialize_lab_records(labs))

    def post(self, request):
        record = services.create_lab_record(request.data, _created_by(request))
        return Response(record, status=status.HTTP_201_CREATED)


class TodaysLabsView(APIView):
    """GET /api/labs/today/ - today's lab records in serial order"""

    def get(self, request):
        return Response(serialize_lab_records(services.get_todays_labs()))


class LabDetailView(APIView):
    """GET / PUT / DELETE /api/labs/<lab_id>/"""

    def get(self, request, lab_id):
        return Response(services.get_lab_record(lab_id))

    def put(self, request, lab_id):
        return Response(services.update_lab_record(lab_id, request.data, _created_by(request)))

    def delete(self, request, lab_id):
        services.delete_lab_record(lab_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
