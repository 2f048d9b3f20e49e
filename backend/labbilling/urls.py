from django.urls import path
from .views import (
    LabDetailView,
    LabDraftView,
    LabListCreateView,
    LedgerReduceView,
    PatientLabOrdersView,
    PrescriptionIngestView,
    TodaysLabsView,
    TodaysPrescriptionLabsView,
    WalkInDraftView,
)

urlpatterns = [
    path('prescriptions/', PrescriptionIngestView.as_view(), name='prescription-ingest'),
    path('prescriptions/today/lab-orders/', TodaysPrescriptionLabsView.as_view(), name='prescription-today-labs'),
    path('prescriptions/<uuid:prescription_id>/lab-draft/', LabDraftView.as_view(), name='prescription-lab-draft'),
    path('patients/<str:patient_id>/lab-orders/', PatientLabOrdersView.as_view(), name='patient-lab-orders'),
    path('ledgers/reduce/', LedgerReduceView.as_view(), name='ledger-reduce'),
    path('labs/', LabListCreateView.as_view(), name='lab-list'),
    path('labs/today/', TodaysLabsView.as_view(), name='lab-today'),
    path('labs/walk-in-draft/', WalkInDraftView.as_view(), name='lab-walk-in-draft'),
    path('labs/<uuid:lab_id>/', LabDetailView.as_view(), name='lab-detail'),
]
