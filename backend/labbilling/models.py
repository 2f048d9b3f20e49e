import uuid
from django.db import models


class Prescription(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient_id = models.CharField(max_length=50, db_index=True)
    patient_name = models.CharField(max_length=200, blank=True, default='')
    date = models.DateField(db_index=True)
    advice = models.JSONField(default=list, blank=True)     # 10 ordered advice slots
    record = models.JSONField(default=dict, blank=True)     # source row as received
    source = models.CharField(max_length=30, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'prescriptions'
        ordering = ['-date', '-created_at']


class LabRecord(models.Model):
    """
    One submitted lab bill: both ledgers in a single record.

    `record` holds the flat field dict exactly as the desk client exchanges it
    (LAB TEST n / AMOUNT n / ... and the V-prefixed partner-lab copies); the
    columns beside it are indexed copies for lookups.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient_id = models.CharField(max_length=50, blank=True, default='', db_index=True)
    patient_name = models.CharField(max_length=200, blank=True, default='')
    date = models.DateField(db_index=True)
    sno = models.PositiveIntegerField(default=1)
    created_by = models.CharField(max_length=200, blank=True, default='')
    record = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'lab_records'
        ordering = ['-date', '-created_at']
