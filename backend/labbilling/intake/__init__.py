from .factory import get_adapter
from .types import InternalPrescription, PatientContext

__all__ = ["InternalPrescription", "PatientContext", "get_adapter"]
