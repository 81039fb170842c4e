"""Application Engine - Eligibility, verification, decisions and printing"""
from .validation_engine import (
    DocumentValidationEngine, DocumentLookupStrategy, DirectLookupStrategy,
    StatusEndpointStrategy
)
from .upload_gate import UploadVerificationGate
from .state_machine import ApplicationStateMachine
from .print_queue import PrintQueueProjector, compute_priority, compute_time_in_queue
from .audit_writer import AuditWriter

__all__ = [
    "DocumentValidationEngine",
    "DocumentLookupStrategy",
    "DirectLookupStrategy",
    "StatusEndpointStrategy",
    "UploadVerificationGate",
    "ApplicationStateMachine",
    "PrintQueueProjector",
    "compute_priority",
    "compute_time_in_queue",
    "AuditWriter",
]
