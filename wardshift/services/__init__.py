"""
Domain services for WardShift.
"""

from .base_service import BaseService, MutationOutcome
from .task_engine import TaskEngine
from .patient_registry import PatientRegistry, group_by_department
from .bed_ledger import BedLedger
from .shift_tracker import ShiftTracker
from .report_compiler import compile_report, build_preview, report_filename, ReportPreview
from .auth import AuthService
from .workspace import Workspace, SessionRegistry

__all__ = [
    "BaseService",
    "MutationOutcome",
    "TaskEngine",
    "PatientRegistry",
    "group_by_department",
    "BedLedger",
    "ShiftTracker",
    "compile_report",
    "build_preview",
    "report_filename",
    "ReportPreview",
    "AuthService",
    "Workspace",
    "SessionRegistry"
]
