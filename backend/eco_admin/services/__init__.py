"""
Eco Admin Services

Backend gateway, localization tables, filtering and the status workflow
shared by the dashboard views.
"""
from .backend_client import BackendClient, BackendError, PermissionDenied, RowNotFound
from .labels import Labels, load_labels
from .filtering import matches, filter_rows
from .status_workflow import InvalidTransition, available_transitions, build_transition
from .audit import AuditTrail

__all__ = [
    'BackendClient',
    'BackendError',
    'PermissionDenied',
    'RowNotFound',
    'Labels',
    'load_labels',
    'matches',
    'filter_rows',
    'InvalidTransition',
    'available_transitions',
    'build_transition',
    'AuditTrail',
]
