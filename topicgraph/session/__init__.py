"""
Sessions

Stateful views over the pure layout core. Each session owns its stores.
"""

from .expansion import CollapsePlan, ExpansionState
from .global_view import GlobalGraphSession, layout_global
from .local import LocalGraphSession

__all__ = [
    'CollapsePlan',
    'ExpansionState',
    'GlobalGraphSession',
    'LocalGraphSession',
    'layout_global',
]
