"""
Engine layer for a11ycheck.

Contains the keyboard exploration engine and the audit orchestrator.
"""

from a11ycheck.engine.auditor import Auditor, AuditRequest, audit_page
from a11ycheck.engine.tab_walk import TabWalker, WalkState, run_keyboard_test

__all__ = [
    "Auditor",
    "AuditRequest",
    "audit_page",
    "TabWalker",
    "WalkState",
    "run_keyboard_test",
]
