"""
Accessibility engines for a11ycheck.

Each scanner wraps one third-party engine that runs inside the page and
normalizes its output into violation records.
"""

from a11ycheck.scanners.axe import AxeScanner
from a11ycheck.scanners.base import BaseScanner, Scanner, ScanOptions, ScriptPage
from a11ycheck.scanners.ibm import IbmScanner

__all__ = [
    # Base
    "BaseScanner",
    "Scanner",
    "ScanOptions",
    "ScriptPage",
    # Engines
    "AxeScanner",
    "IbmScanner",
]
