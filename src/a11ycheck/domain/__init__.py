"""
Domain layer for a11ycheck.

Contains all core data structures with zero external dependencies
beyond Pydantic (and PyYAML for config files).
"""

from a11ycheck.domain.config import AuditConfig, BrowserSettings, Engine, KeyboardTuning, WcagLevel
from a11ycheck.domain.exceptions import (
    A11yCheckError,
    AssetError,
    ConfigError,
    NavigationError,
    ScannerError,
)
from a11ycheck.domain.keyboard import (
    ButtonActivation,
    DialogEscape,
    ElementProbe,
    FocusableElement,
    FocusOrderItem,
    KeyboardTestResult,
    KeyboardTrap,
    UnfocusableElement,
)
from a11ycheck.domain.models import Impact, RuleInfo, Violation, ViolationNode
from a11ycheck.domain.report import AuditReport, EngineReport, ImpactSummary

__all__ = [
    # Config
    "AuditConfig",
    "BrowserSettings",
    "Engine",
    "KeyboardTuning",
    "WcagLevel",
    # Models
    "Impact",
    "RuleInfo",
    "Violation",
    "ViolationNode",
    # Keyboard
    "ButtonActivation",
    "DialogEscape",
    "ElementProbe",
    "FocusableElement",
    "FocusOrderItem",
    "KeyboardTestResult",
    "KeyboardTrap",
    "UnfocusableElement",
    # Reports
    "AuditReport",
    "EngineReport",
    "ImpactSummary",
    # Exceptions
    "A11yCheckError",
    "AssetError",
    "ConfigError",
    "NavigationError",
    "ScannerError",
]
