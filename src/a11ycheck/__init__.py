"""
a11ycheck — Web Accessibility Auditing over MCP

Loads a page in a headless browser, runs axe-core and/or IBM Equal Access
against it, and walks the page with the keyboard looking for traps,
dialogs that ignore Escape, and interactive elements Tab cannot reach.

Usage:
    # MCP server (stdio)
    $ a11ycheck serve

    # CLI
    $ a11ycheck scan https://example.com --engine both

    # Python API
    from a11ycheck import audit_page

    report = await audit_page("https://example.com")
    print(report.summary)
"""

from a11ycheck.domain.config import AuditConfig, Engine, WcagLevel
from a11ycheck.domain.keyboard import KeyboardTestResult
from a11ycheck.domain.models import Impact, RuleInfo, Violation, ViolationNode
from a11ycheck.domain.report import AuditReport, EngineReport, ImpactSummary
from a11ycheck.engine.auditor import Auditor, AuditRequest, audit_page

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "AuditConfig",
    "Engine",
    "WcagLevel",
    # Domain models
    "Impact",
    "RuleInfo",
    "Violation",
    "ViolationNode",
    "KeyboardTestResult",
    # Reports
    "AuditReport",
    "EngineReport",
    "ImpactSummary",
    # Engine
    "Auditor",
    "AuditRequest",
    "audit_page",
]
