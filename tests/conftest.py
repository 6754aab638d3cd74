"""
Pytest configuration and shared fixtures for a11ycheck tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from a11ycheck.domain.config import AuditConfig, KeyboardTuning
from a11ycheck.domain.keyboard import KeyboardTestResult, KeyboardTrap, UnfocusableElement
from a11ycheck.domain.models import Impact, Violation, ViolationNode
from a11ycheck.domain.report import AuditReport, EngineReport


# --- Markers ---

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: drives a real Chromium through Playwright"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow"
    )


# --- Async backend ---

@pytest.fixture
def anyio_backend() -> str:
    """Run coroutine tests on asyncio only (Playwright needs it)."""
    return "asyncio"


# --- Fixtures: Configuration ---

@pytest.fixture
def tuning() -> KeyboardTuning:
    """Default walk constants."""
    return KeyboardTuning()


@pytest.fixture
def engine_script(tmp_path: Path) -> Path:
    """A stand-in engine bundle on disk."""
    path = tmp_path / "engine.js"
    path.write_text("window.__engine = true;", encoding="utf-8")
    return path


@pytest.fixture
def config(engine_script: Path) -> AuditConfig:
    """A config whose engine scripts are local files."""
    return AuditConfig(axe_source=str(engine_script), ace_source=str(engine_script))


# --- Fixtures: Violations ---

@pytest.fixture
def image_alt_violation() -> Violation:
    """An axe-core image-alt violation."""
    return Violation(
        id="image-alt",
        impact=Impact.CRITICAL,
        tags=["cat.text-alternatives", "wcag2a", "wcag111"],
        description="Ensures <img> elements have alternate text",
        help="Images must have alternate text",
        help_url="https://dequeuniversity.com/rules/axe/4.10/image-alt",
        nodes=[
            ViolationNode(
                html='<img src="logo.png">',
                target=["img"],
                failure_summary="Element does not have an alt attribute",
            )
        ],
        engine="axe",
    )


@pytest.fixture
def contrast_violation() -> Violation:
    """A moderate color-contrast violation."""
    return Violation(
        id="color-contrast",
        impact=Impact.SERIOUS,
        tags=["cat.color", "wcag2aa", "wcag143"],
        description="Ensures the contrast between foreground and background colors meets thresholds",
        help="Elements must meet minimum color contrast ratio thresholds",
        help_url="https://dequeuniversity.com/rules/axe/4.10/color-contrast",
        nodes=[ViolationNode(html="<p class='faint'>Hi</p>", target=["p.faint"])],
        engine="axe",
    )


@pytest.fixture
def trapped_keyboard_result() -> KeyboardTestResult:
    """A keyboard result with one trap and one unreachable control."""
    return KeyboardTestResult(
        total_focusable_elements=2,
        tested_elements=1,
        keyboard_traps=[
            KeyboardTrap(
                selector="div#trap",
                html='<div id="trap" tabindex="0">',
                issue="Cannot Tab away: focus stayed on this element for 3 consecutive Tab presses",
            )
        ],
        unfocusable_interactive=[
            UnfocusableElement(selector="span.fake-button", html="<span>", role="button")
        ],
        stop_reason="keyboard trap",
    )


# --- Fixtures: Reports ---

@pytest.fixture
def sample_report(
    image_alt_violation: Violation,
    contrast_violation: Violation,
    trapped_keyboard_result: KeyboardTestResult,
) -> AuditReport:
    """A report with two axe violations and keyboard findings."""
    return AuditReport(
        target="https://example.test/",
        wcag_level="WCAG 2.1 AA",
        tags=["wcag2a", "wcag2aa", "wcag21a", "wcag21aa"],
        engines=[
            EngineReport(
                engine="axe",
                violations=[image_alt_violation, contrast_violation],
                incomplete=[
                    Violation(id="aria-hidden-focus", help="Hidden content must not be focusable")
                ],
                passes=12,
                inapplicable=30,
            )
        ],
        keyboard=trapped_keyboard_result,
    )
