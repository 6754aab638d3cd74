"""
Unit tests for the Auditor orchestration.
"""

from __future__ import annotations

from typing import Any

import pytest

from a11ycheck.adapters import dom_scripts
from a11ycheck.adapters.browser import PageTarget
from a11ycheck.domain.config import AuditConfig, Engine
from a11ycheck.domain.exceptions import ScannerError
from a11ycheck.domain.models import Violation
from a11ycheck.domain.report import EngineReport
from a11ycheck.engine.auditor import Auditor, AuditRequest
from a11ycheck.scanners.base import ScanOptions
from fakes import FakeOpener, FakePage, element

pytestmark = pytest.mark.anyio


class RecordingScanner:
    """Scanner double that records the options it ran with."""

    def __init__(self, engine_id: str, fail: bool = False) -> None:
        self.engine_id = engine_id
        self.fail = fail
        self.options: list[ScanOptions] = []

    async def run(self, page: Any, options: ScanOptions) -> EngineReport:
        self.options.append(options)
        if self.fail:
            raise ScannerError("engine crashed", self.engine_id)
        return EngineReport(
            engine=self.engine_id,
            violations=[Violation(id=f"{self.engine_id}-rule")],
            passes=1,
        )


@pytest.fixture
def page() -> FakePage:
    return FakePage(tab_order=[element("a#home", tag="a", has_href=True)])


@pytest.fixture
def scanners() -> dict[str, RecordingScanner]:
    return {"axe": RecordingScanner("axe"), "ibm": RecordingScanner("ibm")}


def make_auditor(
    config: AuditConfig, page: FakePage, scanners: dict[str, RecordingScanner]
) -> tuple[Auditor, FakeOpener]:
    opener = FakeOpener(page)
    return Auditor(config, browser=opener, scanners=scanners), opener


class TestAudit:
    """Tests for Auditor.audit."""

    async def test_default_runs_axe_and_keyboard(self, config, page, scanners) -> None:
        auditor, opener = make_auditor(config, page, scanners)

        report = await auditor.audit(PageTarget(url="https://example.test/"))

        assert [e.engine for e in report.engines] == ["axe"]
        assert scanners["ibm"].options == []
        assert scanners["axe"].options[0].tags == ["wcag2a", "wcag2aa", "wcag21a", "wcag21aa"]
        assert report.keyboard is not None
        assert report.keyboard.tested_elements == 1
        assert report.wcag_level == "WCAG 2.1 AA"
        assert report.target == "https://example.test/"
        assert opener.closed == 1

    async def test_both_engines_and_level(self, config, page, scanners) -> None:
        auditor, _ = make_auditor(config, page, scanners)

        report = await auditor.audit(
            PageTarget(html="<main></main>"),
            AuditRequest(engine="both", wcag_level="wcag22aa", keyboard=False),
        )

        assert [e.engine for e in report.engines] == ["axe", "ibm"]
        assert scanners["ibm"].options[0].ibm_policy == "WCAG_2_2"
        assert "wcag22aa" in scanners["axe"].options[0].tags
        assert report.keyboard is None
        assert report.target == "<inline html>"
        assert [v.id for v in report.violations] == ["axe-rule", "ibm-rule"]

    async def test_explicit_tags_override_level(self, config, page, scanners) -> None:
        auditor, _ = make_auditor(config, page, scanners)

        report = await auditor.audit(
            PageTarget(url="https://example.test/"),
            AuditRequest(tags=["best-practice"], wcag_level="wcag2a", keyboard=False),
        )

        assert scanners["axe"].options[0].tags == ["best-practice"]
        assert report.tags == ["best-practice"]

    async def test_unknown_engine_falls_back(self, config, page, scanners) -> None:
        auditor, _ = make_auditor(config, page, scanners)

        report = await auditor.audit(
            PageTarget(url="https://example.test/"),
            AuditRequest(engine="wave", wcag_level="platinum", keyboard=False),
        )

        assert [e.engine for e in report.engines] == ["axe"]
        assert report.wcag_level == "WCAG 2.1 AA"

    async def test_configured_engine_and_keyboard_toggle(self, engine_script, page, scanners) -> None:
        config = AuditConfig(
            engine="ibm", keyboard_testing=False, axe_source=str(engine_script)
        )
        auditor, _ = make_auditor(config, page, scanners)

        report = await auditor.audit(PageTarget(url="https://example.test/"))

        assert [e.engine for e in report.engines] == ["ibm"]
        assert report.keyboard is None
        assert report.metadata == {"engine": "ibm", "keyboard_testing": False}

    async def test_scanner_error_propagates_and_closes_page(self, config, page) -> None:
        scanners = {"axe": RecordingScanner("axe", fail=True), "ibm": RecordingScanner("ibm")}
        auditor, opener = make_auditor(config, page, scanners)

        with pytest.raises(ScannerError):
            await auditor.audit(PageTarget(url="https://example.test/"))

        assert opener.closed == 1


class TestResolve:
    """Tests for per-call engine and level resolution."""

    def test_resolve_engine(self, config) -> None:
        auditor = Auditor(config, browser=FakeOpener(FakePage()))
        assert auditor.resolve_engine(None) is Engine.AXE
        assert auditor.resolve_engine("both") is Engine.BOTH
        assert auditor.resolve_engine("???") is Engine.AXE

    def test_best_practices_adds_tag(self, engine_script) -> None:
        config = AuditConfig(best_practices=True, axe_source=str(engine_script))
        auditor = Auditor(config, browser=FakeOpener(FakePage()))

        options = auditor.scan_options(AuditRequest())

        assert options.tags[-1] == "best-practice"
        assert options.include_recommendations


class TestKeyboardAndRules:
    """Tests for the keyboard-only and rule listing operations."""

    async def test_keyboard_test(self, config, page, scanners) -> None:
        auditor, opener = make_auditor(config, page, scanners)

        result = await auditor.keyboard_test(PageTarget(url="https://example.test/"))

        assert [i.selector for i in result.focus_order] == ["a#home"]
        assert scanners["axe"].options == []
        assert opener.closed == 1

    async def test_rules_uses_blank_page(self, config) -> None:
        page = FakePage(
            evaluations={
                dom_scripts.AXE_RULES: [{"ruleId": "region", "tags": ["best-practice"]}]
            }
        )
        auditor, opener = make_auditor(config, page, {})

        rules = await auditor.rules(["best-practice"])

        assert [r.rule_id for r in rules] == ["region"]
        assert opener.targets[0].html is not None
        assert page.scripts == ["window.__engine = true;"]
