"""
Unit tests for the report renderers.
"""

from __future__ import annotations

import json

from rich.console import Console

from a11ycheck.domain.keyboard import (
    ButtonActivation,
    DialogEscape,
    FocusOrderItem,
    KeyboardTestResult,
)
from a11ycheck.domain.models import RuleInfo
from a11ycheck.domain.report import AuditReport
from a11ycheck.renderers import JsonRenderer, MarkdownRenderer, TerminalRenderer


class TestMarkdownRenderer:
    """Tests for Markdown output."""

    def test_summary_and_violations(self, sample_report: AuditReport) -> None:
        text = MarkdownRenderer().render(sample_report)

        assert text.startswith("# Accessibility Test Results")
        assert "**URL**: https://example.test/" in text
        assert "- ✅ Passes: 12" in text
        assert "- ❌ Violations: 2" in text
        assert "- ⚠️ Incomplete: 1" in text
        assert "- ℹ️ Inapplicable: 30" in text
        assert "### 1. Images must have alternate text" in text
        assert "**Impact**: critical" in text
        assert "**WCAG**: wcag2a, wcag111" in text
        assert "  1. `<img src=\"logo.png\">`" in text
        assert "**How to fix**: https://dequeuniversity.com/rules/axe/4.10/image-alt" in text
        assert "## Incomplete Checks (Need Manual Review)" in text

    def test_keyboard_section(self, sample_report: AuditReport) -> None:
        text = MarkdownRenderer().render(sample_report)

        assert "## Keyboard Accessibility" in text
        assert "- Keyboard traps: 1" in text
        assert "### ❌ Keyboard Traps" in text
        assert "`div#trap`: Cannot Tab away" in text
        assert "### ⚠️ Unfocusable Interactive Elements" in text
        assert "`span.fake-button` (role: button)" in text

    def test_standalone_keyboard_report(self) -> None:
        result = KeyboardTestResult(
            total_focusable_elements=2,
            tested_elements=2,
            focus_order=[
                FocusOrderItem(index=1, selector="button#open"),
                FocusOrderItem(index=2, selector="a#next"),
            ],
            dialog_escapes=[
                DialogEscape(
                    dialog_selector="div#dlg",
                    escaped_successfully=True,
                    note="Dialog closed with Escape",
                )
            ],
            button_activations=[
                ButtonActivation(
                    selector="button#open",
                    activated=True,
                    triggered_dialog=True,
                    note="Activation opened a dialog",
                )
            ],
        )

        text = MarkdownRenderer().render_keyboard(result, "https://example.test/")

        assert text.startswith("# Keyboard Accessibility Test Results")
        assert "## Keyboard Accessibility" not in text
        assert "- ✅ `div#dlg`: Dialog closed with Escape" in text
        assert "- `button#open` (opened dialog): Activation opened a dialog" in text
        assert "1. `button#open`\n2. `a#next`" in text

    def test_focus_order_limit(self) -> None:
        result = KeyboardTestResult(
            focus_order=[FocusOrderItem(index=i, selector=f"a#{i}") for i in range(1, 6)]
        )

        text = MarkdownRenderer(focus_order_limit=2).render_keyboard(result, "x")

        assert "2. `a#2`" in text
        assert "3. `a#3`" not in text
        assert "... and 3 more" in text

    def test_rules(self) -> None:
        rules = [
            RuleInfo(
                rule_id="image-alt",
                description="Ensures <img> elements have alternate text",
                help="Images must have alternate text",
                help_url="https://example.test/image-alt",
                tags=["wcag2a", "wcag111"],
            )
        ]

        text = MarkdownRenderer().render_rules(rules, ["wcag2a"])

        assert "**Filtered by tags**: wcag2a" in text
        assert "**Total rules**: 1" in text
        assert "## 1. image-alt" in text
        assert "**Tags**: wcag2a, wcag111" in text


class TestJsonRenderer:
    """Tests for JSON output."""

    def test_violation_array(self, sample_report: AuditReport) -> None:
        data = json.loads(JsonRenderer().render(sample_report))

        assert isinstance(data, list)
        assert [v["id"] for v in data] == [
            "image-alt",
            "color-contrast",
            "keyboard-trap",
            "unfocusable-interactive",
        ]
        assert data[0]["helpUrl"].endswith("image-alt")
        assert data[0]["nodes"][0]["failureSummary"]
        assert "engine" not in data[0]

    def test_with_metadata(self, sample_report: AuditReport) -> None:
        data = json.loads(JsonRenderer(include_metadata=True).render(sample_report))

        assert data["target"] == "https://example.test/"
        assert data["summary"]["critical"] == 2
        assert data["passes"] == 12
        assert len(data["violations"]) == 4

    def test_keyboard(self, trapped_keyboard_result: KeyboardTestResult) -> None:
        data = json.loads(JsonRenderer().render_keyboard(trapped_keyboard_result))

        assert data["result"]["tested_elements"] == 1
        assert [v["id"] for v in data["violations"]] == [
            "keyboard-trap",
            "unfocusable-interactive",
        ]


class TestTerminalRenderer:
    """Tests for Rich terminal output."""

    def _console(self) -> Console:
        return Console(record=True, width=120, color_system=None)

    def test_render(self, sample_report: AuditReport) -> None:
        console = self._console()

        TerminalRenderer(console=console).render(sample_report)

        out = console.export_text()
        assert "Accessibility Audit" in out
        assert "CRITICAL" in out
        assert "image-alt" in out
        assert "Keyboard traps" in out
        assert "VIOLATIONS FOUND" in out

    def test_clean_report(self) -> None:
        console = self._console()

        TerminalRenderer(console=console).render(AuditReport(target="https://ok.test/"))

        out = console.export_text()
        assert "No accessibility violations found" in out
        assert "PASSED" in out

    def test_rules(self) -> None:
        console = self._console()

        TerminalRenderer(console=console).render_rules(
            [RuleInfo(rule_id="region", help="All content must be in landmarks")]
        )

        assert "region" in console.export_text()
