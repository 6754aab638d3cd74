"""
Unit tests for domain models and reports.
"""

from __future__ import annotations

import pytest

from a11ycheck.domain.keyboard import (
    DialogEscape,
    KeyboardTestResult,
    UnfocusableElement,
)
from a11ycheck.domain.models import Impact, Violation, ViolationNode
from a11ycheck.domain.report import AuditReport, EngineReport, ImpactSummary


class TestImpact:
    """Tests for the Impact enum."""

    def test_impact_ordering(self) -> None:
        """Impacts should be ordered MINOR < MODERATE < SERIOUS < CRITICAL."""
        assert Impact.MINOR < Impact.MODERATE
        assert Impact.MODERATE < Impact.SERIOUS
        assert Impact.SERIOUS < Impact.CRITICAL
        assert max([Impact.MODERATE, Impact.CRITICAL, Impact.MINOR]) is Impact.CRITICAL

    def test_impact_comparison_with_other_types(self) -> None:
        """Comparison with non-Impact should return NotImplemented."""
        assert Impact.SERIOUS.__lt__("serious") is NotImplemented


class TestViolation:
    """Tests for the Violation record."""

    def test_violation_is_frozen(self, image_alt_violation: Violation) -> None:
        with pytest.raises(Exception):  # Pydantic frozen validation error
            image_alt_violation.id = "changed"  # type: ignore

    def test_record_uses_axe_field_names(self, image_alt_violation: Violation) -> None:
        record = image_alt_violation.to_record()

        assert set(record) == {"id", "impact", "tags", "description", "help", "helpUrl", "nodes"}
        assert record["impact"] == "critical"
        assert record["nodes"][0] == {
            "html": '<img src="logo.png">',
            "target": ["img"],
            "failureSummary": "Element does not have an alt attribute",
        }

    def test_validates_axe_payload(self) -> None:
        violation = Violation.model_validate(
            {
                "id": "label",
                "impact": "serious",
                "tags": ["wcag2a", "wcag412", "cat.forms"],
                "helpUrl": "https://example.test/label",
                "nodes": [{"html": "<input>", "target": ["input"], "failureSummary": "Fix"}],
            }
        )

        assert violation.impact is Impact.SERIOUS
        assert violation.help_url == "https://example.test/label"
        assert violation.nodes[0].failure_summary == "Fix"
        assert violation.wcag_tags == ["wcag2a", "wcag412"]

    def test_missing_impact_is_allowed(self) -> None:
        assert Violation(id="region").impact is None


class TestImpactSummary:
    """Tests for ImpactSummary."""

    def test_from_violations(self, image_alt_violation: Violation, contrast_violation: Violation) -> None:
        summary = ImpactSummary.from_violations(
            [image_alt_violation, contrast_violation, Violation(id="no-impact")]
        )

        assert summary.critical == 1
        assert summary.serious == 1
        assert summary.unknown == 1
        assert summary.total == 3

    def test_empty(self) -> None:
        assert ImpactSummary.from_violations([]).total == 0


class TestKeyboardViolations:
    """Tests for flattening keyboard findings into violation records."""

    def test_clean_result_has_no_records(self) -> None:
        assert KeyboardTestResult().to_violations() == []
        assert not KeyboardTestResult().has_issues

    def test_trap_and_unfocusable(self, trapped_keyboard_result: KeyboardTestResult) -> None:
        records = {v.id: v for v in trapped_keyboard_result.to_violations()}

        assert set(records) == {"keyboard-trap", "unfocusable-interactive"}
        assert records["keyboard-trap"].impact is Impact.CRITICAL
        assert records["keyboard-trap"].nodes[0].target == ["div#trap"]
        assert "wcag212" in records["keyboard-trap"].tags
        assert "'button'" in records["unfocusable-interactive"].nodes[0].failure_summary
        assert all(v.engine == "keyboard" for v in records.values())

    def test_only_failed_escapes_are_reported(self) -> None:
        result = KeyboardTestResult(
            dialog_escapes=[
                DialogEscape(dialog_selector="div#ok", escaped_successfully=True),
                DialogEscape(dialog_selector="div#stuck", escaped_successfully=False),
            ]
        )

        records = result.to_violations()

        assert [v.id for v in records] == ["dialog-escape"]
        assert [n.target for n in records[0].nodes] == [["div#stuck"]]
        assert result.has_issues

    def test_handler_only_unfocusable_summary(self) -> None:
        result = KeyboardTestResult(
            unfocusable_interactive=[UnfocusableElement(selector="div.click")]
        )
        summary = result.to_violations()[0].nodes[0].failure_summary
        assert summary == "Element has an event handler but is not focusable"


class TestAuditReport:
    """Tests for the AuditReport model."""

    def test_aggregates_engines(self, sample_report: AuditReport) -> None:
        assert len(sample_report.violations) == 2
        assert len(sample_report.incomplete) == 1
        assert sample_report.passes == 12
        assert sample_report.inapplicable == 30

    def test_all_violations_appends_keyboard(self, sample_report: AuditReport) -> None:
        ids = [v.id for v in sample_report.all_violations]
        assert ids == ["image-alt", "color-contrast", "keyboard-trap", "unfocusable-interactive"]
        assert sample_report.summary.critical == 2

    def test_violations_at_or_above(self, sample_report: AuditReport) -> None:
        critical = sample_report.violations_at_or_above(Impact.CRITICAL)
        assert {v.id for v in critical} == {"image-alt", "keyboard-trap"}
        assert len(sample_report.violations_at_or_above(Impact.MINOR)) == 4

    def test_multiple_engines(self, image_alt_violation: Violation) -> None:
        ibm = Violation(
            id="img_alt_valid",
            impact=Impact.SERIOUS,
            nodes=[ViolationNode(html="<img>", target=["/html/body/img"])],
            engine="ibm",
        )
        report = AuditReport(
            target="<inline html>",
            engines=[
                EngineReport(engine="axe", violations=[image_alt_violation], passes=3),
                EngineReport(engine="ibm", violations=[ibm], passes=4),
            ],
        )

        assert [v.engine for v in report.violations] == ["axe", "ibm"]
        assert report.passes == 7
        assert report.keyboard is None
        assert report.all_violations == report.violations

    def test_report_id_and_json(self, sample_report: AuditReport) -> None:
        assert sample_report.audit_id.startswith("au_")
        data = sample_report.to_json()
        assert data["target"] == "https://example.test/"
        assert data["engines"][0]["violations"][0]["helpUrl"]
