"""
JSON renderer for a11ycheck.

Outputs machine-readable violation records: every engine's violations
plus the keyboard test's synthetic records, all in the axe-compatible
shape ``{id, impact, tags, description, help, helpUrl, nodes}``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from a11ycheck.domain.keyboard import KeyboardTestResult
    from a11ycheck.domain.report import AuditReport


class JsonRenderer:
    """
    Renders audit reports as JSON.

    Provides machine-readable output for CI/CD pipelines
    and downstream processing.
    """

    def __init__(
        self,
        indent: int = 2,
        include_metadata: bool = False,
    ) -> None:
        """
        Initialize the JSON renderer.

        Args:
            indent: JSON indentation level.
            include_metadata: Wrap the violations in an object with audit
                metadata instead of emitting a bare array.
        """
        self.indent = indent
        self.include_metadata = include_metadata

    def render(self, report: AuditReport) -> str:
        """
        Render an audit report as a JSON string.

        Args:
            report: The audit report to render.

        Returns:
            JSON string.
        """
        data: Any = self.violations(report)
        if self.include_metadata:
            data = self.to_dict(report)
        return json.dumps(data, indent=self.indent, default=str)

    def render_keyboard(self, result: KeyboardTestResult) -> str:
        """Render a keyboard test result with its synthetic violations."""
        data = {
            "result": result.model_dump(mode="json"),
            "violations": [v.to_record() for v in result.to_violations()],
        }
        return json.dumps(data, indent=self.indent, default=str)

    def violations(self, report: AuditReport) -> list[dict[str, Any]]:
        return [v.to_record() for v in report.all_violations]

    def to_dict(self, report: AuditReport) -> dict[str, Any]:
        """
        Convert an audit report to a dictionary.

        Args:
            report: The audit report to convert.

        Returns:
            Dictionary representation.
        """
        summary = report.summary
        return {
            "audit_id": report.audit_id,
            "audited_at": report.audited_at.isoformat(),
            "target": report.target,
            "wcag_level": report.wcag_level,
            "tags": report.tags,
            "summary": {
                "critical": summary.critical,
                "serious": summary.serious,
                "moderate": summary.moderate,
                "minor": summary.minor,
                "unknown": summary.unknown,
                "total": summary.total,
            },
            "passes": report.passes,
            "incomplete": len(report.incomplete),
            "inapplicable": report.inapplicable,
            "duration_ms": report.duration_ms,
            "violations": self.violations(report),
            "metadata": report.metadata,
        }


def render_json(report: AuditReport, **kwargs) -> str:
    """
    Convenience function to render a report as JSON.

    Args:
        report: The audit report to render.
        **kwargs: Options passed to JsonRenderer.

    Returns:
        JSON string.
    """
    renderer = JsonRenderer(**kwargs)
    return renderer.render(report)
