"""
Audit report models.

These models represent the output of one accessibility audit: the
normalized output of each engine that ran, summary statistics, and the
keyboard test result when one was requested.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from a11ycheck.domain.keyboard import KeyboardTestResult
from a11ycheck.domain.models import Impact, Violation


class ImpactSummary(BaseModel):
    """Violation counts per impact level."""

    model_config = ConfigDict(frozen=True)

    critical: int = Field(default=0, ge=0)
    serious: int = Field(default=0, ge=0)
    moderate: int = Field(default=0, ge=0)
    minor: int = Field(default=0, ge=0)
    unknown: int = Field(default=0, ge=0, description="Violations with no impact reported")

    @property
    def total(self) -> int:
        return self.critical + self.serious + self.moderate + self.minor + self.unknown

    @classmethod
    def from_violations(cls, violations: list[Violation]) -> ImpactSummary:
        """Create a summary from a list of violations."""
        counts = {impact: 0 for impact in Impact}
        unknown = 0
        for violation in violations:
            if violation.impact is None:
                unknown += 1
            else:
                counts[violation.impact] += 1

        return cls(
            critical=counts[Impact.CRITICAL],
            serious=counts[Impact.SERIOUS],
            moderate=counts[Impact.MODERATE],
            minor=counts[Impact.MINOR],
            unknown=unknown,
        )


class EngineReport(BaseModel):
    """One engine's output, normalized into violation records."""

    model_config = ConfigDict(frozen=True)

    engine: str = Field(..., description="Engine identifier, e.g. axe or ibm")
    violations: list[Violation] = Field(default_factory=list)
    incomplete: list[Violation] = Field(
        default_factory=list,
        description="Checks that need manual review",
    )
    passes: int = Field(default=0, ge=0)
    inapplicable: int = Field(default=0, ge=0)
    engine_version: str | None = None


class AuditReport(BaseModel):
    """
    Complete audit of one page.

    This is the primary output of an audit, consumed by the renderers.
    """

    model_config = ConfigDict(frozen=True)

    audit_id: str = Field(default_factory=lambda: f"au_{uuid4().hex[:12]}")
    target: str = Field(..., description="URL or inline-content label that was audited")
    audited_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: float = Field(default=0.0, ge=0)
    wcag_level: str | None = None
    tags: list[str] = Field(default_factory=list, description="Tags the engines were run with")
    engines: list[EngineReport] = Field(default_factory=list)
    keyboard: KeyboardTestResult | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def violations(self) -> list[Violation]:
        """Engine violations, in engine order."""
        return [v for engine in self.engines for v in engine.violations]

    @property
    def incomplete(self) -> list[Violation]:
        return [v for engine in self.engines for v in engine.incomplete]

    @property
    def passes(self) -> int:
        return sum(engine.passes for engine in self.engines)

    @property
    def inapplicable(self) -> int:
        return sum(engine.inapplicable for engine in self.engines)

    @property
    def all_violations(self) -> list[Violation]:
        """Engine violations followed by the keyboard test's synthetic records."""
        keyboard = self.keyboard.to_violations() if self.keyboard else []
        return self.violations + keyboard

    @property
    def summary(self) -> ImpactSummary:
        return ImpactSummary.from_violations(self.all_violations)

    def violations_at_or_above(self, impact: Impact) -> list[Violation]:
        """Violations whose impact is at least ``impact``."""
        return [v for v in self.all_violations if v.impact is not None and v.impact >= impact]

    def to_json(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return self.model_dump(mode="json", by_alias=True)
