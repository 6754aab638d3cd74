"""
Domain models for a11ycheck.

The violation record defined here is the common shape every engine's output
is normalized into (axe-core natively, IBM Equal Access by grouping per rule),
and the shape keyboard findings are flattened into for JSON consumers.

All models are Pydantic v2 for validation and serialization.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Impact(str, Enum):
    """Impact level of a violation, using the axe-core vocabulary."""

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"

    def _get_order(self) -> int:
        order = [Impact.MINOR, Impact.MODERATE, Impact.SERIOUS, Impact.CRITICAL]
        return order.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Impact):
            return NotImplemented
        return self._get_order() < other._get_order()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Impact):
            return NotImplemented
        return self._get_order() <= other._get_order()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Impact):
            return NotImplemented
        return self._get_order() > other._get_order()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Impact):
            return NotImplemented
        return self._get_order() >= other._get_order()


class ViolationNode(BaseModel):
    """One element affected by a violation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    html: str = Field(default="", description="Outer HTML snippet of the element")
    target: list[str] = Field(default_factory=list, description="Selector path to the element")
    failure_summary: str | None = Field(
        default=None,
        alias="failureSummary",
        description="Why this element fails the rule",
    )


class Violation(BaseModel):
    """
    A single rule failure, regardless of which engine reported it.

    Serializes (by alias) to the axe-compatible record
    ``{id, impact, tags, description, help, helpUrl, nodes}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Rule identifier")
    impact: Impact | None = Field(default=None, description="Impact level")
    tags: list[str] = Field(default_factory=list, description="Rule tags, e.g. wcag21aa")
    description: str = Field(default="", description="What the rule checks")
    help: str = Field(default="", description="Short help text")
    help_url: str = Field(default="", alias="helpUrl", description="Link to remediation docs")
    nodes: list[ViolationNode] = Field(default_factory=list, description="Affected elements")
    engine: str | None = Field(
        default=None,
        exclude=True,
        description="Engine that reported the violation",
    )

    @property
    def wcag_tags(self) -> list[str]:
        """Tags that name a WCAG success criterion or level."""
        return [tag for tag in self.tags if tag.startswith("wcag")]

    def to_record(self) -> dict:
        """Convert to the axe-compatible JSON record."""
        return self.model_dump(mode="json", by_alias=True)


class RuleInfo(BaseModel):
    """Metadata about one axe-core rule."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rule_id: str = Field(..., alias="ruleId")
    description: str = ""
    help: str = ""
    help_url: str = Field(default="", alias="helpUrl")
    tags: list[str] = Field(default_factory=list)
