"""
Keyboard-accessibility domain models.

``ElementProbe`` is the typed projection of a DOM element read out of the
page by script evaluation. Everything downstream of the page boundary works
on these models, never on raw evaluation results.

The remaining models are the findings of one keyboard test run.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from a11ycheck.domain.models import Impact, Violation, ViolationNode


class ElementProbe(BaseModel):
    """Facts about one element, as read from the live DOM."""

    model_config = ConfigDict(frozen=True)

    selector: str = Field(..., description="Derived tag#id.class selector")
    html: str = Field(default="", description="Truncated outerHTML")
    tag_name: str = Field(default="", description="Lower-case tag name")
    tab_index: int | None = Field(default=None, description="Effective tabIndex property")
    tab_index_attr: str | None = Field(default=None, description="Raw tabindex attribute")
    role: str | None = Field(default=None, description="ARIA role attribute")
    element_id: str | None = None
    class_name: str | None = None
    aria_modal: str | None = None
    aria_expanded: str | None = None
    aria_pressed: str | None = None
    aria_selected: str | None = None
    has_href: bool = False
    has_event_handler: bool = False
    disabled: bool = False
    width: float = 0.0
    height: float = 0.0
    display: str = ""
    visibility: str = ""
    opacity: float = 1.0

    @field_validator("tag_name", mode="before")
    @classmethod
    def lower_tag(cls, v: str | None) -> str:
        return (v or "").lower()

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = str(v).strip().lower()
        return v or None

    @field_validator("opacity", mode="before")
    @classmethod
    def parse_opacity(cls, v: object) -> float:
        try:
            return float(v)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 1.0

    @property
    def declared_tab_index(self) -> int | None:
        """The tabindex attribute as an integer, or None if absent or malformed."""
        if self.tab_index_attr is None:
            return None
        try:
            return int(self.tab_index_attr.strip())
        except ValueError:
            return None


class AriaState(BaseModel):
    """Snapshot of the ARIA state attributes an activation can toggle."""

    model_config = ConfigDict(frozen=True)

    expanded: str | None = None
    pressed: str | None = None
    selected: str | None = None

    @classmethod
    def of(cls, element: ElementProbe) -> AriaState:
        return cls(
            expanded=element.aria_expanded,
            pressed=element.aria_pressed,
            selected=element.aria_selected,
        )

    def differs_from(self, other: AriaState) -> bool:
        return (
            self.expanded != other.expanded
            or self.pressed != other.pressed
            or self.selected != other.selected
        )


class DialogInfo(BaseModel):
    """The dialog container enclosing the focused element."""

    model_config = ConfigDict(frozen=True)

    selector: str
    html: str = ""


class DialogState(BaseModel):
    """Result of a dialog check against the current focus."""

    model_config = ConfigDict(frozen=True)

    in_dialog: bool = False
    dialog: DialogInfo | None = None


class FocusableElement(BaseModel):
    """An element the surveyor counted as keyboard focusable."""

    model_config = ConfigDict(frozen=True)

    selector: str
    html: str = ""
    tag_name: str = ""
    tab_index: int | None = None
    aria_role: str | None = None


class FocusOrderItem(BaseModel):
    """One position in the observed Tab order."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1)
    selector: str
    html: str = ""
    tag_name: str = ""


class KeyboardTrap(BaseModel):
    """An element that kept focus across repeated Tab presses."""

    model_config = ConfigDict(frozen=True)

    selector: str
    html: str = ""
    issue: str


class DialogEscape(BaseModel):
    """One attempt to leave a dialog with the Escape key."""

    model_config = ConfigDict(frozen=True)

    dialog_selector: str
    dialog_html: str = ""
    escaped_successfully: bool
    note: str = ""


class ButtonActivation(BaseModel):
    """One Enter-key activation of a button-like element."""

    model_config = ConfigDict(frozen=True)

    selector: str
    html: str = ""
    activated: bool
    triggered_dialog: bool = False
    expanded_content: bool = False
    note: str = ""


class UnfocusableElement(BaseModel):
    """An element with interactive semantics that keyboard users cannot reach."""

    model_config = ConfigDict(frozen=True)

    selector: str
    html: str = ""
    role: str | None = None


class KeyboardTestResult(BaseModel):
    """
    Everything one keyboard test run found.

    Owned by a single run and handed straight to a renderer; findings
    collected before a trap or budget stop are always present.
    """

    model_config = ConfigDict(frozen=True)

    total_focusable_elements: int = Field(default=0, ge=0)
    tested_elements: int = Field(default=0, ge=0)
    keyboard_traps: list[KeyboardTrap] = Field(default_factory=list)
    unfocusable_interactive: list[UnfocusableElement] = Field(default_factory=list)
    focus_order: list[FocusOrderItem] = Field(default_factory=list)
    dialog_escapes: list[DialogEscape] = Field(default_factory=list)
    button_activations: list[ButtonActivation] = Field(default_factory=list)
    stop_reason: str = Field(default="", description="Why the Tab walk ended")

    @property
    def failed_dialog_escapes(self) -> list[DialogEscape]:
        return [e for e in self.dialog_escapes if not e.escaped_successfully]

    @property
    def has_issues(self) -> bool:
        return bool(
            self.keyboard_traps or self.failed_dialog_escapes or self.unfocusable_interactive
        )

    def to_violations(self) -> list[Violation]:
        """
        Flatten the findings into axe-compatible violation records.

        At most three records are produced: keyboard traps, dialogs that
        Escape could not close, and unreachable interactive elements.
        """
        violations: list[Violation] = []

        if self.keyboard_traps:
            violations.append(
                Violation(
                    id="keyboard-trap",
                    impact=Impact.CRITICAL,
                    tags=["wcag2a", "wcag212", "keyboard"],
                    description="Ensures keyboard focus can always be moved away from an element",
                    help="Keyboard focus must not be trapped",
                    help_url="https://www.w3.org/WAI/WCAG21/Understanding/no-keyboard-trap.html",
                    nodes=[
                        ViolationNode(
                            html=trap.html,
                            target=[trap.selector],
                            failure_summary=trap.issue,
                        )
                        for trap in self.keyboard_traps
                    ],
                    engine="keyboard",
                )
            )

        failed = self.failed_dialog_escapes
        if failed:
            violations.append(
                Violation(
                    id="dialog-escape",
                    impact=Impact.SERIOUS,
                    tags=["wcag2a", "wcag212", "keyboard"],
                    description="Ensures dialogs can be dismissed with the Escape key",
                    help="Dialogs must close when Escape is pressed",
                    help_url="https://www.w3.org/WAI/ARIA/apg/patterns/dialog-modal/",
                    nodes=[
                        ViolationNode(
                            html=escape.dialog_html,
                            target=[escape.dialog_selector],
                            failure_summary=escape.note or "Dialog stayed open after Escape",
                        )
                        for escape in failed
                    ],
                    engine="keyboard",
                )
            )

        if self.unfocusable_interactive:
            violations.append(
                Violation(
                    id="unfocusable-interactive",
                    impact=Impact.SERIOUS,
                    tags=["wcag2a", "wcag211", "keyboard"],
                    description=(
                        "Ensures elements with interactive semantics can be reached with the keyboard"
                    ),
                    help="Interactive elements must be keyboard focusable",
                    help_url="https://www.w3.org/WAI/WCAG21/Understanding/keyboard.html",
                    nodes=[
                        ViolationNode(
                            html=element.html,
                            target=[element.selector],
                            failure_summary=(
                                f"Element has interactive role '{element.role}' but is not focusable"
                                if element.role
                                else "Element has an event handler but is not focusable"
                            ),
                        )
                        for element in self.unfocusable_interactive
                    ],
                    engine="keyboard",
                )
            )

        return violations
