"""
Tab walk: the keyboard exploration state machine.

The walker presses Tab repeatedly on a live page and watches where focus
lands. Along the way it records the focus order, probes button-like
elements with Enter, tries Escape on dialogs that hold focus, and stops
on a confirmed keyboard trap, a wraparound, or the step budget.

All walk state lives in ``WalkState``; its transitions are pure methods
returning a new state, so the state machine can be tested without a page.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from a11ycheck.domain.config import KeyboardTuning
from a11ycheck.domain.exceptions import NavigationError
from a11ycheck.domain.keyboard import (
    ButtonActivation,
    DialogEscape,
    ElementProbe,
    FocusOrderItem,
    KeyboardTestResult,
    KeyboardTrap,
)
from a11ycheck.engine.activation import ActivationProber, qualifies_for_activation
from a11ycheck.engine.dialogs import DialogDetector
from a11ycheck.engine.surveyor import FocusableSurveyor, UnfocusableInteractiveScanner

if TYPE_CHECKING:
    from a11ycheck.engine.page import KeyboardPage

logger = logging.getLogger(__name__)


class WalkPhase(str, Enum):
    """Where the walk is."""

    WALKING = "walking"
    TRAP_SUSPECTED = "trap_suspected"
    TRAP_CONFIRMED = "trap_confirmed"  # terminal
    DONE = "done"  # terminal


class FocusStep(str, Enum):
    """How one Tab press moved focus, relative to the walk so far."""

    LEFT_CONTENT = "left_content"  # focus on body/root
    WRAPPED = "wrapped"  # back at the first element after leaving content
    REPEAT = "repeat"  # same element as the previous step
    NEW = "new"  # a new focus position
    SKIPPED = "skipped"  # re-walking toward the element that navigated


class WalkState(BaseModel):
    """Immutable walk context threaded through every transition."""

    model_config = ConfigDict(frozen=True)

    total_focusable: int = Field(..., ge=0)
    step_budget: int = Field(..., ge=0)
    phase: WalkPhase = WalkPhase.WALKING
    steps_taken: int = 0
    tested: int = 0
    previous_selector: str | None = None
    repeat_count: int = 0
    first_selector: str | None = None
    left_content: bool = False
    escape_attempts: int = 0
    navigation_selectors: frozenset[str] = frozenset()
    resume_after: str | None = None
    stop_reason: str = ""

    @classmethod
    def start(cls, total_focusable: int, tuning: KeyboardTuning) -> WalkState:
        return cls(total_focusable=total_focusable, step_budget=tuning.step_budget(total_focusable))

    @property
    def finished(self) -> bool:
        return self.phase in (WalkPhase.TRAP_CONFIRMED, WalkPhase.DONE)

    @property
    def budget_exhausted(self) -> bool:
        return self.steps_taken >= self.step_budget

    def classify(self, selector: str | None) -> FocusStep:
        """Classify where focus landed after a Tab press."""
        if self.resume_after is not None:
            return FocusStep.SKIPPED
        if selector is None:
            return FocusStep.LEFT_CONTENT
        if selector == self.previous_selector:
            return FocusStep.REPEAT
        if self.left_content and selector == self.first_selector:
            return FocusStep.WRAPPED
        return FocusStep.NEW

    def is_navigation_trigger(self, selector: str) -> bool:
        return selector in self.navigation_selectors

    def can_attempt_escape(self, budget: int) -> bool:
        return self.escape_attempts < budget

    def tab(self) -> WalkState:
        """One Tab press spent."""
        return self.model_copy(update={"steps_taken": self.steps_taken + 1})

    def leave_content(self) -> WalkState:
        """Focus fell back to the document; forget the previous element."""
        return self.model_copy(
            update={
                "previous_selector": None,
                "repeat_count": 0,
                "left_content": self.left_content or self.first_selector is not None,
            }
        )

    def enter(self, selector: str) -> WalkState:
        """Focus moved to a new position."""
        return self.model_copy(
            update={
                "previous_selector": selector,
                "repeat_count": 1,
                "tested": self.tested + 1,
                "first_selector": self.first_selector or selector,
            }
        )

    def repeat(self, threshold: int) -> WalkState:
        """Focus stayed put; suspect a trap once ``threshold`` reads agree."""
        count = self.repeat_count + 1
        phase = WalkPhase.TRAP_SUSPECTED if count >= threshold else self.phase
        return self.model_copy(update={"repeat_count": count, "phase": phase})

    def after_navigation(self, selector: str) -> WalkState:
        """
        An activation navigated away and the page was restored.

        Focus restarts at the top of the document, so the elements already
        recorded are passed over until ``selector`` is focused again.
        """
        return self.model_copy(
            update={
                "navigation_selectors": self.navigation_selectors | {selector},
                "previous_selector": None,
                "repeat_count": 0,
                "resume_after": selector,
            }
        )

    def resume(self, selector: str | None) -> WalkState:
        """Advance a skipped step; recording resumes after the navigating element."""
        if selector is None:
            return self.model_copy(update={"resume_after": None}).leave_content()
        if selector != self.resume_after:
            return self
        return self.model_copy(
            update={"resume_after": None, "previous_selector": selector, "repeat_count": 1}
        )

    def after_escape(self) -> WalkState:
        """Escape released focus from a dialog; keep walking."""
        return self.model_copy(
            update={
                "phase": WalkPhase.WALKING,
                "previous_selector": None,
                "repeat_count": 0,
                "escape_attempts": self.escape_attempts + 1,
            }
        )

    def escape_failed(self) -> WalkState:
        return self.model_copy(
            update={"escape_attempts": self.escape_attempts + 1}
        ).trap_confirmed("keyboard trap inside a dialog that Escape could not close")

    def trap_confirmed(self, reason: str = "keyboard trap") -> WalkState:
        return self.model_copy(update={"phase": WalkPhase.TRAP_CONFIRMED, "stop_reason": reason})

    def done(self, reason: str) -> WalkState:
        return self.model_copy(update={"phase": WalkPhase.DONE, "stop_reason": reason})

    def check_wraparound(self) -> WalkState:
        """Stop once more positions were visited than the census counted."""
        if self.tested > self.total_focusable:
            return self.done("wraparound: visited more elements than the census")
        return self


class _Findings:
    """Mutable accumulators for one run."""

    def __init__(self) -> None:
        self.focus_order: list[FocusOrderItem] = []
        self.traps: list[KeyboardTrap] = []
        self.dialog_escapes: list[DialogEscape] = []
        self.activations: list[ButtonActivation] = []

    def add_focus(self, element: ElementProbe) -> None:
        self.focus_order.append(
            FocusOrderItem(
                index=len(self.focus_order) + 1,
                selector=element.selector,
                html=element.html,
                tag_name=element.tag_name,
            )
        )


class TabWalker:
    """
    Runs the keyboard test against one live page.

    Composes the surveyor, the unfocusable scanner, the dialog detector
    and the activation prober around the Tab-walk state machine.
    """

    def __init__(
        self,
        tuning: KeyboardTuning | None = None,
        detector: DialogDetector | None = None,
        surveyor: FocusableSurveyor | None = None,
        scanner: UnfocusableInteractiveScanner | None = None,
        prober: ActivationProber | None = None,
    ) -> None:
        self.tuning = tuning or KeyboardTuning()
        self.detector = detector or DialogDetector()
        self.surveyor = surveyor or FocusableSurveyor()
        self.scanner = scanner or UnfocusableInteractiveScanner()
        self.prober = prober or ActivationProber(self.detector, self.tuning)

    async def run(self, page: KeyboardPage) -> KeyboardTestResult:
        """
        Walk the page with Tab and collect keyboard findings.

        Args:
            page: A loaded page. Its focus and navigation behavior are
                changed for the rest of its life.

        Returns:
            KeyboardTestResult with everything found before the walk stopped.
            A page error mid-walk ends the walk with a ``page error`` stop
            reason instead of raising.
        """
        census = await self.surveyor.survey(page)
        unfocusable = await self.scanner.scan(page)

        await page.focus_document_start()
        await page.install_navigation_guard()

        state = WalkState.start(len(census), self.tuning)
        findings = _Findings()
        logger.debug("Starting Tab walk: %d focusable, budget %d",
                     state.total_focusable, state.step_budget)

        try:
            while not state.finished:
                if state.budget_exhausted:
                    state = state.done("step budget exhausted")
                    break
                state = state.tab()
                state = await self._step(page, state, findings)
        except NavigationError as e:
            logger.warning("Tab walk interrupted after %d step(s): %s", state.steps_taken, e.message)
            state = state.done(f"page error: {e.message}")

        logger.info("Tab walk finished after %d step(s): %s", state.steps_taken, state.stop_reason)

        return KeyboardTestResult(
            total_focusable_elements=state.total_focusable,
            tested_elements=state.tested,
            keyboard_traps=findings.traps,
            unfocusable_interactive=unfocusable,
            focus_order=findings.focus_order,
            dialog_escapes=findings.dialog_escapes,
            button_activations=findings.activations,
            stop_reason=state.stop_reason,
        )

    async def _step(self, page: KeyboardPage, state: WalkState, findings: _Findings) -> WalkState:
        """Press Tab once and apply the resulting transition."""
        await page.press("Tab")
        await page.pause(self.tuning.tab_settle_ms)

        focused = await page.active_element()
        selector = focused.selector if focused is not None else None
        step = state.classify(selector)

        if step is FocusStep.SKIPPED:
            return state.resume(selector)

        if focused is None:
            return state.leave_content()

        if step is FocusStep.WRAPPED:
            return state.done("wraparound: focus returned to the first element")

        if step is FocusStep.REPEAT:
            state = state.repeat(self.tuning.repeat_threshold)
            if state.phase is WalkPhase.TRAP_SUSPECTED:
                return await self._resolve_trap(page, state, focused, findings)
            return state

        state = state.enter(focused.selector)
        findings.add_focus(focused)

        if qualifies_for_activation(focused) and not state.is_navigation_trigger(focused.selector):
            outcome = await self.prober.probe(page, focused)
            findings.activations.append(outcome.activation)
            if outcome.dialog_escape is not None:
                findings.dialog_escapes.append(outcome.dialog_escape)
            if outcome.navigated:
                return state.after_navigation(focused.selector)

        return state.check_wraparound()

    async def _resolve_trap(
        self,
        page: KeyboardPage,
        state: WalkState,
        focused: ElementProbe,
        findings: _Findings,
    ) -> WalkState:
        """Decide whether a suspected trap is a dialog Escape can leave."""
        tabs = self.tuning.repeat_threshold
        dialog = await self.detector.detect(page)

        if dialog.in_dialog and dialog.dialog is not None:
            if state.can_attempt_escape(self.tuning.dialog_escape_budget):
                await page.press("Escape")
                await page.pause(self.tuning.escape_settle_ms)
                escaped = not (await self.detector.detect(page)).in_dialog
                findings.dialog_escapes.append(
                    DialogEscape(
                        dialog_selector=dialog.dialog.selector,
                        dialog_html=dialog.dialog.html,
                        escaped_successfully=escaped,
                        note=(
                            f"Focus held inside dialog for {tabs} Tab presses; Escape released it"
                            if escaped
                            else f"Focus held inside dialog for {tabs} Tab presses and Escape did not close it"
                        ),
                    )
                )
                if escaped:
                    logger.info("Escape released focus from dialog %s", dialog.dialog.selector)
                    if await page.active_element() is None:
                        await page.focus_document_start()
                    return state.after_escape()

                findings.traps.append(
                    KeyboardTrap(
                        selector=focused.selector,
                        html=focused.html,
                        issue=(
                            f"Focus is trapped inside dialog {dialog.dialog.selector}: "
                            f"Tab does not move focus and Escape does not close the dialog"
                        ),
                    )
                )
                logger.info("Keyboard trap confirmed in dialog %s", dialog.dialog.selector)
                return state.escape_failed()

            findings.traps.append(
                KeyboardTrap(
                    selector=focused.selector,
                    html=focused.html,
                    issue=(
                        f"Focus stays on this element inside dialog {dialog.dialog.selector} "
                        f"after {tabs} Tab presses; Escape attempts for this page are exhausted"
                    ),
                )
            )
            logger.info("Keyboard trap at %s, escape budget exhausted", focused.selector)
            return state.trap_confirmed()

        findings.traps.append(
            KeyboardTrap(
                selector=focused.selector,
                html=focused.html,
                issue=(
                    f"Cannot Tab away: focus stayed on this element for {tabs} consecutive "
                    f"Tab presses"
                ),
            )
        )
        logger.info("Keyboard trap at %s", focused.selector)
        return state.trap_confirmed()


async def run_keyboard_test(
    page: KeyboardPage,
    tuning: KeyboardTuning | None = None,
) -> KeyboardTestResult:
    """
    Run the keyboard test against a live page.

    This is the primary public API of the keyboard engine.

    Args:
        page: A loaded page implementing ``KeyboardPage``.
        tuning: Walk constants. Defaults to ``KeyboardTuning()``.

    Returns:
        KeyboardTestResult for the page.

    Example:
        >>> async with browser.open(target) as page:
        ...     result = await run_keyboard_test(page)
        >>> print(len(result.keyboard_traps))
    """
    return await TabWalker(tuning=tuning).run(page)
