"""
Activation probing of button-like elements.

The prober presses Enter on the focused element and classifies what
happened: a navigation, a dialog opening, an expand/collapse toggle, or
nothing observable.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from a11ycheck.domain.config import KeyboardTuning
from a11ycheck.domain.keyboard import AriaState, ButtonActivation, DialogEscape, ElementProbe
from a11ycheck.engine.dialogs import DialogDetector

if TYPE_CHECKING:
    from a11ycheck.engine.page import KeyboardPage

logger = logging.getLogger(__name__)

ACTIVATION_ROLES = frozenset({"button", "tab", "menuitem"})


def qualifies_for_activation(element: ElementProbe) -> bool:
    """Native buttons, button-like roles, and toggles carrying aria-expanded/pressed."""
    return (
        element.tag_name == "button"
        or element.role in ACTIVATION_ROLES
        or element.aria_expanded is not None
        or element.aria_pressed is not None
    )


class ActivationOutcome(BaseModel):
    """Records produced by one probe."""

    model_config = ConfigDict(frozen=True)

    activation: ButtonActivation
    dialog_escape: DialogEscape | None = None
    navigated: bool = False


class ActivationProber:
    """Presses Enter on a focused element and classifies the result."""

    def __init__(
        self,
        detector: DialogDetector | None = None,
        tuning: KeyboardTuning | None = None,
    ) -> None:
        self.detector = detector or DialogDetector()
        self.tuning = tuning or KeyboardTuning()

    async def probe(self, page: KeyboardPage, element: ElementProbe) -> ActivationOutcome:
        """
        Activate ``element`` with Enter and classify the state change.

        A navigation is undone by restoring the original page and moving
        focus back to the document start; the caller must memoize the
        selector so it is not probed again.

        Args:
            page: The live page, with ``element`` focused.
            element: The focused element.

        Returns:
            Exactly one ButtonActivation, plus a DialogEscape when a
            dialog opened.
        """
        before = AriaState.of(element)
        url_before = await page.current_url()

        async with page.navigation_allowed():
            await page.press("Enter")
            await page.pause(self.tuning.activation_settle_ms)
            url_after = await page.current_url()

        if url_after != url_before:
            logger.info("Activating %s navigated to %s, restoring %s",
                        element.selector, url_after, url_before)
            await page.restore(url_before)
            await page.focus_document_start()
            return ActivationOutcome(
                activation=ButtonActivation(
                    selector=element.selector,
                    html=element.html,
                    activated=True,
                    note=(
                        f"Activation navigated away to {url_after}; "
                        "the original page was restored and this element is skipped from now on"
                    ),
                ),
                navigated=True,
            )

        dialog = await self.detector.detect(page)
        after = await page.aria_state(element.selector)
        expanded = after is not None and after.differs_from(before)

        escape: DialogEscape | None = None
        if dialog.in_dialog and dialog.dialog is not None:
            await page.press("Escape")
            await page.pause(self.tuning.escape_settle_ms)
            closed = not (await self.detector.detect(page)).in_dialog
            escape = DialogEscape(
                dialog_selector=dialog.dialog.selector,
                dialog_html=dialog.dialog.html,
                escaped_successfully=closed,
                note=(
                    "Dialog closed with Escape"
                    if closed
                    else "Dialog opened by activation did not close with Escape"
                ),
            )
        elif expanded:
            # Best effort: toggle back, result not verified
            await page.press("Enter")
            await page.pause(self.tuning.activation_settle_ms)

        if dialog.in_dialog:
            note = "Activation opened a dialog"
        elif expanded:
            note = "Activation toggled ARIA state (expanded/pressed/selected)"
        else:
            note = "No observable change after activation"

        return ActivationOutcome(
            activation=ButtonActivation(
                selector=element.selector,
                html=element.html,
                activated=dialog.in_dialog or expanded,
                triggered_dialog=dialog.in_dialog,
                expanded_content=expanded,
                note=note,
            ),
            dialog_escape=escape,
        )
