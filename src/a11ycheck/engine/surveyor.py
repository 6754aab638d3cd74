"""
Focusable-element census and unfocusable-interactive scan.

Both are read-only passes over the live DOM. The page returns broad
candidate sets; the predicates here decide what counts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from a11ycheck.domain.keyboard import ElementProbe, FocusableElement, UnfocusableElement

if TYPE_CHECKING:
    from a11ycheck.engine.page import KeyboardPage

logger = logging.getLogger(__name__)

# Tags that take keyboard focus without a tabindex
NATIVE_FOCUSABLE_TAGS = frozenset({"button", "input", "select", "textarea"})

# Roles that promise keyboard interaction
INTERACTIVE_ROLES = frozenset({"button", "link", "menuitem", "tab", "checkbox", "radio"})


def is_visible(element: ElementProbe) -> bool:
    """Rendered with a size, not display:none, not visibility:hidden, not transparent."""
    return (
        element.width > 0
        and element.height > 0
        and element.display != "none"
        and element.visibility != "hidden"
        and element.opacity > 0
    )


def is_focusable(element: ElementProbe) -> bool:
    """Whether a focus candidate can actually receive Tab focus."""
    if element.disabled:
        return False
    declared = element.declared_tab_index
    if declared is not None and declared < 0:
        return False
    return True


def is_interactive(element: ElementProbe) -> bool:
    """Carries an event handler attribute or an interactive ARIA role."""
    return element.has_event_handler or element.role in INTERACTIVE_ROLES


def is_keyboard_reachable(element: ElementProbe) -> bool:
    """
    Whether an interactive element can be reached with Tab.

    A negative tabindex removes even native controls from the Tab order.
    """
    declared = element.declared_tab_index
    if declared is not None:
        return declared >= 0
    if element.tag_name in NATIVE_FOCUSABLE_TAGS:
        return True
    return element.tag_name == "a" and element.has_href


class FocusableSurveyor:
    """Counts the visible, focusable elements of a page."""

    async def survey(self, page: KeyboardPage) -> list[FocusableElement]:
        """
        Census of focusable elements, in document order.

        Only the count is used by the walk; real Tab order is discovered
        by pressing Tab.
        """
        candidates = await page.focus_candidates()
        elements = [
            FocusableElement(
                selector=c.selector,
                html=c.html,
                tag_name=c.tag_name,
                tab_index=c.tab_index,
                aria_role=c.role,
            )
            for c in candidates
            if is_focusable(c) and is_visible(c)
        ]
        logger.debug("Surveyed %d focusable of %d candidates", len(elements), len(candidates))
        return elements


class UnfocusableInteractiveScanner:
    """Finds visible elements that act interactive but cannot take focus."""

    async def scan(self, page: KeyboardPage) -> list[UnfocusableElement]:
        candidates = await page.interactive_candidates()
        found = [
            UnfocusableElement(selector=c.selector, html=c.html, role=c.role)
            for c in candidates
            if is_interactive(c) and not is_keyboard_reachable(c) and is_visible(c)
        ]
        if found:
            logger.info("Found %d unfocusable interactive element(s)", len(found))
        return found
