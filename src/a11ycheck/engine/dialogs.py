"""
Dialog detection for the focused element.

Whether something "is a dialog" is a fuzzy, attribute- and name-based
guess. The guess lives behind the ``DialogSignature`` protocol so it can
be swapped without touching the Tab walk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from a11ycheck.domain.keyboard import DialogInfo, DialogState, ElementProbe

if TYPE_CHECKING:
    from a11ycheck.engine.page import KeyboardPage


@runtime_checkable
class DialogSignature(Protocol):
    """Decides whether one element is a dialog container."""

    def matches(self, element: ElementProbe) -> bool:
        ...


class HeuristicDialogSignature:
    """
    Default dialog signature.

    Matches ARIA dialog roles, ``aria-modal="true"``, the ``<dialog>``
    tag, and ids or class names containing modal/dialog/popup/overlay.
    """

    def __init__(
        self,
        roles: frozenset[str] = frozenset({"dialog", "alertdialog"}),
        tags: frozenset[str] = frozenset({"dialog"}),
        name_fragments: tuple[str, ...] = ("modal", "dialog", "popup", "overlay"),
    ) -> None:
        self.roles = roles
        self.tags = tags
        self.name_fragments = name_fragments

    def matches(self, element: ElementProbe) -> bool:
        if element.role in self.roles:
            return True
        if (element.aria_modal or "").lower() == "true":
            return True
        if element.tag_name in self.tags:
            return True
        names = f"{element.element_id or ''} {element.class_name or ''}".lower()
        return any(fragment in names for fragment in self.name_fragments)


def find_dialog(
    ancestry: list[ElementProbe],
    signature: DialogSignature,
) -> DialogState:
    """
    Nearest dialog container in an innermost-first ancestor chain.

    Args:
        ancestry: The focused element followed by its ancestors.
        signature: Predicate deciding what counts as a dialog.

    Returns:
        DialogState for the first matching element, or not-in-dialog.
    """
    for element in ancestry:
        if signature.matches(element):
            return DialogState(
                in_dialog=True,
                dialog=DialogInfo(selector=element.selector, html=element.html),
            )
    return DialogState(in_dialog=False)


class DialogDetector:
    """Checks whether focus currently sits inside a dialog."""

    def __init__(self, signature: DialogSignature | None = None) -> None:
        self.signature = signature or HeuristicDialogSignature()

    async def detect(self, page: KeyboardPage) -> DialogState:
        return find_dialog(await page.active_ancestry(), self.signature)
