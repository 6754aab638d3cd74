"""
Unit tests for the focusable census and the unfocusable-interactive scan.
"""

from __future__ import annotations

import pytest

from a11ycheck.engine.surveyor import (
    FocusableSurveyor,
    UnfocusableInteractiveScanner,
    is_focusable,
    is_interactive,
    is_keyboard_reachable,
    is_visible,
)
from fakes import FakePage, element


class TestPredicates:
    """Tests for the element predicates."""

    def test_visible_element(self) -> None:
        assert is_visible(element("button#ok"))

    @pytest.mark.parametrize(
        "fields",
        [
            {"width": 0},
            {"height": 0},
            {"display": "none"},
            {"visibility": "hidden"},
            {"opacity": 0},
        ],
    )
    def test_hidden_elements(self, fields: dict) -> None:
        """Zero size, display:none, visibility:hidden and transparency all hide."""
        assert not is_visible(element("button#x", **fields))

    def test_opacity_string_is_parsed(self) -> None:
        assert element("button#x", opacity="0.5").opacity == 0.5
        assert element("button#x", opacity="bogus").opacity == 1.0

    def test_negative_tabindex_is_not_focusable(self) -> None:
        assert not is_focusable(element("div#x", tag="div", tab_index_attr="-1"))
        assert is_focusable(element("div#x", tag="div", tab_index_attr="0"))

    def test_disabled_is_not_focusable(self) -> None:
        assert not is_focusable(element("button#x", disabled=True))

    def test_malformed_tabindex_is_ignored(self) -> None:
        probe = element("div#x", tag="div", tab_index_attr="abc")
        assert probe.declared_tab_index is None
        assert is_focusable(probe)

    def test_interactive_by_role_or_handler(self) -> None:
        assert is_interactive(element("span#x", tag="span", role="Button"))
        assert is_interactive(element("span#x", tag="span", has_event_handler=True))
        assert not is_interactive(element("span#x", tag="span", role="presentation"))

    def test_reachability(self) -> None:
        assert is_keyboard_reachable(element("button#x"))
        assert is_keyboard_reachable(element("a#x", tag="a", has_href=True))
        assert not is_keyboard_reachable(element("a#x", tag="a"))
        assert is_keyboard_reachable(element("div#x", tag="div", tab_index_attr="0"))
        assert not is_keyboard_reachable(element("div#x", tag="div"))

    def test_negative_tabindex_removes_native_control(self) -> None:
        assert not is_keyboard_reachable(element("button#x", tab_index_attr="-1"))


@pytest.mark.anyio
class TestFocusableSurveyor:
    """Tests for the census."""

    async def test_counts_visible_focusable(self) -> None:
        page = FakePage(
            census=[
                element("button#a"),
                element("button#hidden", display="none"),
                element("div#skip", tag="div", tab_index_attr="-1"),
                element("a#b", tag="a", has_href=True),
            ]
        )

        found = await FocusableSurveyor().survey(page)

        assert [f.selector for f in found] == ["button#a", "a#b"]
        assert found[0].tag_name == "button"


@pytest.mark.anyio
class TestUnfocusableInteractiveScanner:
    """Tests for the unfocusable-interactive scan."""

    async def test_button_with_checkbox_role_and_negative_tabindex(self) -> None:
        """A visible role=checkbox button with tabindex=-1 is reported exactly once."""
        page = FakePage(
            interactive=[
                element("button.cb", role="checkbox", tab_index_attr="-1", tab_index=-1)
            ]
        )

        found = await UnfocusableInteractiveScanner().scan(page)

        assert len(found) == 1
        assert found[0].selector == "button.cb"
        assert found[0].role == "checkbox"

    async def test_skips_reachable_and_hidden(self) -> None:
        page = FakePage(
            interactive=[
                element("div.click", tag="div", has_event_handler=True),
                element("div.ok", tag="div", role="button", tab_index_attr="0"),
                element("a.link", tag="a", role="link", has_href=True),
                element("span.gone", tag="span", role="tab", display="none"),
                element("input#name", tag="input", has_event_handler=True),
            ]
        )

        found = await UnfocusableInteractiveScanner().scan(page)

        assert [f.selector for f in found] == ["div.click"]
        assert found[0].role is None
