# tests/test_resolver.py
"""
Tests for descriptor resolution.
"""

import time

import pytest

from uireuse.descriptor import ControlKind, ElementDescriptor, css_string, xpath_literal
from uireuse.exceptions import MissingIdError, NotFoundError, TimeoutError
from uireuse.interfaces import Readiness
from uireuse.resolver import Resolver

from fakedriver import FakeNode

pytestmark = pytest.mark.usefixtures("fast_timings")


@pytest.fixture
def resolver(driver):
    return Resolver(driver)


class TestElementDescriptor:
    """Tests for descriptor construction."""

    def test_rejects_unknown_strategy(self):
        """Should reject strategies the drivers do not understand."""
        with pytest.raises(ValueError):
            ElementDescriptor("link_text", "Home")

    def test_rejects_empty_value(self):
        with pytest.raises(ValueError):
            ElementDescriptor.css("")

    def test_is_immutable(self):
        """Should not allow mutation after construction."""
        descriptor = ElementDescriptor.by_id("name")
        with pytest.raises(Exception):
            descriptor.value = "other"

    def test_describe_includes_parent(self):
        descriptor = ElementDescriptor.css("li", name="row").within(ElementDescriptor.by_id("list"))
        assert descriptor.describe() == "'row' (css='li') within id='list'"

    def test_as_control_returns_copy(self):
        plain = ElementDescriptor.by_id("notes")
        multiline = plain.as_control(ControlKind.MULTILINE_FIELD)
        assert plain.control is None
        assert multiline.control is ControlKind.MULTILINE_FIELD

    def test_xpath_literal_quotes(self):
        assert xpath_literal("plain") == "'plain'"
        assert xpath_literal("it's") == '"it\'s"'
        assert xpath_literal("a'b\"c") == "concat('a', \"'\", 'b\"c')"

    def test_css_string_escapes_quotes(self):
        assert css_string("a'b") == "'a\\'b'"


class TestResolve:
    """Tests for Resolver.resolve."""

    def test_resolves_first_match_by_default(self, driver, resolver):
        """Should return the first match in document order."""
        first = driver.add(FakeNode("button", id="first", classes=["btn"]))
        driver.add(FakeNode("button", id="second", classes=["btn"]))

        element = resolver.resolve(ElementDescriptor.css(".btn"))

        assert element.handle is first
        assert element.meta.index == 0
        assert element.meta.match_count == 2

    def test_resolves_requested_index(self, driver, resolver):
        driver.add(FakeNode("button", id="first", classes=["btn"]))
        second = driver.add(FakeNode("button", id="second", classes=["btn"]))

        element = resolver.resolve(ElementDescriptor.css(".btn"), index=1)

        assert element.handle is second
        assert element.id == "second"

    def test_index_beyond_matches_is_not_found(self, driver, resolver):
        """Should not clamp an out-of-range index to the last match."""
        driver.add(FakeNode("button", classes=["btn"]))

        with pytest.raises(NotFoundError) as exc_info:
            resolver.resolve(ElementDescriptor.css(".btn"), index=1, timeout=0.1)

        assert exc_info.value.match_count == 1
        assert exc_info.value.index == 1

    def test_negative_index_is_rejected(self, resolver):
        with pytest.raises(ValueError):
            resolver.resolve(ElementDescriptor.css(".btn"), index=-1)

    def test_never_matched_raises_not_found(self, resolver):
        """Should raise NotFoundError carrying timeout and description."""
        descriptor = ElementDescriptor.by_id("missing", name="Save button")

        with pytest.raises(NotFoundError) as exc_info:
            resolver.resolve(descriptor, timeout=0.1)

        error = exc_info.value
        assert error.timeout == 0.1
        assert "Save button" in error.description
        assert "Save button" in str(error)

    def test_matched_but_not_ready_raises_timeout(self, driver, resolver):
        """Should raise TimeoutError when the match never becomes visible."""
        driver.add(FakeNode("button", id="hidden", visible=False))

        start = time.monotonic()
        with pytest.raises(TimeoutError) as exc_info:
            resolver.resolve(ElementDescriptor.by_id("hidden"), timeout=0.2)
        elapsed = time.monotonic() - start

        assert exc_info.value.timeout == 0.2
        assert "hidden" in exc_info.value.description
        assert 0.2 <= elapsed < 0.2 + 0.01 + 0.1

    def test_exists_readiness_accepts_hidden_element(self, driver, resolver):
        hidden = driver.add(FakeNode("div", id="hidden", visible=False))
        element = resolver.resolve(ElementDescriptor.by_id("hidden"), readiness=Readiness.EXISTS)
        assert element.handle is hidden

    def test_clickable_readiness_rejects_covered_element(self, driver, resolver):
        """Should wait for an overlay to go away before reporting clickable."""
        driver.add(FakeNode("button", id="covered", covered=True))

        with pytest.raises(TimeoutError):
            resolver.resolve(ElementDescriptor.by_id("covered"), timeout=0.1, readiness=Readiness.CLICKABLE)

    def test_clickable_readiness_rejects_disabled_element(self, driver, resolver):
        driver.add(FakeNode("button", id="disabled", enabled=False))

        with pytest.raises(TimeoutError):
            resolver.resolve(ElementDescriptor.by_id("disabled"), timeout=0.1, readiness=Readiness.CLICKABLE)

    def test_waits_for_element_to_appear(self, driver, resolver):
        """Should keep polling until a late element shows up."""
        late = FakeNode("button", id="late", visible=False)
        driver.add(late)
        counter = {"polls": 0}
        original = driver.find_elements

        def find_elements(strategy, value, root=None):
            counter["polls"] += 1
            if counter["polls"] == 3:
                late.visible = True
            return original(strategy, value, root)

        driver.find_elements = find_elements

        element = resolver.resolve(ElementDescriptor.by_id("late"), timeout=1.0)
        assert element.handle is late
        assert counter["polls"] >= 3

    def test_parent_scopes_the_search(self, driver, resolver):
        """Should only return candidates inside the parent."""
        driver.add(FakeNode("input", id="outside"))
        form = driver.add(FakeNode("form", id="login"))
        inside = driver.add(FakeNode("input", id="inside"), parent=form)

        descriptor = ElementDescriptor.css("input").within(ElementDescriptor.by_id("login"))
        element = resolver.resolve(descriptor)

        assert element.handle is inside
        assert element.meta.match_count == 1

    def test_nested_parent_matches_list_each_element_once(self, driver, resolver):
        """Should not repeat items reachable through both an outer and an inner parent match."""
        outer = driver.add(FakeNode("div", classes=["list"]))
        inner = driver.add(FakeNode("div", classes=["list"]), parent=outer)
        first = driver.add(FakeNode("li", id="first"), parent=inner)
        second = driver.add(FakeNode("li", id="second"), parent=inner)

        descriptor = ElementDescriptor.css("li").within(ElementDescriptor.css(".list"))

        assert resolver.query(descriptor) == [first, second]
        element = resolver.resolve(descriptor, index=1)
        assert element.handle is second
        assert element.meta.match_count == 2

    def test_resolution_does_not_touch_the_page(self, driver, resolver):
        """Should only query, never click or type."""
        driver.add(FakeNode("button", id="ok"))
        resolver.resolve(ElementDescriptor.by_id("ok"), readiness=Readiness.CLICKABLE)
        assert driver.calls == []


class TestResolverHelpers:
    """Tests for element_id, scroll_to, exists and active_element."""

    def test_element_id(self, driver, resolver):
        driver.add(FakeNode("div", id="customer", classes=["field"]))
        assert resolver.element_id(ElementDescriptor.css(".field")) == "customer"

    def test_element_id_without_id_raises(self, driver, resolver):
        """Should report a found element without id apart from a missing element."""
        driver.add(FakeNode("div", classes=["field"]))
        with pytest.raises(MissingIdError) as exc_info:
            resolver.element_id(ElementDescriptor.css(".field"))
        assert not isinstance(exc_info.value, NotFoundError)
        assert "has no id" in str(exc_info.value)
        assert "matches=0" not in str(exc_info.value)

    def test_resolve_by_id(self, driver, resolver):
        node = driver.add(FakeNode("span", id="status"))
        assert resolver.resolve_by_id("status").handle is node

    def test_scroll_to(self, driver, resolver):
        driver.add(FakeNode("li", id="row-40", visible=False))
        resolver.scroll_to(ElementDescriptor.by_id("row-40"))
        assert driver.calls == [("scroll_into_view", "row-40")]

    def test_exists(self, driver, resolver):
        driver.add(FakeNode("div", id="present"))
        assert resolver.exists(ElementDescriptor.by_id("present")) is True
        assert resolver.exists(ElementDescriptor.by_id("absent")) is False

    def test_active_element(self, driver, resolver):
        field = driver.add(FakeNode("input", id="focus-me"))
        driver.focused = field
        active = resolver.active_element()
        assert active.handle is field
        assert active.description == "<active element>"
