# tests/test_select_search.py
"""
Tests for select, search, reset and value-help primitives.
"""

import pytest

from uireuse.config import Conventions
from uireuse.controls import popup_checkbox, popup_item, select_item
from uireuse.descriptor import ControlKind, ElementDescriptor
from uireuse.exceptions import MissingIdError, NotFoundError
from uireuse.interfaces import Key

from fakedriver import FakeNode


@pytest.fixture
def combo(driver):
    """Combo box 'country' with its arrow button and an open popup list."""
    driver.add(FakeNode("div", id="country"))
    arrow = driver.add(FakeNode("span", id="country-arrow"))
    popup = driver.add(FakeNode("ul", classes=["sapMList"]))
    driver.register("css", Conventions().popup_list_css, popup)

    items = {}
    for label in ("Germany", "France", "Spain"):
        item = driver.add(FakeNode("li", id=f"item-{label}", text=label), parent=popup)
        checkbox = driver.add(FakeNode("input", id=f"check-{label}", attrs={"type": "checkbox"}), parent=item)
        driver.register("xpath", popup_item(label).value, item)
        driver.register("css", popup_checkbox(label).value, checkbox)
        items[label] = item
    return arrow, items


def clicked(driver):
    return [c[1] for c in driver.calls_of("click")]


class TestDescriptors:
    """Tests for popup descriptor builders."""

    def test_popup_item_is_scoped_to_popup_list(self):
        item = popup_item("Germany")
        assert item.strategy == "xpath"
        assert item.value == ".//li[normalize-space(.)='Germany']"
        assert item.parent.value == Conventions().popup_list_css

    def test_popup_checkbox_nests_in_item(self):
        checkbox = popup_checkbox("O'Brien")
        assert checkbox.parent.value == ".//li[normalize-space(.)=\"O'Brien\"]"

    def test_select_item_uses_conventions(self):
        conventions = Conventions().with_overrides(select_list_css=".myList")
        assert select_item("A", conventions).parent.value == ".myList"

    def test_unknown_convention_is_rejected(self):
        with pytest.raises(ValueError):
            Conventions().with_overrides(no_such_field="x")


class TestSelectComboBox:
    """Tests for select_combo_box."""

    def test_opens_popup_and_clicks_item(self, driver, ui, combo):
        ui.select_combo_box(ElementDescriptor.by_id("country"), "France")

        assert clicked(driver) == ["country-arrow", "item-France"]
        assert ("scroll_into_view", "item-France") in driver.calls
        assert driver.calls_of("keys") == []

    def test_without_value_only_opens_popup(self, driver, ui, combo):
        ui.select_combo_box(ElementDescriptor.by_id("country"))
        assert clicked(driver) == ["country-arrow"]

    def test_missing_item_raises_not_found(self, driver, ui, combo):
        with pytest.raises(NotFoundError):
            ui.select_combo_box(ElementDescriptor.by_id("country"), "Atlantis", timeout=0.05)

    def test_missing_arrow_raises_not_found(self, driver, ui):
        driver.add(FakeNode("div", id="plain"))
        with pytest.raises(NotFoundError):
            ui.select_combo_box(ElementDescriptor.by_id("plain"), "x")


class TestSelectMultiComboBox:
    """Tests for select_multi_combo_box."""

    def test_ticks_values_in_order_then_confirms(self, driver, ui, combo):
        """Should tick each checkbox in the given order and close with Enter."""
        ui.select_multi_combo_box(ElementDescriptor.by_id("country"), ["Spain", "Germany"])

        assert clicked(driver) == ["country-arrow", "check-Spain", "check-Germany"]
        assert driver.calls[-1] == ("keys", (Key.ENTER,))

    def test_accepts_single_string(self, driver, ui, combo):
        ui.select_multi_combo_box(ElementDescriptor.by_id("country"), "France")
        assert clicked(driver) == ["country-arrow", "check-France"]

    def test_duplicates_select_the_same_option_twice(self, driver, ui, combo):
        ui.select_multi_combo_box(ElementDescriptor.by_id("country"), ["Spain", "Spain"])
        assert clicked(driver) == ["country-arrow", "check-Spain", "check-Spain"]

    def test_without_values_only_opens_popup(self, driver, ui, combo):
        ui.select_multi_combo_box(ElementDescriptor.by_id("country"), [])
        assert clicked(driver) == ["country-arrow"]
        assert driver.calls_of("keys") == []

    def test_empty_string_only_opens_popup(self, driver, ui, combo):
        """Should treat an empty label like no value: open, no pick, no Enter."""
        ui.select_multi_combo_box(ElementDescriptor.by_id("country"), "")
        assert clicked(driver) == ["country-arrow"]
        assert driver.calls_of("keys") == []

    def test_empty_labels_are_skipped(self, driver, ui, combo):
        ui.select_multi_combo_box(ElementDescriptor.by_id("country"), ["", "France", None])
        assert clicked(driver) == ["country-arrow", "check-France"]
        assert driver.calls_of("keys") == [("keys", (Key.ENTER,))]


class TestSelectBox:
    """Tests for select_box and the select arrow."""

    def test_opens_and_picks_option(self, driver, ui):
        driver.add(FakeNode("div", id="unit"))
        driver.add(FakeNode("span", id="unit-arrow"))
        options = driver.add(FakeNode("ul", classes=["sapMSelectList"]))
        option = driver.add(FakeNode("li", id="opt-kg", attrs={"role": "option"}, text="kg"), parent=options)
        driver.register("css", Conventions().select_list_css, options)
        driver.register("xpath", select_item("kg").value, option)

        ui.select_box(ElementDescriptor.by_id("unit", control=ControlKind.SINGLE_SELECT), "kg")

        assert clicked(driver) == ["unit-arrow", "opt-kg"]

    def test_click_select_arrow_and_retry(self, driver, ui):
        driver.add(FakeNode("div", id="unit"))
        arrow = driver.add(FakeNode("span", id="unit-arrow"))
        arrow.click_errors.append(RuntimeError("element click intercepted"))

        ui.click_select_arrow_and_retry(ElementDescriptor.by_id("unit"), retries=2, interval=0.01)

        assert clicked(driver) == ["unit-arrow", "unit-arrow"]

    def test_custom_arrow_suffix(self, driver, fast_timings):
        from uireuse.interaction import UserInteraction

        driver.add(FakeNode("div", id="unit"))
        driver.add(FakeNode("span", id="unit--icon"))
        ui = UserInteraction(driver, conventions=Conventions().with_overrides(arrow_suffix="--icon"))

        ui.click_select_arrow(ElementDescriptor.by_id("unit"))

        assert clicked(driver) == ["unit--icon"]


class TestSearch:
    """Tests for search_for and reset_search."""

    def search_field(self, driver, value=""):
        driver.add(FakeNode("input", id="search", value=value))
        return ElementDescriptor.by_id("search", control=ControlKind.PLAIN_FIELD)

    def test_search_with_enter(self, driver, ui):
        descriptor = self.search_field(driver, value="old")

        ui.search_for(descriptor, "laptop")

        assert driver.by_id("search").value == "laptop"
        assert driver.calls[-1] == ("keys", (Key.ENTER,))

    def test_search_with_button(self, driver, ui):
        descriptor = self.search_field(driver)
        driver.add(FakeNode("button", id="search-search"))

        ui.search_for(descriptor, "laptop", use_enter=False)

        assert clicked(driver)[-1] == "search-search"
        assert driver.calls_of("keys") == []

    def test_reset_search(self, driver, ui):
        descriptor = self.search_field(driver, value="laptop")
        reset = driver.add(FakeNode("button", id="search-reset"))
        reset.on_click = lambda node: setattr(driver.by_id("search"), "value", "")

        ui.reset_search(descriptor)

        assert driver.by_id("search").value == ""

    def test_reset_empty_search_raises_not_found(self, driver, ui):
        """Should fail when there is no reset button because nothing was entered."""
        descriptor = self.search_field(driver)

        with pytest.raises(NotFoundError) as exc_info:
            ui.reset_search(descriptor, timeout=0.05)

        assert "search-reset" in str(exc_info.value)


class TestValueHelp:
    """Tests for open_value_help."""

    def test_with_f4(self, driver, ui):
        driver.add(FakeNode("input", id="material"))
        ui.open_value_help(ElementDescriptor.by_id("material"))
        assert driver.calls == [("click", "material"), ("keys", (Key.F4,))]

    def test_with_icon(self, driver, ui):
        driver.add(FakeNode("input", id="material"))
        driver.add(FakeNode("span", id="material-vhi"))

        ui.open_value_help(ElementDescriptor.by_id("material"), use_f4_key=False)

        assert clicked(driver) == ["material", "material-vhi"]

    def test_icon_of_field_without_id_raises_missing_id(self, driver, ui):
        """Should report the missing id rather than an unmatched value-help icon."""
        driver.add(FakeNode("input", classes=["material"]))

        with pytest.raises(MissingIdError):
            ui.open_value_help(ElementDescriptor.css("input.material"), use_f4_key=False)

        assert clicked(driver) == ["input"]
