# uireuse/interaction.py
"""
@file interaction.py
@brief Interaction primitives: click, fill, clear, select, search and reset.

Every primitive resolves its element again on each call; the "..._and_retry"
variants re-run the whole primitive through the retry executor.
"""

from __future__ import annotations

import re
import time
from typing import Any, List, Optional, Sequence, Union

from .config import Conventions, TimeConfig
from .context import tracked_action
from .controls import (
    NATIVE_VALUE_TAGS,
    TOKEN_CONTROLS,
    ClearTarget,
    clear_handler,
    input_tag,
    popup_checkbox,
    popup_item,
    select_item,
    sibling,
)
from .descriptor import ControlKind, ElementDescriptor, css_string
from .element import ResolvedElement
from .exceptions import (
    MissingIdError,
    ObstructedActionError,
    PreconditionError,
    VerificationError,
)
from .interfaces import IUIDriver, Key, KeyInput, Readiness
from .resolver import Resolver
from .waits import retry


class _Absent:
    """Marker for "no value given", as opposed to an empty string."""

    _instance: Optional[_Absent] = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

OBSTRUCTED_PATTERN = re.compile(
    r"is not clickable at point|element click intercepted|other element would receive the click",
    re.IGNORECASE,
)


def is_absent(value: Any) -> bool:
    """True for ABSENT and None; an empty string is a real value."""
    return value is ABSENT or value is None


class UserInteraction:
    """
    Resilient interaction primitives on top of a UI driver.

    Timeouts are in seconds; None uses the configured `resolve_element`
    timeout. Retry counts and intervals left as None come from the
    configured `step_retry` policy.
    """

    def __init__(
        self,
        driver: IUIDriver,
        resolver: Optional[Resolver] = None,
        conventions: Optional[Conventions] = None,
    ):
        """
        @param driver Driver binding used for key presses and in-page scripts
        @param resolver Resolver to use (one over `driver` if None)
        @param conventions Control naming conventions (current ones if None)
        """
        self.driver = driver
        self.resolver = resolver or Resolver(driver, conventions)
        self._conventions = conventions

    @property
    def conventions(self) -> Conventions:
        return self._conventions or self.resolver.conventions

    def _pause(self, name: str) -> None:
        seconds = getattr(TimeConfig.current(), name)
        if seconds > 0:
            time.sleep(seconds)

    # ------------------------------------------------------------------ mouse

    @tracked_action("click")
    def click(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> ResolvedElement:
        """
        Click the element once it is clickable.

        @throws ObstructedActionError if another element received the click
        """
        element = self.resolver.resolve(descriptor, index, timeout, Readiness.CLICKABLE)
        try:
            element.click()
        except Exception as e:
            if OBSTRUCTED_PATTERN.search(str(e)):
                raise ObstructedActionError("click", descriptor.describe(), cause=e) from e
            raise
        self._pause("after_click_pause")
        return element

    @tracked_action("click_and_retry")
    def click_and_retry(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> ResolvedElement:
        return retry(
            self.click, descriptor, index, timeout,
            attempts=retries, interval=interval, description=f"click {descriptor}",
        )

    @tracked_action("click_tab")
    def click_tab(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> ResolvedElement:
        """
        Click a tab and check that it became the selected one.

        The click is repeated (per `tab_select_retry`) until the tab carries a
        selection marker: aria-selected="true", the configured selected-tab
        class, or the driver's selected state.
        """
        setting = TimeConfig.current().tab_select_retry
        selected_class = self.conventions.selected_tab_class

        def click_and_check() -> ResolvedElement:
            self.click(descriptor, index, timeout)
            tab = self.resolver.resolve(descriptor, index, timeout, Readiness.VISIBLE)
            if tab.get_attribute("aria-selected") == "true" or tab.has_class(selected_class):
                return tab
            if tab.is_selected():
                return tab
            raise VerificationError(f"selection of tab {descriptor}", "selected", tab.get_attribute("class"))

        return retry(
            click_and_check,
            attempts=setting.retry_count,
            interval=setting.interval,
            description=f"click_tab {descriptor}",
        )

    @tracked_action("click_list_item")
    def click_list_item(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> ResolvedElement:
        """
        Select a list item by firing the press event of its control in the
        page. Works for items a pointer click would miss, for example while
        the list is still animating or partly covered.
        """
        element = self.resolver.resolve(descriptor, index, timeout, Readiness.VISIBLE)
        self.driver.fire_press(element.handle)
        self._pause("after_click_pause")
        return element

    # --------------------------------------------------------------- keyboard

    def _press(self, keys: Sequence[KeyInput]) -> None:
        self.driver.press_keys(list(keys))
        self._pause("after_keys_pause")

    @tracked_action("press_enter")
    def press_enter(self) -> None:
        self._press([Key.ENTER])

    @tracked_action("press_tab")
    def press_tab(self) -> None:
        self._press([Key.TAB])

    @tracked_action("press_backspace")
    def press_backspace(self) -> None:
        self._press([Key.BACKSPACE])

    @tracked_action("press_escape")
    def press_escape(self) -> None:
        self._press([Key.ESCAPE])

    @tracked_action("press_f4")
    def press_f4(self) -> None:
        self._press([Key.F4])

    @tracked_action("press_arrow_left")
    def press_arrow_left(self) -> None:
        self._press([Key.ARROW_LEFT])

    @tracked_action("press_arrow_right")
    def press_arrow_right(self) -> None:
        self._press([Key.ARROW_RIGHT])

    @tracked_action("select_all")
    def select_all(
        self,
        descriptor: Optional[ElementDescriptor] = None,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Select all content of a control with the platform's select-all chord.

        With a descriptor the control is clicked first; without one the
        chord goes to whatever holds focus.
        """
        if descriptor is not None:
            self.click(descriptor, index, timeout)
        platform = (self.driver.platform or "").lower()
        modifier = Key.COMMAND if platform.startswith(("mac", "darwin")) else Key.CONTROL
        self._press([modifier, "a"])

    # ----------------------------------------------------------------- inputs

    def _input_of(self, element: ResolvedElement, control: Optional[ControlKind]) -> ResolvedElement:
        """The native node holding the value of a control (the element itself if none)."""
        if element.tag_name in NATIVE_VALUE_TAGS:
            return element
        inner = self.driver.find_elements("css", input_tag(control), root=element.handle)
        if inner:
            return ResolvedElement(inner[0], element.meta)
        return element

    @tracked_action("fill")
    def fill(
        self,
        descriptor: ElementDescriptor,
        value: Union[str, _Absent, None] = ABSENT,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> Optional[ResolvedElement]:
        """
        Set the value of a control directly. Does nothing when `value` is absent.

        @return The node that received the value, or None for the no-op case
        @throws InvalidElementStateError (from the driver) if the control holds no value
        """
        if is_absent(value):
            return None
        element = self.resolver.resolve(descriptor, index, timeout, Readiness.VISIBLE)
        target = self._input_of(element, descriptor.control)
        target.set_value(value)
        return target

    @tracked_action("fill_and_retry")
    def fill_and_retry(
        self,
        descriptor: ElementDescriptor,
        value: Union[str, _Absent, None] = ABSENT,
        index: int = 0,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> Optional[ResolvedElement]:
        return retry(
            self.fill, descriptor, value, index, timeout,
            attempts=retries, interval=interval, description=f"fill {descriptor}",
        )

    @tracked_action("fill_active")
    def fill_active(self, value: Union[str, _Absent, None] = ABSENT) -> ResolvedElement:
        """Set the value of the focused element."""
        if is_absent(value):
            raise PreconditionError("fill_active", ["value"])
        element = self.resolver.active_element()
        element.set_value(value)
        return element

    @tracked_action("fill_active_and_retry")
    def fill_active_and_retry(
        self,
        value: Union[str, _Absent, None] = ABSENT,
        retries: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> ResolvedElement:
        if is_absent(value):
            raise PreconditionError("fill_active_and_retry", ["value"])
        return retry(self.fill_active, value, attempts=retries, interval=interval, description="fill_active")

    @tracked_action("clear")
    def clear(
        self,
        descriptor: Optional[ElementDescriptor] = None,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Clear a control, handling token chips where the control may have them.

        With a descriptor the control is clicked to focus it and its own id
        names the container. Without one the focused element is used as is:
        no click, and its id names the container. An element without an id is
        blanked through its native value node, with no token handling.

        @throws MissingIdError if a tokenizer or multi-select container carries no id
        """
        if descriptor is not None:
            element = self.click(descriptor, index, timeout)
            control = descriptor.control
        else:
            element = self.resolver.active_element()
            control = None

        container_id = element.id
        if not container_id:
            if control in TOKEN_CONTROLS:
                raise MissingIdError(element.description, "remove the tokens of the control")
            self._input_of(element, control).clear_value()
            return

        handler = clear_handler(control)
        handler(self, ClearTarget(descriptor, container_id, index, timeout))

    @tracked_action("clear_and_retry")
    def clear_and_retry(
        self,
        descriptor: Optional[ElementDescriptor] = None,
        index: int = 0,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> None:
        retry(
            self.clear, descriptor, index, timeout,
            attempts=retries, interval=interval, description=f"clear {descriptor or '<active element>'}",
        )

    @tracked_action("clear_and_fill")
    def clear_and_fill(
        self,
        descriptor: Optional[ElementDescriptor] = None,
        value: Union[str, _Absent, None] = ABSENT,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> ResolvedElement:
        """
        Clear a control, then set the value of whatever holds focus afterwards.

        @return The focused element that received the value
        @throws PreconditionError if `value` is absent (before any driver call)
        """
        _require_value("clear_and_fill", descriptor, value)
        self.clear(descriptor, index, timeout)
        return self.fill_active(value)

    @tracked_action("clear_fill_and_retry")
    def clear_fill_and_retry(
        self,
        descriptor: Optional[ElementDescriptor] = None,
        value: Union[str, _Absent, None] = ABSENT,
        index: int = 0,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        interval: Optional[float] = None,
        verify: bool = True,
    ) -> ResolvedElement:
        """
        Retry clear_and_fill until it succeeds. With `verify`, every attempt
        reads the value back and fails with VerificationError on a mismatch,
        which triggers the next attempt.
        """
        _require_value("clear_fill_and_retry", descriptor, value)
        what = descriptor.describe() if descriptor is not None else "<active element>"

        def clear_fill_verify() -> ResolvedElement:
            element = self.clear_and_fill(descriptor, value, index, timeout)
            if verify:
                actual = element.get_value()
                if actual != value:
                    raise VerificationError(f"value of {what}", value, actual)
            return element

        return retry(
            clear_fill_verify,
            attempts=retries, interval=interval, description=f"clear_fill {what}",
        )

    @tracked_action("clear_and_fill_active")
    def clear_and_fill_active(self, value: Union[str, _Absent, None] = ABSENT) -> ResolvedElement:
        """Clear the focused element with the driver, then set its value."""
        if is_absent(value):
            raise PreconditionError("clear_and_fill_active", ["value"])
        element = self.resolver.active_element()
        element.clear_value()
        element.set_value(value)
        return element

    @tracked_action("clear_fill_active_and_retry")
    def clear_fill_active_and_retry(
        self,
        value: Union[str, _Absent, None] = ABSENT,
        retries: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> ResolvedElement:
        if is_absent(value):
            raise PreconditionError("clear_fill_active_and_retry", ["value"])
        return retry(
            self.clear_and_fill_active, value,
            attempts=retries, interval=interval, description="clear_fill_active",
        )

    # ----------------------------------------------------------- smart fields

    @tracked_action("clear_and_fill_smart_field_input")
    def clear_and_fill_smart_field_input(
        self,
        descriptor: ElementDescriptor,
        value: Union[str, _Absent, None] = ABSENT,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> ResolvedElement:
        """
        Smart fields render their input with an id derived from the field id.
        The input is clicked, its content selected, then replaced.
        """
        _require_value("clear_and_fill_smart_field_input", descriptor, value)
        field_id = self.resolver.element_id(descriptor, index, timeout)
        field_input = ElementDescriptor.css(
            f"input[id*={css_string(field_id)}]", name=f"input of smart field #{field_id}"
        )
        element = self.click(field_input, 0, timeout)
        self.select_all(descriptor, index, timeout)
        element.set_value(value)
        return element

    @tracked_action("clear_and_fill_smart_field_input_and_retry")
    def clear_and_fill_smart_field_input_and_retry(
        self,
        descriptor: ElementDescriptor,
        value: Union[str, _Absent, None] = ABSENT,
        index: int = 0,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> ResolvedElement:
        _require_value("clear_and_fill_smart_field_input_and_retry", descriptor, value)
        return retry(
            self.clear_and_fill_smart_field_input, descriptor, value, index, timeout,
            attempts=retries, interval=interval, description=f"smart field {descriptor}",
        )

    @tracked_action("clear_smart_field_input")
    def clear_smart_field_input(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> None:
        self.clear(descriptor, index, timeout)

    @tracked_action("open_value_help")
    def open_value_help(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
        use_f4_key: bool = True,
    ) -> None:
        """Open the value help of a field with F4 or its value-help icon."""
        self.click(descriptor, index, timeout)
        if use_f4_key:
            self.press_f4()
            return
        field_id = self.resolver.element_id(descriptor, index, timeout)
        self.click(sibling(field_id, self.conventions.value_help_suffix), 0, timeout)

    # ----------------------------------------------------------------- search

    @tracked_action("search_for")
    def search_for(
        self,
        descriptor: ElementDescriptor,
        value: Union[str, _Absent, None] = ABSENT,
        index: int = 0,
        timeout: Optional[float] = None,
        use_enter: bool = True,
    ) -> None:
        """
        Enter a search term (verified) and trigger the search, either with
        Enter or by clicking the field's search button.
        """
        self.clear_fill_and_retry(descriptor, value, index, timeout)
        if use_enter:
            self.press_enter()
            return
        field_id = self.resolver.element_id(descriptor, index, timeout)
        self.click(sibling(field_id, self.conventions.search_suffix), 0, timeout)

    @tracked_action("reset_search")
    def reset_search(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Click the reset button of a search field.

        @throws NotFoundError if the field has no reset button, which is the
                case while the field is empty
        """
        field_id = self.resolver.element_id(descriptor, index, timeout)
        self.click(sibling(field_id, self.conventions.reset_suffix), 0, timeout)

    # ----------------------------------------------------------------- select

    @tracked_action("click_select_arrow")
    def click_select_arrow(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> None:
        """Open the popup of a select control through its arrow button."""
        field_id = self.resolver.element_id(descriptor, index, timeout)
        arrow_timeout = TimeConfig.current().select_arrow.timeout
        self.click(sibling(field_id, self.conventions.arrow_suffix), 0, arrow_timeout)

    @tracked_action("click_select_arrow_and_retry")
    def click_select_arrow_and_retry(
        self,
        descriptor: ElementDescriptor,
        index: int = 0,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> None:
        retry(
            self.click_select_arrow, descriptor, index, timeout,
            attempts=retries, interval=interval, description=f"select arrow of {descriptor}",
        )

    def _pick(self, option: ElementDescriptor, timeout: Optional[float]) -> None:
        self.resolver.scroll_to(option, 0, timeout)
        self.click(option, 0, timeout)

    @tracked_action("select_combo_box")
    def select_combo_box(
        self,
        descriptor: ElementDescriptor,
        value: Optional[str] = None,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Open a combo box and pick the item labelled `value`. Without a value
        the popup is only opened.
        """
        self.click_select_arrow(descriptor, index, timeout)
        if value:
            self._pick(popup_item(value, self.conventions), timeout)

    @tracked_action("select_multi_combo_box")
    def select_multi_combo_box(
        self,
        descriptor: ElementDescriptor,
        values: Union[str, Sequence[str], None] = None,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Open a multi combo box, tick the checkbox of each value in the given
        order, then close the popup with Enter. Without values the popup is
        only opened; empty labels are skipped.
        """
        self.click_select_arrow(descriptor, index, timeout)
        labels = [values] if isinstance(values, str) else list(values or [])
        wanted: List[str] = [value for value in labels if value]
        if not wanted:
            return
        for value in wanted:
            self._pick(popup_checkbox(value, self.conventions), timeout)
        self.press_enter()

    @tracked_action("select_box")
    def select_box(
        self,
        descriptor: ElementDescriptor,
        value: Optional[str] = None,
        index: int = 0,
        timeout: Optional[float] = None,
    ) -> None:
        """Open a select box and pick the option labelled `value`."""
        self.click_select_arrow(descriptor, index, timeout)
        if value:
            self._pick(select_item(value, self.conventions), timeout)


def _require_value(function: str, descriptor: Optional[ElementDescriptor], value: Any) -> None:
    if not is_absent(value):
        return
    missing = ["descriptor", "value"] if descriptor is None else ["value"]
    raise PreconditionError(function, missing)
