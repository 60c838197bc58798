"""
@file interfaces.py
@brief Abstract collaborator interfaces implemented by driver bindings.

The interaction core only talks to the browser through these interfaces.
A binding (see selenium_driver.py) adapts a concrete automation driver;
tests use an in-memory fake.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional, Sequence, Union


class Readiness(Enum):
    """How ready a resolved element must be, from weakest to strictest."""
    EXISTS = "exists"
    VISIBLE = "visible"
    CLICKABLE = "clickable"


class Key(Enum):
    """Symbolic keys understood by every driver binding."""
    ENTER = "Enter"
    TAB = "Tab"
    BACKSPACE = "Backspace"
    ESCAPE = "Escape"
    F4 = "F4"
    ARROW_LEFT = "ArrowLeft"
    ARROW_RIGHT = "ArrowRight"
    CONTROL = "Control"
    COMMAND = "Command"
    SHIFT = "Shift"


KeyInput = Union[Key, str]

MODIFIER_KEYS = frozenset({Key.CONTROL, Key.COMMAND, Key.SHIFT})

FIRE_PRESS_SCRIPT = """
const el = arguments[0];
const core = window.sap && sap.ui && sap.ui.core;
let control = null;
if (core && core.Element && core.Element.closestTo) {
    control = core.Element.closestTo(el);
} else if (window.jQuery && jQuery.fn.control) {
    control = jQuery(el).control(0);
}
if (control && typeof control.firePress === "function") {
    control.firePress();
    return true;
}
el.dispatchEvent(new MouseEvent("click", {bubbles: true, cancelable: true, view: window}));
return false;
"""


class IElementHandle(ABC):
    """
    A live reference to one element of the page.

    The reference may go stale when the page re-renders; callers re-query
    instead of holding on to handles.
    """

    # --- predicates ---

    @abstractmethod
    def exists(self) -> bool:
        """Whether the element is still attached to the document."""
        pass

    @abstractmethod
    def is_visible(self) -> bool:
        """Whether the element is rendered (not necessarily inside the viewport)."""
        pass

    @abstractmethod
    def is_visible_in_viewport(self) -> bool:
        pass

    @abstractmethod
    def is_clickable(self) -> bool:
        """Visible, enabled and not covered by another element at its centre."""
        pass

    @abstractmethod
    def is_selected(self) -> bool:
        pass

    # --- actions ---

    @abstractmethod
    def click(self) -> None:
        pass

    @abstractmethod
    def set_value(self, value: str) -> None:
        """
        Replace the element's value.

        Raises the driver's "invalid element state" error when the element
        cannot hold a value.
        """
        pass

    @abstractmethod
    def clear_value(self) -> None:
        pass

    @abstractmethod
    def get_value(self) -> str:
        pass

    @abstractmethod
    def get_text(self) -> str:
        pass

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        pass

    @property
    @abstractmethod
    def tag_name(self) -> str:
        """Lower-case tag name."""
        pass

    @abstractmethod
    def scroll_into_view(self) -> None:
        pass


class IUIDriver(ABC):
    """
    Session-level driver capabilities consumed by the resolver and the
    interaction primitives.
    """

    @abstractmethod
    def find_elements(
        self,
        strategy: str,
        value: str,
        root: Optional[IElementHandle] = None,
    ) -> List[IElementHandle]:
        """
        Query the document (or the subtree under `root`).

        @param strategy One of "css", "xpath", "id"
        @param value Selector text for the strategy
        @return Matches in document order, possibly empty
        """
        pass

    @abstractmethod
    def active_element(self) -> IElementHandle:
        """The element that currently holds input focus."""
        pass

    @abstractmethod
    def press_keys(self, keys: Sequence[KeyInput]) -> None:
        """
        Press keys on the focused element. Modifier keys in `keys` are held
        down while the remaining keys are typed, then released.
        """
        pass

    @abstractmethod
    def run_script(self, script: str, *args: Any) -> Any:
        """Run a script in the page and return its serializable result."""
        pass

    def fire_press(self, element: IElementHandle) -> Any:
        """
        Fire the press event of the UI5 control rendered by `element` in the
        page, as a user selection would. Elements that belong to no control
        with a press event receive a synthetic click instead.

        @return True if a control press was fired, False for the fallback click
        """
        return self.run_script(FIRE_PRESS_SCRIPT, element)

    @abstractmethod
    def clear_native_inputs(self, container_id: str, token_selector: str) -> int:
        """
        Blank the first native input and the first textarea found under the
        element with id `container_id`, and count the token chips matching
        `token_selector` inside it. A container that is itself an input or
        textarea is blanked directly.

        @return Number of token chips in the container
        """
        pass

    @property
    @abstractmethod
    def platform(self) -> str:
        """Platform of the browser host, e.g. "windows", "linux", "mac"."""
        pass
